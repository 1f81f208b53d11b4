"""
Quote-asset ledger (ERC20-style fungible token).

The exchange treats this as an external collaborator: it only reads
`balance_of` and calls the transfer primitives. Failed transfers raise
`TransferFailed` and leave the ledger untouched.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import TransferFailed
from .balances import Address, Amount, BalanceTable, require_address, require_amount


class TokenLedger:
    """
    Fungible token with allowance-gated pull transfers.

    The full `initial_supply` is credited to `owner` at construction.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        initial_supply: Amount,
        owner: Address,
        *,
        address: Address,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.address = require_address("address", address)
        self._balances = BalanceTable()
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}
        self._balances.add(require_address("owner", owner), require_amount("initial_supply", initial_supply))

    def total_supply(self) -> Amount:
        return self._balances.total()

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> bool:
        """Allow `spender` to pull up to `amount` from `owner`. Overwrites any previous allowance."""
        require_address("owner", owner)
        require_address("spender", spender)
        require_amount("amount", amount)
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        require_address("sender", sender)
        require_address("to", to)
        require_amount("amount", amount)
        self._debit(sender, to, amount)
        return True

    def transfer_from(self, spender: Address, owner: Address, to: Address, amount: Amount) -> bool:
        """Pull `amount` from `owner` to `to`, spending `spender`'s allowance."""
        require_address("spender", spender)
        require_address("owner", owner)
        require_address("to", to)
        require_amount("amount", amount)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise TransferFailed(f"insufficient allowance: {allowed} < {amount}")
        self._debit(owner, to, amount)
        self.approve(owner, spender, allowed - amount)
        return True

    def _debit(self, src: Address, dst: Address, amount: Amount) -> None:
        held = self._balances.get(src)
        if held < amount:
            raise TransferFailed(f"insufficient token balance: {held} < {amount}")
        self._balances.move(src, dst, amount)

    def __repr__(self) -> str:
        return f"TokenLedger({self.symbol}, supply={self.total_supply()})"
