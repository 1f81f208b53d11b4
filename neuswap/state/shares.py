"""
Liquidity-share ledger for a Neuswap exchange.

Shares are a plain fungible balance: the exchange mints them on deposit and
burns them on withdrawal; holders may move their own shares freely.
"""

from __future__ import annotations

import logging
from typing import Dict

from ..errors import InsufficientBalance, Unauthorized
from .balances import Address, Amount, BalanceTable, require_address, require_amount

logger = logging.getLogger(__name__)

SHARE_NAME = "Neuswap-V1"
SHARE_SYMBOL = "NEU-V1"


class ShareLedger:
    """
    Share balances plus total supply.

    Only `minter` (the owning exchange) may mint or burn. The sum of all
    balances always equals `total_supply()`.
    """

    def __init__(self, minter: Address, *, name: str = SHARE_NAME, symbol: str = SHARE_SYMBOL) -> None:
        self.minter = require_address("minter", minter)
        self.name = name
        self.symbol = symbol
        self._balances = BalanceTable()

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def total_supply(self) -> Amount:
        return self._balances.total()

    def mint(self, caller: Address, holder: Address, amount: Amount) -> None:
        """Credit `amount` new shares to `holder`. Zero is accepted as a no-op."""
        self._require_minter(caller)
        require_address("holder", holder)
        require_amount("amount", amount)
        if amount == 0:
            return
        self._balances.add(holder, amount)
        logger.debug("mint %s shares to %s (supply=%s)", amount, holder, self.total_supply())

    def burn(self, caller: Address, holder: Address, amount: Amount) -> None:
        self._require_minter(caller)
        require_amount("amount", amount)
        if self.balance_of(holder) < amount:
            raise InsufficientBalance(
                f"insufficient balance: {self.balance_of(holder)} < {amount}"
            )
        self._balances.subtract(holder, amount)
        logger.debug("burn %s shares from %s (supply=%s)", amount, holder, self.total_supply())

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        require_address("to", to)
        require_amount("amount", amount)
        if self.balance_of(sender) < amount:
            raise InsufficientBalance(
                f"insufficient balance: {self.balance_of(sender)} < {amount}"
            )
        self._balances.move(sender, to, amount)
        return True

    def holders(self) -> Dict[Address, Amount]:
        """All non-zero share balances."""
        return self._balances.get_all_balances()

    def verify_supply(self) -> bool:
        """Verify the tracked total supply matches the sum of balances."""
        return self._balances.verify_total()

    def _require_minter(self, caller: Address) -> None:
        if caller != self.minter:
            raise Unauthorized(f"only {self.minter} may mint or burn shares")

    def __repr__(self) -> str:
        return f"ShareLedger({self.symbol}, supply={self.total_supply()}, holders={len(self.holders())})"
