"""
Native value (base asset) balances.

Value attached to a call moves through here; the exchange's own balance is
what it holds in base reserve.
"""

from __future__ import annotations

from ..errors import TransferFailed
from .balances import Address, Amount, BalanceTable, require_address, require_amount


class NativeLedger:
    """Base-asset balances for every identity, with a faucet for funding accounts."""

    def __init__(self) -> None:
        self._balances = BalanceTable()

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def total_supply(self) -> Amount:
        return self._balances.total()

    def mint(self, to: Address, amount: Amount) -> None:
        self._balances.add(require_address("to", to), require_amount("amount", amount))

    def transfer(self, sender: Address, to: Address, amount: Amount) -> None:
        require_address("sender", sender)
        require_address("to", to)
        require_amount("amount", amount)
        held = self._balances.get(sender)
        if held < amount:
            raise TransferFailed(f"insufficient value: {held} < {amount}")
        self._balances.move(sender, to, amount)

    def __repr__(self) -> str:
        return f"NativeLedger(supply={self.total_supply()})"
