"""
Single-asset balance tracking.

Implements BalanceTable[Address] -> Amount. Every ledger in the exchange
(shares, quote token, native value) keeps its balances in one of these.
"""

from __future__ import annotations

from typing import Dict

from ..errors import InvalidAmount


# Type aliases
Address = str  # Opaque participant identity
Amount = int  # Non-negative integer (arbitrary precision)

# The zero identity; never a valid owner or counterparty.
ZERO_ADDRESS = "0x" + "00" * 20


def require_amount(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative: {value}")
    return value


def require_address(name: str, value: object) -> Address:
    if not isinstance(value, str) or not value:
        raise TypeError(f"{name} must be a non-empty string")
    return value


class BalanceTable:
    """
    Sparse balance table mapping address -> amount.

    Notes:
    - Balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - `total()` is maintained incrementally so supply checks stay O(1).
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}
        self._total: Amount = 0

    def get(self, address: Address) -> Amount:
        """Get balance for address. Returns 0 if not found."""
        return self._balances.get(address, 0)

    def set(self, address: Address, amount: Amount) -> None:
        """Set balance for address."""
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        self._total += amount - self.get(address)
        if amount == 0:
            self._balances.pop(address, None)
        else:
            self._balances[address] = amount

    def add(self, address: Address, delta: int) -> None:
        """Add delta to a balance (delta may be negative)."""
        current = self.get(address)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(address, new_balance)

    def subtract(self, address: Address, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(address, -delta)

    def move(self, src: Address, dst: Address, amount: Amount) -> None:
        """Move `amount` from src to dst. Fails without side effects if src is short."""
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")
        if self.get(src) < amount:
            raise ValueError(f"Insufficient balance: {self.get(src)} < {amount}")
        self.subtract(src, amount)
        self.add(dst, amount)

    def total(self) -> Amount:
        """Sum of all balances."""
        return self._total

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return all non-zero balances."""
        return dict(self._balances)

    def verify_total(self) -> bool:
        """Verify the running total matches the sum of balances."""
        return sum(self._balances.values()) == self._total

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries, total={self._total})"
