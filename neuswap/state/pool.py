"""
Pool state for a Neuswap exchange.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from .balances import ZERO_ADDRESS, Address, Amount


def compute_exchange_address(factory: Address, token: Address) -> Address:
    """
    Deterministically derive the address of the exchange a factory deploys for a token.

        address = "0x" || sha256("NeuswapExchange" || factory || token)[:20 bytes]
    """
    if not factory or not token:
        raise ValueError("factory and token must be non-empty")
    if token == ZERO_ADDRESS:
        raise ValueError("invalid token address")
    data = b"NeuswapExchange" + factory.encode("utf-8") + token.encode("utf-8")
    return "0x" + hashlib.sha256(data).hexdigest()[:40]


@dataclass
class PoolState:
    """
    Reserve record of a single exchange.

    Only the base reserve is stored. The quote reserve is whatever the token
    ledger reports for `address`, so it is always passed in by the caller.

    Attributes:
        address: Identity of the exchange holding the reserves
        token: Address of the quote token ledger
        factory: Identity that deployed the exchange (immutable, informational)
        base_reserve: Native value currently held as reserve
    """
    address: Address
    token: Address
    factory: Address
    base_reserve: Amount = 0

    def __post_init__(self):
        """Validate pool state invariants."""
        if not self.address or not self.token or not self.factory:
            raise ValueError("pool identities must be non-empty")
        if self.token == ZERO_ADDRESS:
            raise ValueError("invalid token address")
        if self.address == self.token:
            raise ValueError("pool address must differ from token address")
        if self.base_reserve < 0:
            raise ValueError(f"base_reserve must be non-negative: {self.base_reserve}")

    def verify_invariant(self, quote_reserve: Amount, total_shares: Amount) -> bool:
        """
        Verify the emptiness invariant:
            total_shares == 0 <=> base_reserve == 0 <=> quote_reserve == 0

        and that a live pool holds strictly positive reserves.
        """
        if total_shares == 0:
            return self.base_reserve == 0 and quote_reserve == 0
        return self.base_reserve > 0 and quote_reserve > 0

    def __repr__(self) -> str:
        return (
            f"PoolState(address={self.address[:10]}..., "
            f"token={self.token[:10]}..., base_reserve={self.base_reserve})"
        )
