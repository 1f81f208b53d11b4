"""
State management for Neuswap exchanges
"""

from .balances import BalanceTable
from .native import NativeLedger
from .pool import PoolState, compute_exchange_address
from .shares import ShareLedger
from .token import TokenLedger

__all__ = [
    "BalanceTable",
    "NativeLedger",
    "PoolState",
    "compute_exchange_address",
    "ShareLedger",
    "TokenLedger",
]
