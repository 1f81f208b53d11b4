"""
Core exchange algorithms
"""

from .cpmm import (
    PRICE_PRECISION,
    get_price,
    get_amount,
    compute_deposit,
    compute_withdrawal,
)
from .exchange import Call, Exchange
from .factory import Factory

__all__ = [
    "PRICE_PRECISION",
    "get_price",
    "get_amount",
    "compute_deposit",
    "compute_withdrawal",
    "Call",
    "Exchange",
    "Factory",
]
