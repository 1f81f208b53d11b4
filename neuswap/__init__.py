"""
Neuswap: a constant-product exchange between a native value unit and one token.
"""

from .config import ExchangeConfig
from .core.exchange import Call, Exchange
from .core.factory import Factory
from .errors import (
    ExchangeError,
    ExchangeExists,
    InsufficientBalance,
    InsufficientOutputAmount,
    InsufficientQuoteAmount,
    InvalidAmount,
    InvalidReserve,
    ReentrantCall,
    TransferFailed,
    Unauthorized,
)
from .state.native import NativeLedger
from .state.token import TokenLedger

__all__ = [
    "Call",
    "Exchange",
    "ExchangeConfig",
    "Factory",
    "NativeLedger",
    "TokenLedger",
    "ExchangeError",
    "ExchangeExists",
    "InsufficientBalance",
    "InsufficientOutputAmount",
    "InsufficientQuoteAmount",
    "InvalidAmount",
    "InvalidReserve",
    "ReentrantCall",
    "TransferFailed",
    "Unauthorized",
]
