"""Exception types for the exchange.

Every failure aborts the whole call; the exchange undoes its own moves for
that call before the exception reaches the caller. Each class carries a default message
so callers (and tests) can match on text as well as type.
"""

from __future__ import annotations

from typing import Optional


class ExchangeError(ValueError):
    """Base class for every failure surfaced by the exchange and its ledgers."""

    default_message = "exchange error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class InsufficientQuoteAmount(ExchangeError):
    """Offered token amount is below what the current reserve ratio requires."""

    default_message = "insufficient token amount"


class InsufficientOutputAmount(ExchangeError):
    """Swap output is below the caller's declared minimum."""

    default_message = "insufficient output amount"


class InvalidReserve(ExchangeError):
    """A pricing query was made against a zero reserve."""

    default_message = "invalid reserves"


class TransferFailed(ExchangeError):
    """An asset ledger refused a transfer (balance or allowance too low)."""

    default_message = "transfer failed"


class InsufficientBalance(ExchangeError):
    """A share burn or transfer exceeds the holder's balance."""

    default_message = "insufficient balance"


class InvalidAmount(ExchangeError):
    """An amount is negative or otherwise outside its domain."""

    default_message = "invalid amount"


class Unauthorized(ExchangeError):
    """A restricted ledger entry point was called by someone other than its owner."""

    default_message = "unauthorized"


class ReentrantCall(ExchangeError):
    """A state-changing call re-entered the exchange before the previous one finished."""

    default_message = "reentrant call"


class ExchangeExists(ExchangeError):
    """The factory already holds an exchange for this token."""

    default_message = "exchange already exists"
