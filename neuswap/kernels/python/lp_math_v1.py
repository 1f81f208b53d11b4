"""
Liquidity math kernel (v1 semantics).

Deposits are priced off the base-asset side:
- empty pool: the first depositor sets the ratio; shares are minted 1:1 with
  the base amount and the whole token offer is used;
- live pool: required_token = floor(base_in * token_reserve / base_reserve)
  and shares = floor(base_in * total_shares / base_reserve).

Withdrawals pay out a floor-rounded pro-rata slice of both reserves.
Every division floors, so rounding always favours the pool.
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class DepositResult:
    token_used: int
    shares_minted: int
    new_base_reserve: int
    new_token_reserve: int
    new_total_shares: int


@dataclass(frozen=True)
class WithdrawResult:
    base_out: int
    token_out: int
    new_base_reserve: int
    new_token_reserve: int
    new_total_shares: int


def required_token_amount(*, base_in: int, base_reserve: int, token_reserve: int) -> int:
    """
    Token amount a deposit of `base_in` must bring to keep the reserve ratio.
    """
    for name, v in (("base_in", base_in), ("base_reserve", base_reserve), ("token_reserve", token_reserve)):
        _require_int(name, v)
    if base_reserve <= 0:
        raise ValueError("base_reserve must be positive")
    if base_in < 0 or token_reserve < 0:
        raise ValueError("amounts must be non-negative")
    return (base_in * token_reserve) // base_reserve


def deposit(
    *,
    base_reserve: int,
    token_reserve: int,
    total_shares: int,
    base_in: int,
    token_offered: int,
) -> DepositResult:
    """
    Compute the token pulled and shares minted for a deposit.

    The caller checks `token_offered >= token_used` for live pools; this
    kernel only reports what the ratio requires.
    """
    for name, v in (
        ("base_reserve", base_reserve),
        ("token_reserve", token_reserve),
        ("total_shares", total_shares),
        ("base_in", base_in),
        ("token_offered", token_offered),
    ):
        _require_int(name, v)
    if min(base_reserve, token_reserve, total_shares, base_in, token_offered) < 0:
        raise ValueError("amounts must be non-negative")

    if total_shares == 0:
        token_used = token_offered
        minted = base_in
    else:
        token_used = required_token_amount(base_in=base_in, base_reserve=base_reserve, token_reserve=token_reserve)
        minted = (base_in * total_shares) // base_reserve

    return DepositResult(
        token_used=token_used,
        shares_minted=minted,
        new_base_reserve=base_reserve + base_in,
        new_token_reserve=token_reserve + token_used,
        new_total_shares=total_shares + minted,
    )


def withdraw(*, base_reserve: int, token_reserve: int, total_shares: int, shares: int) -> WithdrawResult:
    """
    Pro-rata payout for burning `shares`.

        base_out  = floor(base_reserve * shares / total_shares)
        token_out = floor(token_reserve * shares / total_shares)
    """
    for name, v in (
        ("base_reserve", base_reserve),
        ("token_reserve", token_reserve),
        ("total_shares", total_shares),
        ("shares", shares),
    ):
        _require_int(name, v)
    if total_shares <= 0:
        raise ValueError("total_shares must be positive")
    if shares <= 0:
        raise ValueError("shares must be positive")
    if shares > total_shares:
        raise ValueError(f"Cannot burn more shares than supply: {shares} > {total_shares}")

    base_out = (base_reserve * shares) // total_shares
    token_out = (token_reserve * shares) // total_shares

    return WithdrawResult(
        base_out=base_out,
        token_out=token_out,
        new_base_reserve=base_reserve - base_out,
        new_token_reserve=token_reserve - token_out,
        new_total_shares=total_shares - shares,
    )
