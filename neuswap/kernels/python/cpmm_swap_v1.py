"""
CPMM pricing kernel (v1 semantics).

- Output for an exact input solves (r_in + in) * (r_out - out) = r_in * r_out
  for `out`, floored: out = floor(in * r_out / (r_in + in)).
- No fee is charged by default. A `fee_bps` seam applies a Uniswap-style input
  haircut; with fee_bps == 0 the formula reduces exactly to the one above.
- Spot price is a scaled ratio, floor(r_in * PRICE_PRECISION / r_out).

All functions are pure and integer-only; they raise ValueError/TypeError on
bad inputs and leave domain error mapping to `neuswap.core.cpmm`.
"""

from __future__ import annotations

from dataclasses import dataclass


BPS_DENOM = 10_000
PRICE_PRECISION = 1000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out: int
    fee_bps: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def spot_price(*, input_reserve: int, output_reserve: int) -> int:
    """
    Compute `floor(input_reserve * PRICE_PRECISION / output_reserve)`.
    """
    _require_int("input_reserve", input_reserve)
    _require_int("output_reserve", output_reserve)
    if input_reserve <= 0 or output_reserve <= 0:
        raise ValueError("reserves must be positive")
    return (input_reserve * PRICE_PRECISION) // output_reserve


def amount_out(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> int:
    """
    Exact-in output amount.

        net_in     = amount_in * (10_000 - fee_bps)
        amount_out = floor(net_in * reserve_out / (reserve_in * 10_000 + net_in))
    """
    for name, v in (
        ("amount_in", amount_in),
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)

    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("reserves must be positive")
    if amount_in < 0:
        raise ValueError("amount_in must be non-negative")
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM})")

    net_in = amount_in * (BPS_DENOM - fee_bps)
    numerator = net_in * reserve_out
    denominator = reserve_in * BPS_DENOM + net_in
    out = numerator // denominator

    if out >= reserve_out:
        raise AssertionError("swap would drain the output reserve")
    return out


def swap_exact_in(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> SwapQuote:
    """
    Exact-in swap quote + post-state.

    Raises ValueError if the post-swap product would fall below the pre-swap product.
    """
    out = amount_out(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps)

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - out
    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise ValueError(f"Invariant violation: new_k ({k_after}) < old_k ({k_before})")

    return SwapQuote(
        amount_in=amount_in,
        amount_out=out,
        fee_bps=fee_bps,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
