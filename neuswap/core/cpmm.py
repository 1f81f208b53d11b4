"""
Constant Product Market Maker (CPMM) pricing for Neuswap.

Thin, validated wrappers over the integer kernels in
`neuswap.kernels.python`. These functions raise the exchange's domain errors
(`InvalidReserve`, `InvalidAmount`) instead of the kernels' generic ones.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per call
- Invariant: after each swap, x' * y' >= x * y (floor rounding never pays out extra)
"""

from typing import Tuple

from ..errors import InvalidAmount, InvalidReserve
from ..kernels.python.cpmm_swap_v1 import PRICE_PRECISION
from ..kernels.python.cpmm_swap_v1 import SwapQuote
from ..kernels.python.cpmm_swap_v1 import spot_price as _kernel_spot_price
from ..kernels.python.cpmm_swap_v1 import swap_exact_in as _kernel_swap_exact_in
from ..kernels.python.lp_math_v1 import DepositResult, WithdrawResult
from ..kernels.python.lp_math_v1 import deposit as _kernel_deposit
from ..kernels.python.lp_math_v1 import withdraw as _kernel_withdraw
from ..state.balances import Amount, require_amount

__all__ = [
    "PRICE_PRECISION",
    "get_price",
    "get_amount",
    "compute_deposit",
    "compute_withdrawal",
]


def get_price(input_reserve: Amount, output_reserve: Amount) -> int:
    """
    Scaled spot price of the input asset in terms of the output asset.

        price = floor(input_reserve * 1000 / output_reserve)

    Pass (base_reserve, token_reserve) or the reverse depending on direction.

    Raises:
        InvalidReserve: If either reserve is zero
    """
    require_amount("input_reserve", input_reserve)
    require_amount("output_reserve", output_reserve)
    if input_reserve == 0 or output_reserve == 0:
        raise InvalidReserve()
    return _kernel_spot_price(input_reserve=input_reserve, output_reserve=output_reserve)


def get_amount(
    input_amount: Amount,
    input_reserve: Amount,
    output_reserve: Amount,
    fee_bps: int = 0,
) -> Amount:
    """
    Constant-product output for an exact input.

    With the default fee_bps=0:
        output = floor(input_amount * output_reserve / (input_reserve + input_amount))

    Args:
        input_amount: Amount of the input asset sold
        input_reserve: Reserve of the input asset before the trade
        output_reserve: Reserve of the output asset before the trade
        fee_bps: Input haircut in basis points (seam for a future swap fee)

    Returns:
        Output amount, always strictly below output_reserve

    Raises:
        InvalidReserve: If either reserve is zero
    """
    require_amount("input_amount", input_amount)
    require_amount("input_reserve", input_reserve)
    require_amount("output_reserve", output_reserve)
    if input_reserve == 0 or output_reserve == 0:
        raise InvalidReserve()
    quote: SwapQuote = _kernel_swap_exact_in(
        amount_in=input_amount,
        reserve_in=input_reserve,
        reserve_out=output_reserve,
        fee_bps=fee_bps,
    )
    return quote.amount_out


def compute_deposit(
    base_reserve: Amount,
    token_reserve: Amount,
    total_shares: Amount,
    base_in: Amount,
    token_offered: Amount,
) -> DepositResult:
    """
    Token pulled and shares minted for a deposit of `base_in` plus up to `token_offered`.

    For an empty pool both amounts must be zero (no-op) or both positive: a
    one-sided first deposit would leave shares without a price or a price
    without shares.
    """
    for name, v in (
        ("base_reserve", base_reserve),
        ("token_reserve", token_reserve),
        ("total_shares", total_shares),
        ("base_in", base_in),
        ("token_offered", token_offered),
    ):
        require_amount(name, v)

    if total_shares == 0 and (base_in == 0) != (token_offered == 0):
        raise InvalidAmount(
            f"initial deposit must supply both assets: base={base_in}, token={token_offered}"
        )
    if total_shares > 0 and base_reserve == 0:
        raise InvalidReserve()

    return _kernel_deposit(
        base_reserve=base_reserve,
        token_reserve=token_reserve,
        total_shares=total_shares,
        base_in=base_in,
        token_offered=token_offered,
    )


def compute_withdrawal(
    base_reserve: Amount,
    token_reserve: Amount,
    total_shares: Amount,
    shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Return (base_out, token_out) for burning `shares`.

    Raises:
        InvalidAmount: If shares is zero or exceeds total supply
        InvalidReserve: If the pool holds no shares at all
    """
    require_amount("shares", shares)
    if shares == 0:
        raise InvalidAmount("shares must be positive")
    if total_shares == 0:
        raise InvalidReserve()
    if shares > total_shares:
        raise InvalidAmount(f"shares must be in [1, {total_shares}]: {shares}")
    res: WithdrawResult = _kernel_withdraw(
        base_reserve=base_reserve,
        token_reserve=token_reserve,
        total_shares=total_shares,
        shares=shares,
    )
    return res.base_out, res.token_out
