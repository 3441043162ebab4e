"""Constant-product pricing for the embedded two-outcome pool.

A buy of `x` net collateral mints `x` complete pairs into the pool, then
releases the chosen side so that reserve1 * reserve2 does not drop:

    buy outcome1:  r2' = r2 + x
                   r1' = ceil(r1 * r2 / r2')
                   out = r1 + x - r1'

`r1 - r1 * r2 / (r2 + x)` is the plain swap term (paid-in side r2, paid-out
side r1); the extra `x` is the freshly minted half of the pair. Rounding r1'
up keeps the product non-decreasing and hands the remainder to the pool.
"""

from dataclasses import dataclass

from src.pm_common.units import BPS_DENOMINATOR, ceil_div, round_div


@dataclass(frozen=True)
class BuyQuote:
    output: int
    reserve1: int
    reserve2: int


def swap_output(reserve_out: int, reserve_in: int, amount_in: int) -> int:
    """floor(r_out - r_out * r_in / (r_in + amount_in)) for a pure swap."""
    if amount_in <= 0:
        return 0
    new_in = reserve_in + amount_in
    return reserve_out - ceil_div(reserve_out * reserve_in, new_in)


def quote_buy(reserve1: int, reserve2: int, net_amount: int, buy_outcome1: bool) -> BuyQuote:
    """Return the output and post-trade reserves for a buy of *net_amount*."""
    if net_amount <= 0:
        return BuyQuote(output=0, reserve1=reserve1, reserve2=reserve2)

    if buy_outcome1:
        out_reserve, in_reserve = reserve1, reserve2
    else:
        out_reserve, in_reserve = reserve2, reserve1

    swapped = swap_output(out_reserve, in_reserve, net_amount)
    new_in = in_reserve + net_amount
    new_out = out_reserve - swapped
    output = swapped + net_amount

    if buy_outcome1:
        return BuyQuote(output=output, reserve1=new_out, reserve2=new_in)
    return BuyQuote(output=output, reserve1=new_in, reserve2=new_out)


def probability_bps(reserve1: int, reserve2: int) -> tuple[int, int]:
    """Implied probabilities in basis points, summing to 10000.

    Outcome1 is priced by the *other* side's reserve: p1 = r2 / (r1 + r2).
    An empty pool reads as 50/50.
    """
    total = reserve1 + reserve2
    if total <= 0:
        half = BPS_DENOMINATOR // 2
        return half, BPS_DENOMINATOR - half
    p1 = round_div(BPS_DENOMINATOR * reserve2, total)
    return p1, BPS_DENOMINATOR - p1
