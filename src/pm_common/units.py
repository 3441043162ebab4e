"""Integer arithmetic for collateral, bonds and claims.

All amounts are int base units (wei-like). No float, no Decimal.
Rounding direction is always chosen so the pool never pays out more than it
holds: payouts floor, fees ceil.
"""

BPS_DENOMINATOR = 10_000


def mul_div_down(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) on non-negative ints."""
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    return (a * b) // denominator


def ceil_div(a: int, b: int) -> int:
    """ceil(a / b) on non-negative ints: (a + b - 1) // b."""
    if b <= 0:
        raise ValueError(f"divisor must be positive, got {b}")
    return (a + b - 1) // b


def round_div(a: int, b: int) -> int:
    """a / b rounded half-up on non-negative ints."""
    if b <= 0:
        raise ValueError(f"divisor must be positive, got {b}")
    return (2 * a + b) // (2 * b)


def units_to_display(amount: int, decimals: int = 18) -> str:
    """Render base units as a decimal string: 1500000000000000000 -> '1.5'."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if frac == 0:
        return f"{sign}{whole:,}"
    frac_str = f"{frac:0{decimals}d}".rstrip("0")
    return f"{sign}{whole:,}.{frac_str}"
