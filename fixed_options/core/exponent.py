"""
Exponential function over fixed-point values.

Uses the log identity exp(x) = 2^k · exp(r) with x = k·ln(2) + r, so the
Taylor series only ever sees |r| < ln(2), and the power of two is applied
as a bit shift.
"""

from fixed_options.core.fixed_point import check_range, truncate_div
from fixed_options.core.logarithm import GUARD_DIGITS, check_decimals, ln2
from fixed_options.utils.constants import DECIMALS
from fixed_options.utils.exceptions import ArithmeticOverflow

# 2^256 already exceeds int256 whatever the mantissa
MAX_BINARY_EXPONENT = 256


def exp(x: int, decimals: int = DECIMALS) -> int:
    """
    e raised to a fixed-point power.

    Args:
        x: Raw fixed-point exponent, any sign
        decimals: Precision of both argument and result

    Returns:
        exp(x) at the same precision; very negative inputs underflow to 0

    Raises:
        ArithmeticOverflow: If the result does not fit in int256

    Examples:
        >>> exp(0)
        1000000000000000000
        >>> exp(10**18)
        2718281828459045235
    """
    check_decimals(decimals, "Exponent")

    working = decimals + GUARD_DIGITS
    one = 10**working
    log_two = ln2(working)
    scaled = x * 10**GUARD_DIGITS

    k = truncate_div(scaled, log_two)
    if k >= MAX_BINARY_EXPONENT:
        raise ArithmeticOverflow(f"Exponent: exp({x}) overflows int256")
    remainder = scaled - k * log_two

    total = one
    term = one
    n = 1
    while term:
        term = truncate_div(term * remainder, one * n)
        total += term
        n += 1

    total = total << k if k >= 0 else total >> -k
    return check_range(total // 10**GUARD_DIGITS, "exp")
