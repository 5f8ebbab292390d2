"""
Natural logarithm over fixed-point values.

Range reduction factors out powers of two so the remaining argument y
lies in [1, 2), where the inverse hyperbolic tangent series converges
quickly:

    ln(x) = k·ln(2) + ln(y),   x = y·2^k
    ln(y) = 2·atanh(t) = 2·Σ t^(2n+1) / (2n+1),   t = (y - 1) / (y + 1)

Since t < 1/3 the series gains about one decimal digit per term. The
computation runs with guard digits and is truncated back to the
requested precision at the end.
"""

from fixed_options.core.fixed_point import truncate_div
from fixed_options.utils.constants import DECIMALS
from fixed_options.utils.exceptions import DomainError, InvalidDecimals

# ln(2) to 60 decimal places
LN2_DIGITS = 60
LN2_RAW = 693147180559945309417232121458176568075500134360255254120680

GUARD_DIGITS = 8
MAX_DECIMALS = LN2_DIGITS - GUARD_DIGITS


def check_decimals(decimals: int, component: str) -> None:
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise InvalidDecimals(decimals, 0, MAX_DECIMALS, component)


def ln2(decimals: int = DECIMALS) -> int:
    """ln(2) at the given precision, truncated."""
    check_decimals(decimals, "Logarithm")
    return LN2_RAW // 10 ** (LN2_DIGITS - decimals)


def ln(x: int, decimals: int = DECIMALS) -> int:
    """
    Natural logarithm of a fixed-point value.

    Args:
        x: Raw fixed-point argument, must be positive
        decimals: Precision of both argument and result

    Returns:
        ln(x) at the same precision

    Raises:
        DomainError: If x <= 0

    Examples:
        >>> ln(10**18)
        0
        >>> ln(2 * 10**18)
        693147180559945309
    """
    if x <= 0:
        raise DomainError(f"Logarithm: ln undefined for non-positive value {x}")
    check_decimals(decimals, "Logarithm")

    working = decimals + GUARD_DIGITS
    one = 10**working
    y = x * 10**GUARD_DIGITS

    # y = mantissa · 2^k with mantissa in [one, 2·one)
    k = y.bit_length() - one.bit_length()
    y = y >> k if k >= 0 else y << -k
    while y >= 2 * one:
        y >>= 1
        k += 1
    while y < one:
        y <<= 1
        k -= 1

    t = (y - one) * one // (y + one)
    t_squared = t * t // one
    total = 0
    term = t
    n = 0
    while term:
        total += term // (2 * n + 1)
        term = term * t_squared // one
        n += 1

    result = 2 * total + k * ln2(working)
    return truncate_div(result, 10**GUARD_DIGITS)
