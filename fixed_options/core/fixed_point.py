"""
Scaled-integer arithmetic.

A fixed-point value is a plain Python int read as ``raw / 10**decimals``
(18 decimals unless stated otherwise). Every operation here is a pure,
deterministic function of its inputs: no floating point is involved, so
results are bit-exact across platforms and across independent
implementations that follow the same rules.

Rules:
    - Products are rescaled by dividing by the scale.
    - Quotients are rescaled by multiplying the numerator by the scale.
    - Divisions truncate toward zero.
    - Any intermediate outside the signed 256-bit range is an overflow.
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

from fixed_options.utils.constants import DECIMALS, MAX_INT256, MIN_INT256
from fixed_options.utils.exceptions import ArithmeticOverflow, DivisionByZero, DomainError

Number = Union[int, str, Decimal, Fraction, float]


def check_range(value: int, operation: str = "value") -> int:
    """Raise ArithmeticOverflow unless value fits in a signed 256-bit integer."""
    if value > MAX_INT256 or value < MIN_INT256:
        raise ArithmeticOverflow(f"FixedPoint: {operation} overflows int256")
    return value


def truncate_div(numerator: int, denominator: int) -> int:
    """
    Integer division rounding toward zero.

    Python's ``//`` floors, which differs from truncation for negative
    quotients; every engine division goes through here instead.
    """
    if denominator == 0:
        raise DivisionByZero("FixedPoint: division by zero")
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def multiply(a: int, b: int, decimals: int = DECIMALS) -> int:
    """
    Multiply two fixed-point values.

    Args:
        a, b: Raw fixed-point values at ``decimals`` precision
        decimals: Number of decimal digits in the scale

    Returns:
        ``a * b / 10**decimals``, truncated toward zero

    Raises:
        ArithmeticOverflow: If the raw product leaves the int256 range
    """
    product = check_range(a * b, "multiply")
    return truncate_div(product, 10**decimals)


def divide(a: int, b: int, decimals: int = DECIMALS) -> int:
    """
    Divide two fixed-point values.

    Returns:
        ``a * 10**decimals / b``, truncated toward zero

    Raises:
        DivisionByZero: If ``b == 0``
        ArithmeticOverflow: If the scaled numerator leaves the int256 range
    """
    if b == 0:
        raise DivisionByZero("FixedPoint: division by zero")
    numerator = check_range(a * 10**decimals, "divide")
    return truncate_div(numerator, b)


def power(base: int, exponent: int, decimals: int = DECIMALS) -> int:
    """
    Raise a fixed-point base to a fixed-point exponent.

    Whole-number exponents use repeated squaring and accept any base
    (a negative exponent inverts the result). Fractional exponents are
    evaluated as ``exp(exponent * ln(base))`` and require a positive base.

    Examples:
        >>> power(2 * 10**18, 3 * 10**18)  # 2^3
        8000000000000000000
        >>> abs(power(4 * 10**18, 5 * 10**17) - 2 * 10**18) < 10**6  # 4^0.5
        True
    """
    one = 10**decimals

    if exponent % one == 0:
        n = exponent // one
        result = one
        square = base
        remaining = abs(n)
        while remaining:
            if remaining & 1:
                result = multiply(result, square, decimals)
            remaining >>= 1
            if remaining:
                square = multiply(square, square, decimals)
        return divide(one, result, decimals) if n < 0 else result

    if base <= 0:
        raise DomainError(f"FixedPoint: fractional power of non-positive base {base}")

    # exponent depends on this module, so import at call time
    from fixed_options.core.exponent import exp
    from fixed_options.core.logarithm import ln

    return exp(multiply(exponent, ln(base, decimals), decimals), decimals)


def sqrt(x: int, decimals: int = DECIMALS) -> int:
    """Square root of a fixed-point value, rounded down."""
    if x < 0:
        raise DomainError(f"FixedPoint: square root of negative value {x}")
    return math.isqrt(check_range(x * 10**decimals, "sqrt"))


def rescale(raw: int, from_decimals: int, to_decimals: int) -> int:
    """Move a raw value between precisions, truncating when precision drops."""
    if to_decimals >= from_decimals:
        return raw * 10 ** (to_decimals - from_decimals)
    return truncate_div(raw, 10 ** (from_decimals - to_decimals))


def to_fixed(value: Number, decimals: int = DECIMALS) -> int:
    """
    Convert a human-readable number into a raw fixed-point integer.

    Conversion is exact for ints, decimal strings, Decimal and Fraction;
    floats go through their shortest repr so ``0.2`` means 0.2, not the
    nearest binary double. Digits beyond ``decimals`` are truncated.

    Examples:
        >>> to_fixed("1275.126573")
        1275126573000000000000
        >>> to_fixed(0.03835616438)
        38356164380000000
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not fixed-point numbers")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise DomainError(f"Cannot convert {value} to fixed point")
        value = repr(value)
    if isinstance(value, str):
        value = value.strip().replace("_", "")
    rational = Fraction(value)
    return int(rational * 10**decimals)


def from_fixed(raw: int, decimals: int = DECIMALS) -> Decimal:
    """Exact Decimal view of a raw fixed-point value, for display."""
    return Decimal(raw).scaleb(-decimals)
