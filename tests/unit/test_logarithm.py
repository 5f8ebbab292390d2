"""
Unit tests for the fixed-point natural logarithm and exponential.

Reference values are checked to 12 significant digits.
"""

import math
import pytest
from fixed_options.core.exponent import exp
from fixed_options.core.fixed_point import to_fixed
from fixed_options.core.logarithm import ln, ln2
from fixed_options.utils.constants import SCALE
from fixed_options.utils.exceptions import ArithmeticOverflow, DomainError, InvalidDecimals

TOLERANCE = 10**6  # 1e-12 at 18 decimals


# ===========================
# Logarithm Tests
# ===========================


def test_ln_one_is_zero():
    assert ln(SCALE) == 0


def test_ln_two():
    assert ln(2 * SCALE) == 693147180559945309
    assert abs(ln(2 * SCALE) - to_fixed("0.693147180559945309417232")) < TOLERANCE


def test_ln_e():
    e = to_fixed("2.718281828459045235360287")
    assert abs(ln(e) - SCALE) < TOLERANCE


def test_ln_half():
    assert ln(5 * 10**17) == -693147180559945309


def test_ln_fifty():
    assert abs(ln(50 * SCALE) - to_fixed("3.91202300542814605861")) < TOLERANCE


@pytest.mark.parametrize("x", ["0.001", "0.37", "1.5", "123.456", "1000000"])
def test_ln_matches_math_log(x):
    expected = to_fixed(repr(math.log(float(x))))
    assert abs(ln(to_fixed(x)) - expected) < 10**4


def test_ln_higher_precision():
    assert ln(2 * 10**24, 24) == ln2(24)
    assert ln2(24) == 693147180559945309417232


def test_ln_non_positive_raises():
    with pytest.raises(DomainError):
        ln(0)
    with pytest.raises(DomainError):
        ln(-SCALE)


def test_ln_invalid_decimals_raises():
    with pytest.raises(InvalidDecimals):
        ln(SCALE, 60)


# ===========================
# Exponential Tests
# ===========================


def test_exp_zero_is_one():
    assert exp(0) == SCALE


def test_exp_one():
    assert exp(SCALE) == 2718281828459045235


def test_exp_negative():
    assert abs(exp(-SCALE) - to_fixed("0.367879441171442321595523")) < TOLERANCE


def test_exp_underflows_to_zero():
    assert exp(-100 * SCALE) == 0


def test_exp_overflow_raises():
    with pytest.raises(ArithmeticOverflow):
        exp(200 * SCALE)


@pytest.mark.parametrize("x", ["0.5", "1.5", "3", "42.195"])
def test_exp_inverts_ln(x):
    raw = to_fixed(x)
    assert abs(exp(ln(raw)) - raw) <= raw // 10**12
