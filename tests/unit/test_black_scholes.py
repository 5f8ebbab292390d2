"""
Unit tests for fixed-point Black-Scholes pricing.

This module validates:
1. Known solutions (textbook and reference scenarios)
2. Agreement with a floating-point reference built on scipy
3. Put-call parity
4. Edge cases (saturated tails, negative rates)
5. Monotonicity properties
6. Input validation
"""

import math
import pytest
from scipy.stats import norm
from fixed_options.core.black_scholes import BlackScholes, discount_factor, z_scores
from fixed_options.core.fixed_point import from_fixed, to_fixed
from fixed_options.diagnostics.arbitrage import check_put_call_parity
from fixed_options.utils.constants import PRECISION
from fixed_options.utils.exceptions import DomainError
from fixed_options.utils.types import PricingInputs


def reference_price(option_type, S, K, sigma, r, T):
    """Floating-point Black-Scholes used as an oracle."""
    d1 = (math.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    if option_type == "call":
        return S * norm.cdf(d1) - K * math.exp(-r * T) * norm.cdf(d2)
    return K * math.exp(-r * T) * norm.cdf(-d2) - S * norm.cdf(-d1)


def approximately(actual, expected, band=0.10):
    """Within a relative band around the expected value."""
    return abs(actual - expected) <= abs(expected) * band


# ===========================
# Known Solutions Tests
# ===========================


@pytest.mark.parametrize(
    "spot,strike,sigma,time,expected",
    [
        ("368", "320", "0.8", "0.009589041096", 0.3991972191),
        ("10500", "11000", "1.2", "0.03835616438", 1275.126573),
    ],
)
def test_put_reference_scenarios(bs, spot, strike, sigma, time, expected):
    price = bs.get_put_price(to_fixed(spot), to_fixed(strike), to_fixed(sigma), 0, to_fixed(time))
    assert approximately(float(from_fixed(price)), expected)


def test_put_six_and_a_half_days(bs):
    """368 spot, 320 strike, 118% volatility, 6.5 days to expiry."""
    price = bs.get_put_price(to_fixed(368), to_fixed(320), to_fixed("1.18"), 0, to_fixed("6.5") // 365)

    assert approximately(float(from_fixed(price)), 5.8)
    assert abs(float(from_fixed(price)) - 5.5414) < 0.02


@pytest.mark.parametrize(
    "spot,strike,sigma,time,expected",
    [
        ("601", "580", "0.824", "0.02283105023", 40.99782),
        ("601", "660", "0.824", "0.0114155251141553", 4.0835637054095),
    ],
)
def test_call_reference_scenarios(bs, spot, strike, sigma, time, expected):
    price = bs.get_call_price(to_fixed(spot), to_fixed(strike), to_fixed(sigma), 0, to_fixed(time))
    assert approximately(float(from_fixed(price)), expected)


def test_atm_call_known_solution(bs, standard_params):
    """
    Hull's "Options, Futures, and Other Derivatives".
    S=100, K=100, T=1, r=5%, σ=20% → Call ≈ 10.4506
    """
    price = float(from_fixed(bs.get_call_price(**standard_params)))
    assert abs(price - 10.4506) < 0.01, f"Expected ~10.4506, got {price}"


def test_atm_put_known_solution(bs, standard_params):
    """S=100, K=100, T=1, r=5%, σ=20% → Put ≈ 5.5735"""
    price = float(from_fixed(bs.get_put_price(**standard_params)))
    assert abs(price - 5.5735) < 0.01, f"Expected ~5.5735, got {price}"


@pytest.mark.parametrize(
    "option_type,S,K,sigma,r,T",
    [
        ("call", 368, 320, 1.18, 0.0, 6.5 / 365),
        ("put", 368, 320, 1.18, 0.0, 6.5 / 365),
        ("call", 100, 120, 0.35, 0.03, 0.5),
        ("put", 100, 80, 0.6, -0.01, 2.0),
        ("call", 28994.01, 60000, 1.5, 0.0, 0.1483516483516),
        ("put", 1.25, 1.0, 0.9, 0.1, 0.25),
    ],
)
def test_matches_float_reference(bs, option_type, S, K, sigma, r, T):
    """Table interpolation keeps every price within (S + K)·2e-5 of the float formula."""
    price = bs.get_price(option_type, to_fixed(S), to_fixed(K), to_fixed(sigma), to_fixed(r), to_fixed(T))
    expected = reference_price(option_type, S, K, sigma, r, T)
    assert abs(float(from_fixed(price)) - expected) < (S + K) * 2e-5


# ===========================
# Put-Call Parity Tests
# ===========================


@pytest.mark.parametrize(
    "S,K,sigma,r,T",
    [
        ("100", "100", "0.2", "0.05", "1"),
        ("110", "100", "0.3", "0.02", "0.25"),
        ("10500", "11000", "1.2", "0", "0.03835616438"),
        ("50", "70", "0.8", "-0.02", "3"),
    ],
)
def test_put_call_parity(bs, S, K, sigma, r, T):
    """C - P = S - K·e^(-rT) holds to a few raw units."""
    args = [to_fixed(S), to_fixed(K), to_fixed(sigma), to_fixed(r), to_fixed(T)]
    call = bs.get_call_price(*args)
    put = bs.get_put_price(*args)

    result = check_put_call_parity(call, put, args[0], args[1], args[4], args[3], tolerance=10)
    assert result.is_valid, result.violations


# ===========================
# Edge Cases Tests
# ===========================


def test_deep_otm_call_is_zero(bs):
    """Both CDF terms saturate at 0."""
    price = bs.get_call_price(to_fixed(100), to_fixed(1000), to_fixed("0.1"), 0, to_fixed("0.01"))
    assert price == 0


def test_deep_itm_call_is_intrinsic(bs):
    """Both CDF terms saturate at 1."""
    price = bs.get_call_price(to_fixed(1000), to_fixed(100), to_fixed("0.1"), 0, to_fixed("0.01"))
    assert price == to_fixed(900)


def test_negative_rate_allowed(bs, standard_params):
    params = dict(standard_params, risk_free=to_fixed("-0.01"))
    assert bs.get_call_price(**params) > 0
    assert bs.get_put_price(**params) > bs.get_put_price(**standard_params)


def test_prices_never_negative(bs):
    for strike in (1, 50, 100, 200, 10_000):
        args = (to_fixed(100), to_fixed(strike), to_fixed("0.05"), to_fixed("0.05"), to_fixed("0.02"))
        assert bs.get_call_price(*args) >= 0
        assert bs.get_put_price(*args) >= 0


# ===========================
# d1 and d2 Tests
# ===========================


def test_z_scores_exact(standard_params):
    """ln(1) = 0, so d1 = (0.05 + 0.02) / 0.2 exactly."""
    d1, d2 = z_scores(**standard_params)
    assert d1 == 35 * PRECISION // 100
    assert d2 == 15 * PRECISION // 100


def test_d1_d2_relationship(itm_call_params):
    """d1 - d2 = σ√T."""
    d1, d2 = z_scores(**itm_call_params)
    assert d1 - d2 == 2 * PRECISION // 10


def test_discount_factor():
    assert discount_factor(0, to_fixed(5)) == PRECISION
    assert abs(discount_factor(to_fixed("0.05"), to_fixed(1)) - to_fixed("0.951229424500714", 24)) < 10**9


# ===========================
# Monotonicity Tests
# ===========================


def test_call_increases_with_volatility(bs, standard_params):
    prices = [
        bs.get_call_price(**dict(standard_params, sigma=to_fixed(s / 10)))
        for s in range(1, 11)
    ]
    assert all(a < b for a, b in zip(prices, prices[1:]))


def test_call_never_drops_on_fine_volatility_grid(bs, standard_params):
    """Steps of 1e-5 in volatility move z by far less than one table bucket."""
    prices = [
        bs.get_call_price(**dict(standard_params, sigma=to_fixed("0.2") + i * 10**13))
        for i in range(201)
    ]
    assert all(a <= b for a, b in zip(prices, prices[1:]))
    assert prices[-1] > prices[0]


def test_call_decreases_with_strike(bs, standard_params):
    prices = [
        bs.get_call_price(**dict(standard_params, strike=to_fixed(k)))
        for k in range(80, 125, 5)
    ]
    assert all(a > b for a, b in zip(prices, prices[1:]))


def test_put_increases_with_strike(bs, standard_params):
    prices = [
        bs.get_put_price(**dict(standard_params, strike=to_fixed(k)))
        for k in range(80, 125, 5)
    ]
    assert all(a < b for a, b in zip(prices, prices[1:]))


# ===========================
# Pricing Function Tests
# ===========================


def test_get_price_dispatch(bs, standard_params):
    args = standard_params.values()
    assert bs.get_price("call", *args) == bs.get_call_price(**standard_params)
    assert bs.get_price("put", *args) == bs.get_put_price(**standard_params)


def test_get_price_invalid_type(bs, standard_params):
    with pytest.raises(ValueError, match="option_type"):
        bs.get_price("straddle", *standard_params.values())


def test_price_from_inputs(bs, standard_params):
    inputs = PricingInputs(**standard_params)
    assert bs.price("call", inputs) == bs.get_call_price(**standard_params)


def test_deterministic(standard_params):
    assert BlackScholes().get_call_price(**standard_params) == BlackScholes().get_call_price(**standard_params)


# ===========================
# Input Validation Tests
# ===========================


@pytest.mark.parametrize("field", ["spot", "strike", "sigma", "time_to_maturity"])
@pytest.mark.parametrize("value", [0, -1])
def test_non_positive_inputs_raise(bs, standard_params, field, value):
    with pytest.raises(DomainError):
        bs.get_call_price(**dict(standard_params, **{field: value}))
    with pytest.raises(DomainError):
        bs.get_put_price(**dict(standard_params, **{field: value}))
