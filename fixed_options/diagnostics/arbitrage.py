"""
Arbitrage diagnostics for fixed-point option prices.

This module implements no-arbitrage checks over raw 18-decimal prices:
- Price bounds validation (call and put together)
- Bounds for a single observed price, ahead of an implied volatility solve
- Put-call parity
- Strike monotonicity

A target price outside its bounds has no implied volatility, so the
solver can only end in NonConvergence; checking first gives the caller
a better explanation.
"""

from dataclasses import dataclass

from fixed_options.core.black_scholes import discount_factor
from fixed_options.core.fixed_point import from_fixed, multiply
from fixed_options.utils.constants import ARBITRAGE_TOLERANCE, PARITY_TOLERANCE, PRECISION_DECIMALS
from fixed_options.utils.types import ArbitrageCheck, OptionType


@dataclass
class OptionData:
    """Container for one quoted option."""

    strike: int
    price: int
    option_type: OptionType


def _discounted_strike(strike: int, time_to_maturity: int, risk_free: int) -> int:
    return multiply(strike, discount_factor(risk_free, time_to_maturity), PRECISION_DECIMALS)


def _bounds(
    option_type: OptionType, spot: int, strike: int, time_to_maturity: int, risk_free: int
) -> tuple[int, int]:
    discounted_strike = _discounted_strike(strike, time_to_maturity, risk_free)
    if option_type == "call":
        return max(spot - discounted_strike, 0), spot
    return max(discounted_strike - spot, 0), discounted_strike


def check_target_price(
    target_price: int,
    option_type: OptionType,
    spot: int,
    strike: int,
    time_to_maturity: int,
    risk_free: int,
    tolerance: int = ARBITRAGE_TOLERANCE,
) -> ArbitrageCheck:
    """
    Check one observed price against its no-arbitrage bounds.

    Bounds:
        Call: max(S - K·e^(-rT), 0) <= C <= S
        Put:  max(K·e^(-rT) - S, 0) <= P <= K·e^(-rT)

    Returns:
        ArbitrageCheck with lower/upper bounds in details
    """
    lower, upper = _bounds(option_type, spot, strike, time_to_maturity, risk_free)
    violations = []

    if target_price < lower - tolerance:
        violations.append(
            f"{option_type.capitalize()} price {from_fixed(target_price)} "
            f"below lower bound {from_fixed(lower)}"
        )
    if target_price > upper + tolerance:
        violations.append(
            f"{option_type.capitalize()} price {from_fixed(target_price)} "
            f"above upper bound {from_fixed(upper)}"
        )

    details = {"lower_bound": lower, "upper_bound": upper}
    return ArbitrageCheck(is_valid=not violations, violations=violations, details=details)


def check_price_bounds(
    call_price: int,
    put_price: int,
    spot: int,
    strike: int,
    time_to_maturity: int,
    risk_free: int,
    tolerance: int = ARBITRAGE_TOLERANCE,
) -> ArbitrageCheck:
    """
    Validate a call and a put on the same strike against their bounds.

    Returns:
        ArbitrageCheck with one boolean per bound in details
    """
    call = check_target_price(call_price, "call", spot, strike, time_to_maturity, risk_free, tolerance)
    put = check_target_price(put_price, "put", spot, strike, time_to_maturity, risk_free, tolerance)

    details = {
        "call_lower_bound": call_price >= call.details["lower_bound"] - tolerance,
        "call_upper_bound": call_price <= call.details["upper_bound"] + tolerance,
        "put_lower_bound": put_price >= put.details["lower_bound"] - tolerance,
        "put_upper_bound": put_price <= put.details["upper_bound"] + tolerance,
    }
    violations = call.violations + put.violations
    return ArbitrageCheck(is_valid=not violations, violations=violations, details=details)


def check_put_call_parity(
    call_price: int,
    put_price: int,
    spot: int,
    strike: int,
    time_to_maturity: int,
    risk_free: int,
    tolerance: int = PARITY_TOLERANCE,
) -> ArbitrageCheck:
    """
    Validate put-call parity.

    Put-call parity:
        C - P = S - K·e^(-rT)

    Returns:
        ArbitrageCheck with both sides and their difference in details
    """
    lhs = call_price - put_price
    rhs = spot - _discounted_strike(strike, time_to_maturity, risk_free)
    diff = abs(lhs - rhs)
    is_valid = diff <= tolerance

    violations = []
    if not is_valid:
        violations.append(
            f"Put-call parity violated: C - P = {from_fixed(lhs)}, "
            f"S - K·e^(-rT) = {from_fixed(rhs)}, diff = {from_fixed(diff)}"
        )

    details = {"parity_lhs": lhs, "parity_rhs": rhs, "difference": diff}
    return ArbitrageCheck(is_valid=is_valid, violations=violations, details=details)


def check_strike_monotonicity(
    options: list[OptionData], tolerance: int = ARBITRAGE_TOLERANCE
) -> ArbitrageCheck:
    """
    Check monotonicity in strike: calls decrease, puts increase.

    For calls: C(K1) >= C(K2) if K1 < K2
    For puts: P(K1) <= P(K2) if K1 < K2
    """
    violations = []
    details = {}

    calls = sorted([opt for opt in options if opt.option_type == "call"], key=lambda x: x.strike)
    puts = sorted([opt for opt in options if opt.option_type == "put"], key=lambda x: x.strike)

    for near, far in zip(calls, calls[1:]):
        if near.price < far.price - tolerance:
            violations.append(
                f"Call monotonicity violated: C(K={from_fixed(near.strike)}) = {from_fixed(near.price)} "
                f"< C(K={from_fixed(far.strike)}) = {from_fixed(far.price)}"
            )
    details["call_monotonic"] = not violations

    call_violations = len(violations)
    for near, far in zip(puts, puts[1:]):
        if near.price > far.price + tolerance:
            violations.append(
                f"Put monotonicity violated: P(K={from_fixed(near.strike)}) = {from_fixed(near.price)} "
                f"> P(K={from_fixed(far.strike)}) = {from_fixed(far.price)}"
            )
    details["put_monotonic"] = len(violations) == call_violations

    return ArbitrageCheck(is_valid=not violations, violations=violations, details=details)
