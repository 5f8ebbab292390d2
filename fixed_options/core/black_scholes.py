"""
Black-Scholes option pricing in fixed-point arithmetic.

This module implements the classical Black-Scholes formula for European
options without touching floating point. Inputs and prices are raw
integers with 18 decimals; the formula itself runs at 24 decimals so
rounding does not compound through the chain of multiplications.

Mathematical Background:
    The Black-Scholes formula prices European options under assumptions:
    - Log-normal asset price distribution
    - Constant volatility and interest rate
    - No transaction costs or taxes
    - Continuous trading possible

Formulas:
    d1 = [ln(S/K) + (r + σ²/2)T] / (σ√T)
    d2 = d1 - σ√T
    C  = S·N(d1) - K·e^(-rT)·N(d2)
    P  = K·e^(-rT)·N(-d2) - S·N(-d1)

References:
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    Journal of Political Economy, 81(3), 637-654.
"""

import logging
from typing import Optional

from fixed_options.core.distributions import NormalDistribution
from fixed_options.core.exponent import exp
from fixed_options.core.fixed_point import divide, multiply, rescale, sqrt
from fixed_options.core.logarithm import ln
from fixed_options.utils.constants import DECIMALS, PRECISION_DECIMALS
from fixed_options.utils.exceptions import DomainError
from fixed_options.utils.types import OptionType, PricingInputs

logger = logging.getLogger(__name__)


def _validate_inputs(spot: int, strike: int, sigma: int, time_to_maturity: int) -> None:
    """
    Validate option pricing inputs.

    Raises:
        DomainError: If spot, strike, sigma or time is not positive
    """
    if spot <= 0:
        raise DomainError(f"Spot price must be positive, got spot={spot}")
    if strike <= 0:
        raise DomainError(f"Strike price must be positive, got strike={strike}")
    if sigma <= 0:
        raise DomainError(f"Volatility must be positive, got sigma={sigma}")
    if time_to_maturity <= 0:
        raise DomainError(f"Time to maturity must be positive, got time={time_to_maturity}")


def _lift(value: int) -> int:
    return rescale(value, DECIMALS, PRECISION_DECIMALS)


def z_scores(
    spot: int, strike: int, sigma: int, risk_free: int, time_to_maturity: int
) -> tuple[int, int]:
    """
    Calculate d1 and d2 of the Black-Scholes formula.

    Args:
        spot: Current spot price (18 decimals)
        strike: Strike price (18 decimals)
        sigma: Annualized volatility (18 decimals)
        risk_free: Risk-free rate, any sign (18 decimals)
        time_to_maturity: Time to expiration in years (18 decimals)

    Returns:
        (d1, d2) as raw integers with PRECISION_DECIMALS decimals, ready to
        feed the normal CDF at that precision
    """
    _validate_inputs(spot, strike, sigma, time_to_maturity)
    p = PRECISION_DECIMALS

    vol = _lift(sigma)
    time = _lift(time_to_maturity)

    log_moneyness = ln(divide(_lift(spot), _lift(strike), p), p)
    drift = multiply(_lift(risk_free) + multiply(vol, vol, p) // 2, time, p)
    diffusion = multiply(vol, sqrt(time, p), p)

    d1 = divide(log_moneyness + drift, diffusion, p)
    return d1, d1 - diffusion


def discount_factor(risk_free: int, time_to_maturity: int) -> int:
    """e^(-rT) at PRECISION_DECIMALS."""
    p = PRECISION_DECIMALS
    return exp(-multiply(_lift(risk_free), _lift(time_to_maturity), p), p)


class BlackScholes:
    """
    European option pricer.

    Args:
        normal_distribution: CDF provider; a default-table instance when omitted

    Example:
        >>> from fixed_options.core.fixed_point import to_fixed
        >>> bs = BlackScholes()
        >>> price = bs.get_put_price(
        ...     to_fixed(10500), to_fixed(11000), to_fixed("1.2"), 0, to_fixed("0.03835616438")
        ... )
        >>> 1270 * 10**18 < price < 1280 * 10**18
        True
    """

    def __init__(self, normal_distribution: Optional[NormalDistribution] = None) -> None:
        self.normal_distribution = (
            normal_distribution if normal_distribution is not None else NormalDistribution()
        )

    def _probability(self, z: int) -> int:
        return self.normal_distribution.get_interpolated_probability(z, PRECISION_DECIMALS)

    def _settle(self, long_leg: int, short_leg: int, option_type: OptionType) -> int:
        price = long_leg - short_leg
        if price < 0:
            # Legs truncate to nearly equal values deep out of the money
            # Both CDF terms saturate or truncate to nearly equal legs deep out of the money
            logger.debug("%s price %d floored at zero", option_type, price)
            return 0
        return price

    def get_call_price(
        self, spot: int, strike: int, sigma: int, risk_free: int, time_to_maturity: int
    ) -> int:
        """
        Calculate European call option price.

        Formula:
            C = S·N(d1) - K·e^(-rT)·N(d2)

        Returns:
            Call price (18 decimals, never negative)

        Raises:
            DomainError: If spot, strike, sigma or time is not positive
        """
        p = PRECISION_DECIMALS
        d1, d2 = z_scores(spot, strike, sigma, risk_free, time_to_maturity)
        discounted_strike = multiply(strike, discount_factor(risk_free, time_to_maturity), p)

        spot_leg = multiply(spot, self._probability(d1), p)
        strike_leg = multiply(discounted_strike, self._probability(d2), p)
        return self._settle(spot_leg, strike_leg, "call")

    def get_put_price(
        self, spot: int, strike: int, sigma: int, risk_free: int, time_to_maturity: int
    ) -> int:
        """
        Calculate European put option price.

        Formula:
            P = K·e^(-rT)·N(-d2) - S·N(-d1)

        Returns:
            Put price (18 decimals, never negative)

        Raises:
            DomainError: If spot, strike, sigma or time is not positive
        """
        p = PRECISION_DECIMALS
        d1, d2 = z_scores(spot, strike, sigma, risk_free, time_to_maturity)
        discounted_strike = multiply(strike, discount_factor(risk_free, time_to_maturity), p)

        strike_leg = multiply(discounted_strike, self._probability(-d2), p)
        spot_leg = multiply(spot, self._probability(-d1), p)
        return self._settle(strike_leg, spot_leg, "put")

    def get_price(
        self,
        option_type: OptionType,
        spot: int,
        strike: int,
        sigma: int,
        risk_free: int,
        time_to_maturity: int,
    ) -> int:
        """
        Calculate European option price (call or put).

        Raises:
            ValueError: If option_type is not "call" or "put"
        """
        if option_type == "call":
            return self.get_call_price(spot, strike, sigma, risk_free, time_to_maturity)
        elif option_type == "put":
            return self.get_put_price(spot, strike, sigma, risk_free, time_to_maturity)
        else:
            raise ValueError(f"option_type must be 'call' or 'put', got '{option_type}'")

    def price(self, option_type: OptionType, inputs: PricingInputs) -> int:
        """Price from a PricingInputs bundle."""
        return self.get_price(
            option_type,
            inputs.spot,
            inputs.strike,
            inputs.sigma,
            inputs.risk_free,
            inputs.time_to_maturity,
        )
