"""
False-position (regula falsi) steps for implied volatility.

Each step draws the chord between the two bracket samples, reads off the
volatility at which the chord crosses the target price, prices it, and
replaces the endpoint on the same side of the target. The step is a pure
function of its state, so the solver loop stays a plain ``while`` over
SolverState values.
"""

import logging
from typing import Callable

from fixed_options.core.fixed_point import truncate_div
from fixed_options.utils.constants import BASIS_POINTS
from fixed_options.utils.exceptions import NonConvergence
from fixed_options.utils.types import Bracket, Sample, SolverState

logger = logging.getLogger(__name__)

PriceFunction = Callable[[int], int]


def is_acceptable(price: int, target_price: int, acceptable_range_bps: int) -> bool:
    """True when |price - target| / target is within the tolerance in basis points."""
    return abs(price - target_price) * BASIS_POINTS <= target_price * acceptable_range_bps


def get_closer_iv(bracket: Bracket, target_price: int) -> int:
    """
    Interpolate the volatility that should produce target_price.

    Formula:
        σ = σ_lo + (σ_hi - σ_lo)·(target - P_lo) / (P_hi - P_lo)

    The product is formed before the single division so no precision is
    lost to an intermediate fixed-point quotient. Works as an
    extrapolation too when the target lies outside the bracket.

    Args:
        bracket: Two (guess, price) samples
        target_price: Price to hit

    Returns:
        Next volatility guess (raw, same scale as the samples)

    Raises:
        NonConvergence: If both samples have the same price (zero local vega)

    Example:
        >>> bracket = Bracket(
        ...     Sample(1242800000000000000, 5427000000000000000),
        ...     Sample(1367080000000000000, 6909000000000000000),
        ... )
        >>> get_closer_iv(bracket, 6000000000000000000)
        1290851578947368421
    """
    lower, higher = bracket.lower, bracket.higher
    price_span = higher.price - lower.price
    if price_span == 0:
        raise NonConvergence(
            f"IV: degenerate bracket, both samples priced at {lower.price}", bracket=bracket
        )
    guess_span = higher.guess - lower.guess
    return lower.guess + truncate_div(guess_span * (target_price - lower.price), price_span)


def step(state: SolverState, target_price: int, price_fn: PriceFunction) -> SolverState:
    """
    One false-position iteration.

    Args:
        state: Current bracket, iteration count and last sample
        target_price: Price to hit
        price_fn: Maps a volatility guess to an option price

    Returns:
        New state whose bracket still straddles the target

    Raises:
        NonConvergence: On a degenerate bracket or a non-positive guess
    """
    guess = get_closer_iv(state.bracket, target_price)
    if guess <= 0:
        raise NonConvergence(
            f"IV: interpolated volatility {guess} is not positive",
            iterations=state.iterations,
            bracket=state.bracket,
        )

    sample = Sample(guess, price_fn(guess))
    iterations = state.iterations + 1
    logger.debug("Iteration %d: sigma=%d price=%d", iterations, sample.guess, sample.price)

    if sample.price < target_price:
        bracket = Bracket(sample, state.bracket.higher)
    else:
        bracket = Bracket(state.bracket.lower, sample)
    return SolverState(bracket=bracket, iterations=iterations, last=sample)
