"""
Initial bracket search for the implied volatility solver.

Starting from the caller's guess, the volatility is doubled while the
price stays below the target and halved while it stays above, until two
consecutive samples straddle the target. Because an option price is
non-decreasing in volatility, the last two samples then form a valid
bracket for the false-position iteration.
"""

import logging

from fixed_options.solvers.false_position import PriceFunction, is_acceptable
from fixed_options.utils.constants import MAX_VOLATILITY_GUESS
from fixed_options.utils.exceptions import NonConvergence
from fixed_options.utils.types import Bracket, Sample, SolverState

logger = logging.getLogger(__name__)


def find_bracket(
    initial: Sample,
    target_price: int,
    price_fn: PriceFunction,
    acceptable_range_bps: int,
    max_iterations: int,
) -> SolverState:
    """
    Double or halve the volatility until the target price is straddled.

    Args:
        initial: Sample at the caller's initial guess (already outside tolerance)
        target_price: Price to hit
        price_fn: Maps a volatility guess to an option price
        acceptable_range_bps: Tolerance used to stop early on a lucky sample
        max_iterations: Budget shared with the false-position phase

    Returns:
        SolverState whose ``last`` sample is either acceptable already or
        one end of a straddling bracket

    Raises:
        NonConvergence: If doubling passes MAX_VOLATILITY_GUESS, halving
            reaches zero, or the budget runs out
    """
    sample = initial
    iterations = 0

    while iterations < max_iterations:
        below = sample.price < target_price
        guess = sample.guess * 2 if below else sample.guess // 2
        if guess > MAX_VOLATILITY_GUESS:
            raise NonConvergence(
                f"IV: price {sample.price} at volatility {sample.guess} is still below "
                f"target {target_price}",
                iterations=iterations,
            )
        if guess <= 0:
            raise NonConvergence(
                f"IV: volatility guess collapsed to zero, price floor {sample.price} "
                f"is above target {target_price}",
                iterations=iterations,
            )

        candidate = Sample(guess, price_fn(guess))
        iterations += 1
        logger.debug(
            "Bracket search %d: sigma=%d price=%d", iterations, candidate.guess, candidate.price
        )

        if is_acceptable(candidate.price, target_price, acceptable_range_bps):
            return SolverState(Bracket(candidate, candidate), iterations, candidate)

        if (candidate.price < target_price) != below:
            bracket = Bracket(sample, candidate) if below else Bracket(candidate, sample)
            return SolverState(bracket, iterations, candidate)

        sample = candidate

    raise NonConvergence(
        f"IV: no bracket found within {max_iterations} iterations", iterations=iterations
    )
