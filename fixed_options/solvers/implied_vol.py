"""
Implied volatility solver over the fixed-point Black-Scholes pricer.

Given an observed option price and a starting volatility, the solver
brackets the target by doubling or halving the guess and then narrows
the bracket with false-position steps until the repriced option is
within ``acceptable_range_bps`` of the target:

    1. Price the initial guess; done if already within tolerance.
    2. Double (price too low) or halve (price too high) until two
       samples straddle the target.
    3. Interpolate along the chord, reprice, replace the endpoint on the
       same side of the target, repeat.

Every pricing evaluation after the initial one counts against
``max_iterations``; running out raises NonConvergence instead of
returning a best-effort guess.
"""

import logging
from typing import Optional, Sequence

from fixed_options.core.black_scholes import BlackScholes
from fixed_options.solvers.bracketing import find_bracket
from fixed_options.solvers.false_position import PriceFunction, is_acceptable, step
from fixed_options.utils.config import ParameterSource
from fixed_options.utils.constants import (
    ACCEPTABLE_RANGE_PARAMETER,
    MAX_ACCEPTABLE_RANGE_BPS,
    MAX_ITERATIONS_PARAMETER,
    MIN_ACCEPTABLE_RANGE_BPS,
)
from fixed_options.utils.exceptions import DomainError, InvalidGuess, InvalidParameter, NonConvergence
from fixed_options.utils.types import ConvergenceConfig, IVResult, OptionType, Sample

logger = logging.getLogger(__name__)


def _validate_config(config: ConvergenceConfig) -> None:
    if not MIN_ACCEPTABLE_RANGE_BPS <= config.acceptable_range_bps <= MAX_ACCEPTABLE_RANGE_BPS:
        raise InvalidParameter(
            f"IV: Invalid acceptableRange {config.acceptable_range_bps}, expected "
            f"{MIN_ACCEPTABLE_RANGE_BPS}..{MAX_ACCEPTABLE_RANGE_BPS} bps"
        )
    if config.max_iterations < 1:
        raise InvalidParameter(f"IV: Invalid maxIterations {config.max_iterations}")


class VolatilitySolver:
    """
    Implied volatility "guesser".

    Args:
        black_scholes: Pricer to invert; a default-table instance when omitted
        config: Tolerance and iteration budget
        parameters: Source consulted by update_acceptable_range and
            update_max_iterations

    Example:
        >>> from fixed_options.core.fixed_point import to_fixed
        >>> solver = VolatilitySolver()
        >>> result = solver.get_put_iv(
        ...     to_fixed("1275.126573"), to_fixed("1.8"),
        ...     to_fixed(10500), to_fixed(11000), to_fixed("0.03835616438"), 0,
        ... )
        >>> abs(result.volatility - to_fixed("1.2")) < to_fixed("0.01")
        True
    """

    def __init__(
        self,
        black_scholes: Optional[BlackScholes] = None,
        config: Optional[ConvergenceConfig] = None,
        parameters: Optional[ParameterSource] = None,
    ) -> None:
        self.black_scholes = black_scholes if black_scholes is not None else BlackScholes()
        self.config = config if config is not None else ConvergenceConfig()
        _validate_config(self.config)
        self.parameters = parameters

    @property
    def acceptable_range(self) -> int:
        return self.config.acceptable_range_bps

    def _read_parameter(self, name: str) -> int:
        if self.parameters is None:
            raise InvalidParameter(f"IV: no parameter source configured to read {name}")
        return self.parameters.get_parameter(name)

    def update_acceptable_range(self) -> int:
        """
        Refresh the tolerance from the parameter source.

        Returns:
            The new acceptable range in basis points

        Raises:
            InvalidParameter: If the value is outside [10, 10000]; the
                current tolerance is kept
        """
        value = self._read_parameter(ACCEPTABLE_RANGE_PARAMETER)
        _validate_config(ConvergenceConfig(value, self.config.max_iterations))
        self.config = ConvergenceConfig(value, self.config.max_iterations)
        logger.info("Acceptable range updated to %d bps", value)
        return value

    def update_max_iterations(self) -> int:
        """
        Refresh the iteration budget from the parameter source.

        Raises:
            InvalidParameter: If the value is below 1
        """
        value = self._read_parameter(MAX_ITERATIONS_PARAMETER)
        _validate_config(ConvergenceConfig(self.config.acceptable_range_bps, value))
        self.config = ConvergenceConfig(self.config.acceptable_range_bps, value)
        logger.info("Max iterations updated to %d", value)
        return value

    def _solve(self, price_fn: PriceFunction, target_price: int, initial_guess: int) -> IVResult:
        if initial_guess <= 0:
            raise InvalidGuess("IV: initial guess should be greater than zero")
        if target_price <= 0:
            raise DomainError(f"IV: target price must be positive, got {target_price}")

        # Read the configuration once per invocation
        acceptable_range = self.config.acceptable_range_bps
        max_iterations = self.config.max_iterations

        initial = Sample(initial_guess, price_fn(initial_guess))
        if is_acceptable(initial.price, target_price, acceptable_range):
            return IVResult(0, initial.price, initial.guess)

        state = find_bracket(initial, target_price, price_fn, acceptable_range, max_iterations)
        while not is_acceptable(state.last.price, target_price, acceptable_range):
            if state.iterations >= max_iterations:
                logger.warning(
                    "IV solver exhausted %d iterations, last sigma=%d price=%d target=%d",
                    max_iterations,
                    state.last.guess,
                    state.last.price,
                    target_price,
                )
                raise NonConvergence(
                    f"IV: no convergence within {max_iterations} iterations",
                    iterations=state.iterations,
                    bracket=state.bracket,
                )
            state = step(state, target_price, price_fn)

        logger.debug("IV converged in %d iterations: sigma=%d", state.iterations, state.last.guess)
        return IVResult(state.iterations, state.last.price, state.last.guess)

    def get_put_iv(
        self,
        target_price: int,
        initial_guess: int,
        spot: int,
        strike: int,
        time_to_maturity: int,
        risk_free: int,
    ) -> IVResult:
        """
        Solve for the volatility that reprices a put at target_price.

        Args:
            target_price: Observed put price (18 decimals)
            initial_guess: Starting volatility, must be positive
            spot, strike, time_to_maturity, risk_free: Pricing inputs

        Returns:
            IVResult (iterations, price, volatility)

        Raises:
            InvalidGuess: If initial_guess <= 0
            NonConvergence: If the target cannot be reached within the budget
        """
        return self._solve(
            lambda sigma: self.black_scholes.get_put_price(
                spot, strike, sigma, risk_free, time_to_maturity
            ),
            target_price,
            initial_guess,
        )

    def get_call_iv(
        self,
        target_price: int,
        initial_guess: int,
        spot: int,
        strike: int,
        time_to_maturity: int,
        risk_free: int,
    ) -> IVResult:
        """Solve for the volatility that reprices a call at target_price."""
        return self._solve(
            lambda sigma: self.black_scholes.get_call_price(
                spot, strike, sigma, risk_free, time_to_maturity
            ),
            target_price,
            initial_guess,
        )

    def get_iv(
        self,
        option_type: OptionType,
        target_price: int,
        initial_guess: int,
        spot: int,
        strike: int,
        time_to_maturity: int,
        risk_free: int,
    ) -> IVResult:
        """
        Dispatch to get_call_iv or get_put_iv.

        Raises:
            ValueError: If option_type is not "call" or "put"
        """
        if option_type == "call":
            return self.get_call_iv(target_price, initial_guess, spot, strike, time_to_maturity, risk_free)
        elif option_type == "put":
            return self.get_put_iv(target_price, initial_guess, spot, strike, time_to_maturity, risk_free)
        else:
            raise ValueError(f"option_type must be 'call' or 'put', got '{option_type}'")

    def get_ivs(
        self,
        option_type: OptionType,
        target_prices: Sequence[int],
        strikes: Sequence[int],
        initial_guess: int,
        spot: int,
        time_to_maturity: int,
        risk_free: int,
    ) -> list[IVResult]:
        """
        Solve implied volatilities for several strikes (volatility smile).

        Each solve starts from the previous strike's answer, which is
        usually a much better guess than the caller's.

        Raises:
            ValueError: If target_prices and strikes have different lengths
        """
        if len(target_prices) != len(strikes):
            raise ValueError(
                f"target_prices ({len(target_prices)}) and strikes ({len(strikes)}) "
                f"must have same length"
            )

        results = []
        guess = initial_guess
        for price, strike in zip(target_prices, strikes):
            result = self.get_iv(option_type, price, guess, spot, strike, time_to_maturity, risk_free)
            results.append(result)
            guess = result.volatility
        return results
