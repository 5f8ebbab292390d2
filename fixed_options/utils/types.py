"""
Data types and structures for fixed-point option pricing.

This module defines dataclasses and types used throughout the engine
for representing pricing inputs, solver samples and results. Every
numeric field is a raw scaled integer (see utils.constants.SCALE).
"""

from dataclasses import dataclass, field
from typing import Literal, NamedTuple

from fixed_options.utils.constants import DEFAULT_ACCEPTABLE_RANGE_BPS, DEFAULT_MAX_ITERATIONS

OptionType = Literal["call", "put"]


@dataclass(frozen=True)
class PricingInputs:
    """
    Immutable container for Black-Scholes inputs.

    Attributes:
        spot: Current spot price of the underlying asset
        strike: Strike price
        sigma: Annualized volatility
        risk_free: Risk-free interest rate (annualized, continuous compounding)
        time_to_maturity: Time to expiration as a fraction of a year
    """
    spot: int
    strike: int
    sigma: int
    risk_free: int
    time_to_maturity: int


@dataclass(frozen=True)
class Sample:
    """A volatility guess and the price it produces."""
    guess: int
    price: int


@dataclass(frozen=True)
class Bracket:
    """
    Two samples used to interpolate the next volatility guess.

    With a positive vega, lower.price <= higher.price whenever
    lower.guess <= higher.guess.
    """
    lower: Sample
    higher: Sample


@dataclass(frozen=True)
class SolverState:
    """
    Loop state of the volatility solver.

    Attributes:
        bracket: Samples straddling the target price
        iterations: Pricing evaluations spent after the initial guess
        last: Most recent sample, the one tested against the tolerance
    """
    bracket: Bracket
    iterations: int
    last: Sample


@dataclass
class ConvergenceConfig:
    """
    Solver tolerance and iteration budget.

    Attributes:
        acceptable_range_bps: Accepted relative price error, in basis points
        max_iterations: Upper bound on pricing evaluations after the initial guess
    """
    acceptable_range_bps: int = DEFAULT_ACCEPTABLE_RANGE_BPS
    max_iterations: int = DEFAULT_MAX_ITERATIONS


class IVResult(NamedTuple):
    """
    Result from the implied volatility solver.

    Unpacks as (iterations, price, volatility).
    """
    iterations: int
    price: int
    volatility: int


@dataclass
class ArbitrageCheck:
    """
    Result from arbitrage validation.

    Attributes:
        is_valid: Whether the price satisfies no-arbitrage conditions
        violations: List of specific violations detected
        details: Dictionary with detailed check results
    """
    is_valid: bool
    violations: list[str] = field(default_factory=list)
    details: dict[str, int] = field(default_factory=dict)
