"""
Exception hierarchy for the fixed-point pricing engine.

Every error derives from EngineError, itself a ValueError, so callers
that only care about "bad input" can keep catching ValueError.
"""


class EngineError(ValueError):
    """Base exception for all engine failures."""


class InvalidDecimals(EngineError):
    """Requested precision is outside what a component supports."""

    def __init__(self, decimals: int, lower: int, upper: int, component: str = "NormalDistribution") -> None:
        self.decimals = decimals
        super().__init__(f"{component}: invalid decimals {decimals}, expected {lower}..{upper}")


class DomainError(EngineError):
    """Input outside the mathematical domain (non-positive log argument, sigma, time)."""


class ArithmeticOverflow(EngineError):
    """An intermediate value left the signed 256-bit range."""


class DivisionByZero(EngineError):
    """Fixed-point division by zero."""


class InvalidGuess(EngineError):
    """Initial volatility guess is not positive."""


class InvalidParameter(EngineError):
    """Configuration or table update outside its admissible range."""


class NonConvergence(EngineError):
    """
    The volatility solver could not reach the target price.

    Attributes:
        iterations: Iterations spent before giving up
        bracket: Last bracket held by the solver, if any
    """

    def __init__(self, message: str, *, iterations: int = 0, bracket=None) -> None:
        self.iterations = iterations
        self.bracket = bracket
        super().__init__(message)
