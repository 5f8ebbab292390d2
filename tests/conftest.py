"""
Pytest configuration and shared fixtures.

All option parameters are raw 18-decimal integers, as the engine takes them.
"""

import pytest

from fixed_options.core.black_scholes import BlackScholes
from fixed_options.core.distributions import NormalDistribution, ProbabilityTable
from fixed_options.core.fixed_point import to_fixed
from fixed_options.solvers.implied_vol import VolatilitySolver
from fixed_options.utils.config import ParameterStore


@pytest.fixture
def table():
    """Fresh default probability table, safe to mutate."""
    return ProbabilityTable.default()


@pytest.fixture
def normal_distribution(table):
    return NormalDistribution(table)


@pytest.fixture
def bs(normal_distribution):
    return BlackScholes(normal_distribution)


@pytest.fixture
def parameters():
    return ParameterStore()


@pytest.fixture
def solver(bs, parameters):
    return VolatilitySolver(bs, parameters=parameters)


@pytest.fixture
def short_put_params():
    """Two-week put, 10500 spot against an 11000 strike, at 120% volatility."""
    return {
        "spot": to_fixed(10500),
        "strike": to_fixed(11000),
        "sigma": to_fixed("1.2"),
        "risk_free": 0,
        "time_to_maturity": to_fixed("0.03835616438"),
    }


@pytest.fixture
def standard_params():
    """At-the-money one-year option with a 5% rate and 20% volatility."""
    return {
        "spot": to_fixed(100),
        "strike": to_fixed(100),
        "sigma": to_fixed("0.2"),
        "risk_free": to_fixed("0.05"),
        "time_to_maturity": to_fixed(1),
    }


@pytest.fixture
def itm_call_params():
    """In-the-money call parameters."""
    return {
        "spot": to_fixed(110),
        "strike": to_fixed(100),
        "sigma": to_fixed("0.2"),
        "risk_free": to_fixed("0.05"),
        "time_to_maturity": to_fixed(1),
    }
