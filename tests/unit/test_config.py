"""Unit tests for runtime parameters."""

import pytest
from fixed_options.solvers.implied_vol import VolatilitySolver
from fixed_options.utils.config import ParameterStore
from fixed_options.utils.exceptions import InvalidParameter


def test_unknown_parameter_reads_zero():
    assert ParameterStore().get_parameter("GUESSER_ACCEPTABLE_RANGE") == 0


def test_set_parameter_coerces_to_int():
    store = ParameterStore()
    store.set_parameter("GUESSER_ACCEPTABLE_RANGE", "25")
    assert store.get_parameter("GUESSER_ACCEPTABLE_RANGE") == 25


def test_from_env_reads_prefixed_variables():
    environ = {
        "FIXED_OPTIONS_GUESSER_ACCEPTABLE_RANGE": "15",
        "FIXED_OPTIONS_GUESSER_MAX_ITERATIONS": "20",
        "GUESSER_ACCEPTABLE_RANGE": "99",
        "PATH": "/usr/bin",
    }
    store = ParameterStore.from_env(environ)

    assert store.get_parameter("GUESSER_ACCEPTABLE_RANGE") == 15
    assert store.get_parameter("GUESSER_MAX_ITERATIONS") == 20
    assert store.get_parameter("PATH") == 0


def test_contains_tracks_explicit_values():
    store = ParameterStore({"GUESSER_ACCEPTABLE_RANGE": 0})

    assert "GUESSER_ACCEPTABLE_RANGE" in store
    assert "GUESSER_MAX_ITERATIONS" not in store

    store.set_parameter("GUESSER_MAX_ITERATIONS", 0)
    assert "GUESSER_MAX_ITERATIONS" in store


def test_from_env_rejects_non_integer():
    with pytest.raises(InvalidParameter, match="must be an integer"):
        ParameterStore.from_env({"FIXED_OPTIONS_GUESSER_ACCEPTABLE_RANGE": "ten"})


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("FIXED_OPTIONS_GUESSER_ACCEPTABLE_RANGE", "30")
    assert ParameterStore.from_env().get_parameter("GUESSER_ACCEPTABLE_RANGE") == 30


def test_solver_reads_store(bs):
    store = ParameterStore({"GUESSER_ACCEPTABLE_RANGE": 40, "GUESSER_MAX_ITERATIONS": 12})
    solver = VolatilitySolver(bs, parameters=store)

    solver.update_acceptable_range()
    solver.update_max_iterations()

    assert solver.acceptable_range == 40
    assert solver.config.max_iterations == 12


def test_solver_rejects_unset_range(bs):
    """An unset parameter reads as 0, below the 10 bps floor."""
    solver = VolatilitySolver(bs, parameters=ParameterStore())
    with pytest.raises(InvalidParameter):
        solver.update_acceptable_range()
