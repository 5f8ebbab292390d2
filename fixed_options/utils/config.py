"""
Runtime parameters for the engine.

The solver reads its tolerance from a key-value parameter source, the way
a configuration registry exposes scalar parameters: unknown names read as
zero. ParameterStore is the in-memory implementation used by the CLI and
the tests; anything with a compatible ``get_parameter`` works.
"""

import os
from typing import Mapping, Optional, Protocol

from fixed_options.utils.constants import ENV_PREFIX
from fixed_options.utils.exceptions import InvalidParameter


class ParameterSource(Protocol):
    def get_parameter(self, name: str) -> int:
        ...


class ParameterStore:
    """
    Dict-backed parameter source.

    Example:
        >>> store = ParameterStore({"GUESSER_ACCEPTABLE_RANGE": 15})
        >>> store.get_parameter("GUESSER_ACCEPTABLE_RANGE")
        15
        >>> store.get_parameter("UNKNOWN")
        0
        >>> "UNKNOWN" in store
        False
    """

    def __init__(self, values: Optional[Mapping[str, int]] = None) -> None:
        self._values: dict[str, int] = dict(values or {})

    def get_parameter(self, name: str) -> int:
        return self._values.get(name, 0)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def set_parameter(self, name: str, value: int) -> None:
        self._values[name] = int(value)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX
    ) -> "ParameterStore":
        """
        Build a store from ``<prefix><NAME>=<int>`` environment variables.

        Raises:
            InvalidParameter: If a prefixed variable is not an integer
        """
        environ = os.environ if environ is None else environ
        values = {}
        for key, raw in environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):]
            try:
                values[name] = int(raw)
            except ValueError:
                raise InvalidParameter(f"{key} must be an integer, got {raw!r}") from None
        return cls(values)
