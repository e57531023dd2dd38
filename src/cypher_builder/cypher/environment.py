"""Per-build naming state.

A BuildContext is created for one compilation and dropped afterwards. It
hands out identifiers for variables and parameters on first encounter and
returns the same identifier on every later request for the same object.
Nothing is written back onto the variables themselves, so statements can be
shared freely between builds.
"""

import math
from typing import Any

from cypher_builder.core.config import NamingConfig
from cypher_builder.core.errors import NamingConflict, UnsupportedValueError
from cypher_builder.cypher.expressions import Param
from cypher_builder.cypher.variables import Variable

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def check_value(value: Any) -> None:
    """Ensure a literal can be represented in Cypher.

    Accepted: str, int, float, bool, None, lists/tuples of those and
    string-keyed dicts of those, nested to any depth.

    Raises:
        UnsupportedValueError: For any other kind of value
    """
    if value is None or isinstance(value, str | bool | int | float):
        return
    if isinstance(value, list | tuple):
        for item in value:
            check_value(item)
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(f"Map keys must be strings, got {type(key).__name__}", key)
            check_value(item)
        return
    raise UnsupportedValueError(f"Unsupported value of type {type(value).__name__}", value)


def check_inline_value(value: Any) -> None:
    """Like check_value, but also rejects numbers Cypher cannot spell inline.

    That is NaN, infinity and integers outside the signed 64-bit range.
    """
    check_value(value)
    _check_inline(value)


def _check_inline(value: Any) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise UnsupportedValueError(f"Non-finite float {value!r} cannot be rendered inline", value)
    if isinstance(value, int) and not INT64_MIN <= value <= INT64_MAX:
        raise UnsupportedValueError(f"Integer {value} is outside the 64-bit range Cypher supports", value)
    if isinstance(value, list | tuple):
        for item in value:
            _check_inline(item)
    elif isinstance(value, dict):
        for item in value.values():
            _check_inline(item)


class BuildContext:
    """Identity-keyed name tables for one build.

    Variables share one positional counter (``this0``, ``this1``, ``var2``);
    parameters have their own (``param0``, ``param1``). Explicit names are
    used verbatim and must not be claimed by two different objects.
    """

    def __init__(self, naming: NamingConfig | None = None) -> None:
        self._naming = naming or NamingConfig()
        self._variables: dict[Variable, str] = {}
        self._variable_owners: dict[str, Variable] = {}
        self._params: dict[Param, str] = {}
        self._param_owners: dict[str, Param] = {}
        self._variable_counter = 0
        self._param_counter = 0

    @property
    def naming(self) -> NamingConfig:
        return self._naming

    def name_of(self, variable: Variable) -> str:
        """Return the identifier for ``variable``, assigning one on first use.

        Raises:
            NamingConflict: If the variable's explicit name is already bound
                to a different variable in this build
        """
        existing = self._variables.get(variable)
        if existing is not None:
            return existing

        if variable.name is not None:
            name = variable.name
            if name in self._variable_owners:
                raise NamingConflict(name, kind="variable")
        else:
            prefix = getattr(self._naming, variable.naming_prefix)
            name = f"{prefix}{self._variable_counter}"
            while name in self._variable_owners:
                self._variable_counter += 1
                name = f"{prefix}{self._variable_counter}"
            self._variable_counter += 1

        self._variables[variable] = name
        self._variable_owners[name] = variable
        return name

    def param_name_of(self, param: Param) -> str:
        """Return the name for ``param``, assigning one on first use.

        Raises:
            UnsupportedValueError: If the param's value cannot be sent
            NamingConflict: If the param's explicit name is already bound to
                a different param in this build
        """
        existing = self._params.get(param)
        if existing is not None:
            return existing

        check_value(param.value)

        if param.name is not None:
            name = param.name
            if name in self._param_owners:
                raise NamingConflict(name, kind="parameter")
        else:
            prefix = self._naming.param_prefix
            name = f"{prefix}{self._param_counter}"
            while name in self._param_owners:
                self._param_counter += 1
                name = f"{prefix}{self._param_counter}"
            self._param_counter += 1

        self._params[param] = name
        self._param_owners[name] = param
        return name

    @property
    def params(self) -> dict[str, Any]:
        """Parameter name to value, in first-encounter order."""
        return {name: param.value for param, name in self._params.items()}

    @property
    def variable_count(self) -> int:
        return len(self._variables)
