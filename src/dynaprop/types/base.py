"""Core parameter type descriptors and their registry."""

from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True, slots=True)
class ParamType:
    """Describes a parameter type narrower than its Python representation.

    Used as ``Annotated`` metadata so that a signature can ask for, e.g.,
    a signed 16-bit integer while the value stays a plain ``int``.

    Parameters
    ----------
    name : str
        Human-readable type name (e.g. "int16", "char").
    python_type : type
        The Python type used to represent values of this type.
    bits : int
        Signed width for integer types, 0 when not applicable.
    length : int
        Exact length for string types, 0 when not applicable.
    """
    name: str
    python_type: type
    bits: int = 0
    length: int = 0

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1

    def in_range(self, value: int) -> bool:
        """Whether *value* fits this type's signed width."""
        return not self.bits or self.min_value <= value <= self.max_value

    def accepts(self, value: Any) -> bool:
        """Whether *value* is already a valid instance, needing no conversion."""
        if not isinstance(value, self.python_type):
            return False
        if self.bits:
            return self.in_range(value)
        if self.length:
            return len(value) == self.length
        return True

    def __repr__(self) -> str:
        return f"ParamType({self.name})"


# ── Global type registry ──────────────────────────────────────────
_REGISTRY_BY_NAME: dict[str, ParamType] = {}


def register_type(ptype: ParamType) -> ParamType:
    """Register a ParamType in the global registry."""
    _REGISTRY_BY_NAME[ptype.name] = ptype
    return ptype


def get_type_by_name(name: str) -> ParamType:
    """Look up a ParamType by its name."""
    return _REGISTRY_BY_NAME[name]


def all_types() -> list[ParamType]:
    """Return all registered ParamTypes."""
    return list(_REGISTRY_BY_NAME.values())
