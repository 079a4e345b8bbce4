"""Collection conversions available on every value."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _items(value: Any) -> list[Any]:
    # Text is a scalar here, not a sequence of characters.
    if isinstance(value, (str, bytes, bytearray)):
        return [value]
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, Iterable):
        return list(value)
    return [value]


class ObjectFunctions:
    """``to_list`` and friends; a non-iterable value becomes a one-item collection."""

    @staticmethod
    def to_list(value: object) -> list:
        return _items(value)

    @staticmethod
    def to_sorted_list(value: object) -> list:
        return sorted(_items(value))

    @staticmethod
    def to_set(value: object) -> set:
        return set(_items(value))

    @staticmethod
    def to_sorted_set(value: object) -> list:
        """Distinct items in ascending order."""
        return sorted(set(_items(value)))
