"""Public type aliases for exact-width parameters.

Usage::

    from dynaprop.types import Int, Short, Char

    class TextFunctions:
        @staticmethod
        def repeat(value: str, times: Short) -> str:
            return value * times
"""

from __future__ import annotations

from typing import Annotated

from .base import ParamType, get_type_by_name, all_types
from .atoms import p_char, p_byte, p_short, p_int, p_long
from .coerce import (
    TypeKey, infer_type_key, infer_return_class, runtime_class, is_assignable, type_name,
)

# ── Annotated type aliases ─────────────────────────────────────────
# These carry ParamType metadata for the catalog builder to pick up.

Char = Annotated[str, p_char]
Byte = Annotated[int, p_byte]
Short = Annotated[int, p_short]
Int = Annotated[int, p_int]
Long = Annotated[int, p_long]

__all__ = [
    # Type aliases
    'Char', 'Byte', 'Short', 'Int', 'Long',
    # ParamType descriptors
    'ParamType', 'TypeKey',
    'p_char', 'p_byte', 'p_short', 'p_int', 'p_long',
    # Utilities
    'infer_type_key', 'infer_return_class', 'runtime_class', 'is_assignable',
    'type_name', 'get_type_by_name', 'all_types',
]
