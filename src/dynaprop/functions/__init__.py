"""Built-in extension functions and their default registration."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from .numbers import MathFunctions, NumberFunctions
from .objects import ObjectFunctions
from .strings import StringFunctions

if TYPE_CHECKING:
    from ..registry import FunctionRegistry

# value type -> providers, in registration order
DEFAULT_PROVIDERS: tuple[tuple[type, tuple[type, ...]], ...] = (
    (object, (ObjectFunctions,)),
    (int, (NumberFunctions, MathFunctions)),
    (float, (NumberFunctions, MathFunctions)),
    (Decimal, (NumberFunctions, MathFunctions)),
    (str, (StringFunctions,)),
)


def install_default_functions(registry: FunctionRegistry) -> None:
    """Register the built-in providers on *registry*."""
    for value_type, providers in DEFAULT_PROVIDERS:
        registry.register_function_classes(value_type, *providers)


__all__ = [
    'MathFunctions', 'NumberFunctions', 'ObjectFunctions', 'StringFunctions',
    'DEFAULT_PROVIDERS', 'install_default_functions',
]
