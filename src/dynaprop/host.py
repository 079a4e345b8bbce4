"""A minimal template host: per-type property handlers and chain evaluation.

Usage::

    host = Host()
    host.evaluate(123, "add", "1")                  # 124
    host.evaluate("ABC", "substring", "1", "2")     # "B"
    host.evaluate(["2", "1", "3"], "toSortedList")  # ["1", "2", "3"]
"""

from __future__ import annotations

import numbers
from decimal import Decimal
from typing import Any, Callable

from .adaptor import ArgsAdaptor, NumberAdaptor, ObjectAdaptor, PropertyHandler, StringAdaptor
from .dispatch import TypeDispatchMap
from .registry import FunctionRegistry, default_registry


class Host:
    """Dispatches each property step to the handler for the value's type.

    Parameters
    ----------
    registry : FunctionRegistry, optional
        Registry the built-in adaptors resolve members with.  Defaults to
        the process-wide registry.
    """

    def __init__(self, registry: FunctionRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()
        self._handlers: TypeDispatchMap[PropertyHandler] = TypeDispatchMap()
        self.register_handler(object, ObjectAdaptor(self.registry))
        numeric = NumberAdaptor(self.registry)
        for cls in (numbers.Number, int, float, Decimal):
            self.register_handler(cls, numeric)
        self.register_handler(str, StringAdaptor(self.registry))

    def register_handler(self, cls: type, handler: PropertyHandler) -> None:
        self._handlers.register(cls, handler)

    def ensure_handler(self, cls: type, factory: Callable[[], PropertyHandler]) -> None:
        """Register ``factory()`` for *cls* unless *cls* has its own handler."""
        if cls not in self._handlers:
            self.register_handler(cls, factory())

    def lookup_handler(self, cls: type) -> PropertyHandler:
        return self._handlers.lookup(cls)

    def get_property(self, target: Any, prop: Any, prop_name: str | None = None) -> Any:
        handler = self.lookup_handler(type(target))
        return handler.get_property(self, target, prop, prop_name if prop_name is not None else str(prop))

    def evaluate(self, value: Any, *props: Any) -> Any:
        """Apply each property step in turn and return the final value.

        A call still waiting for arguments at the end is resolved with
        the arguments it has.
        """
        for prop in props:
            value = self.get_property(value, prop)
        while isinstance(value, ArgsAdaptor):
            value = value.resolve()
        return value
