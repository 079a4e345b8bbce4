"""Rendering of property paths for error messages.

A path is the member name followed by each argument, joined with ``.``:
``substring."1".{int:"7"}``.  Strings are quoted; other values show their
type and text.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from .dispatch import TypeDispatchMap

Formatter = Callable[[Any], str]


def _quote(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _format_object(value: Any) -> str:
    return f"{{{type(value).__name__}:{_quote(str(value))}}}"


_formatters: TypeDispatchMap[Formatter] = TypeDispatchMap()
_formatters.register(object, _format_object)
_formatters.register(str, _quote)


def register_formatter(cls: type, formatter: Formatter) -> None:
    """Render values of *cls* (and subclasses) with *formatter*."""
    _formatters.register(cls, formatter)


def render_arg(value: Any) -> str:
    return _formatters.lookup(type(value))(value)


def render_path(name: str, args: Iterable[Any] = ()) -> str:
    return ".".join([name, *(render_arg(a) for a in args)])
