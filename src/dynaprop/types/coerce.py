"""Python annotation -> type key normalisation.

A *type key* is what the converter table and the value-injection index are
keyed by: either a plain class or a :class:`ParamType` descriptor.
"""

from __future__ import annotations

import inspect
import types
from typing import Any, Annotated, TypeVar, Union, get_args, get_origin

from .base import ParamType

TypeKey = Union[type, ParamType]


def infer_type_key(annotation: Any) -> TypeKey:
    """Normalise a type hint to a type key.

    Supports:
    - Missing annotations, ``Any`` and unbound ``TypeVar``: ``object``.
    - ``Annotated[python_type, ParamType(...)]``: the ParamType.
    - ``Optional[X]`` / ``X | None``: ``X``.
    - Generic aliases such as ``list[str]``: the origin class.

    Raises
    ------
    TypeError
        If the annotation cannot be mapped to a type key.
    """
    if annotation is inspect.Parameter.empty or annotation is Any:
        return object

    if isinstance(annotation, TypeVar):
        bound = annotation.__bound__
        return object if bound is None else infer_type_key(bound)

    origin = get_origin(annotation)
    if origin is Annotated:
        args = get_args(annotation)
        for arg in args[1:]:
            if isinstance(arg, ParamType):
                return arg
        # Fall through to infer from the base type
        return infer_type_key(args[0])

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return infer_type_key(members[0])
        raise TypeError(f"Cannot infer a type key from union: {annotation!r}")

    if isinstance(origin, type):
        return origin

    if isinstance(annotation, type) and annotation is not type(None):
        return annotation

    raise TypeError(f"Cannot infer a type key from annotation: {annotation!r}")


def infer_return_class(annotation: Any) -> type | None:
    """Return the class a member produces, ``None`` for void members.

    Anything that cannot be narrowed to a class is reported as ``object``.
    """
    if annotation is None or annotation is type(None):
        return None
    try:
        key = infer_type_key(annotation)
    except TypeError:
        return object
    return runtime_class(key)


def runtime_class(key: TypeKey) -> type:
    """The Python class that represents values of *key*."""
    return key.python_type if isinstance(key, ParamType) else key


def is_assignable(key: TypeKey, cls: type) -> bool:
    """Whether a value of class *cls* can be passed where *key* is declared.

    Width types only match themselves, never a class.
    """
    if isinstance(key, ParamType):
        return False
    if key is cls:
        return True
    try:
        return issubclass(cls, key)
    except TypeError:
        return False


def type_name(key: TypeKey) -> str:
    """Short display name for a type key."""
    if isinstance(key, ParamType):
        return key.name
    return getattr(key, '__qualname__', repr(key))
