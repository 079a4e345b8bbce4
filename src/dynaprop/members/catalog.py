"""Member catalogs: introspect a class (or module) once into descriptors.

Usage::

    catalogs = CatalogCache(ConverterTable.with_defaults())
    members = catalogs.of(str)
    members.instance['upper'].find(True, object, [])
"""

from __future__ import annotations

import inspect
import logging
import operator
import threading
import types
from typing import Any, Callable, ClassVar, Iterator, Mapping, get_origin, get_type_hints

from ..converters import ConverterTable, TypeConverter
from ..exc import ConfigurationError
from ..types.coerce import TypeKey, infer_return_class, infer_type_key
from .index import InvokerIndex
from .invoker import FieldInvoker, MemberInvoker, MethodInvoker, StaticInvoker

log = logging.getLogger("dynaprop.catalog")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

# Protocol dunders worth exposing, with the operator invoking them and the
# argument count that operator takes.  Going through ``operator`` gives the
# reflected-operand fallback instead of a raw ``NotImplemented``.
_PROTOCOL: dict[str, tuple[Callable[..., Any], int]] = {
    '__eq__': (operator.eq, 1),
    '__ne__': (operator.ne, 1),
    '__lt__': (operator.lt, 1),
    '__le__': (operator.le, 1),
    '__gt__': (operator.gt, 1),
    '__ge__': (operator.ge, 1),
    '__add__': (operator.add, 1),
    '__sub__': (operator.sub, 1),
    '__mul__': (operator.mul, 1),
    '__truediv__': (operator.truediv, 1),
    '__floordiv__': (operator.floordiv, 1),
    '__mod__': (operator.mod, 1),
    '__pow__': (operator.pow, 1),
    '__and__': (operator.and_, 1),
    '__or__': (operator.or_, 1),
    '__xor__': (operator.xor, 1),
    '__lshift__': (operator.lshift, 1),
    '__rshift__': (operator.rshift, 1),
    '__contains__': (operator.contains, 1),
    '__getitem__': (operator.getitem, 1),
    '__neg__': (operator.neg, 0),
    '__pos__': (operator.pos, 0),
    '__invert__': (operator.invert, 0),
    '__abs__': (abs, 0),
    '__len__': (len, 0),
}

_EQUALITY_NAMES = frozenset({'__eq__', '__ne__', 'equals'})


def member(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator exposing a function under a different member name.

    Lets a provider offer overloads, which Python cannot spell directly::

        class NumberFunctions:
            @staticmethod
            def add(v1: int, v2: int) -> int: ...

            @staticmethod
            @member("add")
            def add_float(v1: float, v2: float) -> float: ...
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        fn.__member_name__ = name  # type: ignore[attr-defined]
        return fn
    return decorator


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith('__') and name.endswith('__')


def is_public(name: str) -> bool:
    return _is_dunder(name) or not name.startswith('_')


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj, include_extras=True)
    except Exception:
        return dict(getattr(obj, '__annotations__', None) or {})


def _positional_parameters(func: Any, drop_first: bool) -> list[inspect.Parameter] | None:
    """Positional parameters a caller can fill, or None if unusable."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    params = list(sig.parameters.values())
    if drop_first:
        if not params or params[0].kind not in _POSITIONAL:
            return None
        params = params[1:]
    positional = []
    for p in params:
        if p.kind in _POSITIONAL:
            positional.append(p)
        elif p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is p.empty:
            return None
    return positional


def _arities(params: list[inspect.Parameter]) -> range:
    required = sum(1 for p in params if p.default is p.empty)
    return range(required, len(params) + 1)


class _Signature:
    """Resolved type keys and return class of one callable."""

    __slots__ = ('params', 'keys', 'return_type')

    def __init__(self, params: list[inspect.Parameter], keys: tuple[TypeKey, ...],
                 return_type: type) -> None:
        self.params = params
        self.keys = keys
        self.return_type = return_type


def _resolve(func: Any, hints_from: Any, drop_first: bool,
             produces: type | None = None) -> _Signature | None:
    params = _positional_parameters(func, drop_first)
    if params is None:
        return None
    hints = _type_hints(hints_from)
    return_type = produces or infer_return_class(hints.get('return', inspect.Parameter.empty))
    if return_type is None:
        return None  # void
    try:
        keys = tuple(infer_type_key(hints.get(p.name, p.annotation)) for p in params)
    except TypeError as exc:
        log.debug("Skipping %r: %s", func, exc)
        return None
    return _Signature(params, keys, return_type)


def _unwrap(raw: Any) -> Any:
    if isinstance(raw, (staticmethod, classmethod)):
        return raw.__func__
    if isinstance(raw, property):
        return raw.fget
    return raw


class ClassMembers:
    """Instance and static descriptors of one class or module, keyed by name.

    Both maps are read-only once built; each index is already sorted.
    """

    __slots__ = ('owner', 'instance', 'static')

    def __init__(self, owner: Any, instance: dict[str, InvokerIndex],
                 static: dict[str, InvokerIndex]) -> None:
        self.owner = owner
        self.instance: Mapping[str, InvokerIndex] = types.MappingProxyType(instance)
        self.static: Mapping[str, InvokerIndex] = types.MappingProxyType(static)

    def instance_invokers(self) -> Iterator[tuple[str, list[MemberInvoker]]]:
        for name, index in self.instance.items():
            yield name, list(index)

    def functions_for(self, value_type: type,
                      strict: bool = True) -> Iterator[tuple[str, list[MemberInvoker]]]:
        """Static members usable as members of *value_type* values.

        With *strict*, a function whose value parameter is ambiguous raises
        ConfigurationError; otherwise it is logged and skipped.
        """
        for name, index in self.static.items():
            derived: list[MemberInvoker] = []
            for invoker in index:
                if not isinstance(invoker, StaticInvoker):
                    continue
                try:
                    injected = invoker.for_value_type(value_type)
                except ConfigurationError as exc:
                    if strict:
                        raise
                    log.warning("Skipping %s: %s", invoker.qualname, exc)
                    continue
                if injected is not None:
                    derived.append(injected)
            if derived:
                yield name, derived

    def __repr__(self) -> str:
        owner = getattr(self.owner, '__qualname__', None) or getattr(self.owner, '__name__', '?')
        return (
            f"ClassMembers({owner}, instance={list(self.instance)}, "
            f"static={list(self.static)})"
        )


class _Builder:
    """Collects descriptors for one owner, then freezes them."""

    def __init__(self, owner: Any, converters: ConverterTable) -> None:
        self.owner = owner
        self.converters = converters
        self.instance: dict[str, InvokerIndex] = {}
        self.static: dict[str, InvokerIndex] = {}
        self.fields: set[str] = set()

    def _add(self, target: dict[str, InvokerIndex], invoker: MemberInvoker) -> None:
        index = target.get(invoker.name)
        if index is None:
            index = target[invoker.name] = InvokerIndex(invoker.name)
        index.add(invoker)

    def _converters(self, keys: tuple[TypeKey, ...]) -> tuple[TypeConverter, ...]:
        return self.converters.lookup_all(keys)

    def add_field(self, name: str, return_type: type | None,
                  getter: Callable[[Any], Any]) -> None:
        if name in self.fields or return_type is None:
            return
        self.fields.add(name)
        self._add(self.instance, FieldInvoker(name, return_type, is_public(name), getter))

    def add_method(self, name: str, raw_name: str, func: Any) -> None:
        sig = _resolve(func, func, drop_first=True)
        if sig is None:
            return
        protocol = _PROTOCOL.get(raw_name)
        for arity in _arities(sig.params):
            keys = sig.keys[:arity]
            if (arity == 1 and keys[0] is object and name in _EQUALITY_NAMES
                    and isinstance(self.owner, type)):
                # object parameters would accept anything: equality against
                # an unconvertible value must not match.
                converters = (self.converters.lookup(self.owner),)
            else:
                converters = self._converters(keys)
            thunk = protocol[0] if protocol and protocol[1] == arity else func
            self._add(self.instance, MethodInvoker(
                name, converters, sig.return_type, is_public(name), thunk,
            ))

    def add_static(self, name: str, func: Any, hints_from: Any, qualname: str,
                   constructor: bool = False, return_type: type | None = None) -> None:
        sig = _resolve(func, hints_from, drop_first=constructor, produces=return_type)
        if sig is None:
            return
        for arity in _arities(sig.params):
            if arity == 0:
                continue
            keys = sig.keys[:arity]
            self._add(self.static, StaticInvoker(
                name, self._converters(keys), sig.return_type,
                is_public(name), self.owner if constructor else func, keys,
                qualname=qualname, constructor=constructor,
            ))

    def build(self) -> ClassMembers:
        for index in (*self.instance.values(), *self.static.values()):
            index.sort()
        return ClassMembers(self.owner, self.instance, self.static)


def _build_module(module: types.ModuleType, converters: ConverterTable) -> ClassMembers:
    builder = _Builder(module, converters)
    names = getattr(module, '__all__', None)
    for name, obj in list(vars(module).items()):
        if names is not None and name not in names:
            continue
        if not inspect.isroutine(obj) or getattr(obj, '__module__', None) != module.__name__:
            continue
        if _is_dunder(name):
            continue
        exposed = getattr(obj, '__member_name__', name)
        builder.add_static(exposed, obj, obj, qualname=f"{module.__name__}.{name}")
    return builder.build()


def _build_class(cls: type, converters: ConverterTable) -> ClassMembers:
    builder = _Builder(cls, converters)
    own = dict(vars(cls))
    for name, raw in own.items():
        if _is_dunder(name) and name not in _PROTOCOL:
            continue
        exposed = getattr(_unwrap(raw), '__member_name__', name)
        qualname = f"{cls.__qualname__}.{name}"
        if isinstance(raw, staticmethod):
            builder.add_static(exposed, raw.__func__, raw.__func__, qualname)
        elif isinstance(raw, (classmethod, types.ClassMethodDescriptorType)):
            bound = getattr(cls, name)
            builder.add_static(exposed, bound, _unwrap(raw), qualname)
        elif isinstance(raw, property):
            if raw.fget is not None:
                hints = _type_hints(raw.fget)
                builder.add_field(exposed, infer_return_class(hints.get('return', object)),
                                  operator.attrgetter(name))
        elif isinstance(raw, (types.MemberDescriptorType, types.GetSetDescriptorType)):
            builder.add_field(exposed, object, operator.attrgetter(name))
        elif inspect.isroutine(raw):
            builder.add_method(exposed, name, raw)

    # Plain annotated attributes (dataclass fields included).
    try:
        annotations = inspect.get_annotations(cls)
    except Exception:
        annotations = {}
    if annotations:
        hints = _type_hints(cls)
        for name in annotations:
            if _is_dunder(name) or inspect.isroutine(own.get(name)):
                continue
            annotation = hints.get(name, annotations[name])
            if get_origin(annotation) is ClassVar or annotation is ClassVar:
                continue
            builder.add_field(name, infer_return_class(annotation) or object,
                              operator.attrgetter(name))

    init = own.get('__init__')
    if init is not None and inspect.isfunction(init):
        builder.add_static(cls.__name__, init, init, f"{cls.__qualname__}.__init__",
                           constructor=True, return_type=cls)
    return builder.build()


def build_catalog(owner: Any, converters: ConverterTable) -> ClassMembers:
    """Introspect *owner* (a class or module) into a :class:`ClassMembers`."""
    if isinstance(owner, types.ModuleType):
        members = _build_module(owner, converters)
    elif isinstance(owner, type):
        members = _build_class(owner, converters)
    else:
        raise TypeError(f"Expected a class or module, got {type(owner).__name__}")
    log.debug(
        "Built catalog for %s: %d instance, %d static names",
        getattr(owner, '__qualname__', getattr(owner, '__name__', owner)),
        len(members.instance), len(members.static),
    )
    return members


class CatalogCache:
    """Builds each owner's catalog exactly once and keeps it indefinitely."""

    def __init__(self, converters: ConverterTable) -> None:
        self.converters = converters
        self._cache: dict[Any, ClassMembers] = {}
        self._lock = threading.RLock()

    def of(self, owner: Any) -> ClassMembers:
        members = self._cache.get(owner)
        if members is not None:
            return members
        with self._lock:
            members = self._cache.get(owner)
            if members is None:
                members = self._cache[owner] = build_catalog(owner, self.converters)
            return members

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, owner: object) -> bool:
        return owner in self._cache

    def __len__(self) -> int:
        return len(self._cache)
