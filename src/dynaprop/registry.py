"""Per-type merged member registry.

Usage::

    registry = FunctionRegistry()
    registry.register_function_classes(str, TextFunctions)

    index = registry.lookup(str, "shout")
    args = ["3"]
    invoker = index.find(True, object, args)
    invoker.invoke("hey", args)
"""

from __future__ import annotations

import importlib
import logging
import threading
import types
from typing import Any, Iterable, Iterator

from .converters import Coercion, ConverterTable
from .exc import ConfigurationError
from .members.catalog import CatalogCache
from .members.index import EMPTY_INDEX, InvokerIndex
from .members.invoker import MemberInvoker
from .types.base import ParamType, get_type_by_name
from .types.coerce import TypeKey, type_name

log = logging.getLogger("dynaprop.registry")


class TypeFunctions:
    """Merged, name-keyed indexes of every member usable on one type."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        self._indexes: dict[str, InvokerIndex] = {}

    def merge(self, name: str, invokers: Iterable[MemberInvoker]) -> int:
        """Add *invokers* under *name*, skipping ones equal to existing entries."""
        index = self._indexes.get(name)
        if index is None:
            index = self._indexes[name] = InvokerIndex(name)
        return index.merge(invokers)

    def get(self, name: str) -> InvokerIndex:
        return self._indexes.get(name, EMPTY_INDEX)

    def freeze(self) -> None:
        """Sort every index now so readers never build one."""
        for index in self._indexes.values():
            index.sort()

    @property
    def names(self) -> list[str]:
        return sorted(self._indexes)

    def items(self) -> Iterator[tuple[str, InvokerIndex]]:
        return iter(list(self._indexes.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)

    def __repr__(self) -> str:
        return f"TypeFunctions({self.value_type.__qualname__}, names={len(self._indexes)})"


class FunctionRegistry:
    """Owns the converter table, catalog cache and merged per-type views.

    A type's merged view holds, in priority order:

    1. its own instance members, and its own static members that accept
       one of its values;
    2. static members of function providers registered for the type;
    3. the merged views of its bases, in ``__bases__`` order.

    Equal descriptors (same parameter converters) from a later source are
    dropped, so earlier sources win.  Merged views are built once, under
    the registry lock, and dropped again when a provider registration or
    converter change could alter them.
    """

    def __init__(self, converters: ConverterTable | None = None) -> None:
        self.converters = converters if converters is not None else ConverterTable.with_defaults()
        self.catalogs = CatalogCache(self.converters)
        self._providers: dict[type, list[Any]] = {}
        self._by_type: dict[type, TypeFunctions] = {}
        self._lock = threading.RLock()

    # ── Registration ─────────────────────────────────────────────

    def register_converter(self, key: TypeKey, coerce: Coercion) -> bool:
        """Add a converter; cached catalogs are rebuilt if the table changed."""
        with self._lock:
            changed = self.converters.register(key, coerce)
            if changed:
                self.catalogs.clear()
                self._by_type.clear()
            return changed

    def register_function_classes(self, value_type: type, *providers: Any) -> None:
        """Expose the static members of *providers* on *value_type* values.

        Each provider is a class or module.  A provider already registered
        for *value_type* is skipped.

        Raises
        ------
        ConfigurationError
            If *value_type* is not a class, a provider is neither a class
            nor a module, or a provider function's value parameter is
            ambiguous.
        """
        if not isinstance(value_type, type):
            raise ConfigurationError(f"Value type must be a class, got {value_type!r}")
        with self._lock:
            registered = self._providers.setdefault(value_type, [])
            added: list[Any] = []
            for provider in providers:
                if not isinstance(provider, (type, types.ModuleType)):
                    raise ConfigurationError(
                        f"Function provider must be a class or module, got {provider!r}"
                    )
                if any(p is provider for p in registered) or any(p is provider for p in added):
                    continue
                # Fail now rather than at first lookup.
                exposed = [name for name, _ in self.catalogs.of(provider).functions_for(value_type)]
                if not exposed:
                    log.warning(
                        "Provider %s exposes no functions for %s",
                        _owner_name(provider), value_type.__qualname__,
                    )
                log.debug(
                    "Registered provider %s for %s: %s",
                    _owner_name(provider), value_type.__qualname__, ", ".join(exposed),
                )
                added.append(provider)
            if added:
                registered.extend(added)
                self._invalidate(value_type)

    def _invalidate(self, value_type: type) -> None:
        for cached in list(self._by_type):
            if issubclass(cached, value_type):
                del self._by_type[cached]

    def providers(self, value_type: type) -> list[Any]:
        """Providers registered directly for *value_type*."""
        return list(self._providers.get(value_type, ()))

    def clear(self) -> None:
        """Drop every cached catalog and merged view; registrations stay."""
        with self._lock:
            self.catalogs.clear()
            self._by_type.clear()

    # ── Lookup ───────────────────────────────────────────────────

    def get(self, value_type: type) -> TypeFunctions:
        """The merged view for *value_type*, built on first use."""
        functions = self._by_type.get(value_type)
        if functions is not None:
            return functions
        with self._lock:
            functions = self._by_type.get(value_type)
            if functions is None:
                functions = self._by_type[value_type] = self._build(value_type)
            return functions

    def lookup(self, value_type: type, name: str) -> InvokerIndex:
        """Merged index for *name* on *value_type*; ``EMPTY_INDEX`` if unknown."""
        return self.get(value_type).get(name)

    def _build(self, value_type: type) -> TypeFunctions:
        functions = TypeFunctions(value_type)
        own = self.catalogs.of(value_type)
        for name, invokers in own.instance_invokers():
            functions.merge(name, invokers)
        for name, invokers in own.functions_for(value_type, strict=False):
            functions.merge(name, invokers)
        for provider in self._providers.get(value_type, ()):
            for name, invokers in self.catalogs.of(provider).functions_for(value_type):
                functions.merge(name, invokers)
        for base in value_type.__bases__:
            for name, index in self.get(base).items():
                functions.merge(name, index)
        functions.freeze()
        log.debug("Merged %d member names for %s", len(functions), value_type.__qualname__)
        return functions

    def __repr__(self) -> str:
        return (
            f"FunctionRegistry(converters={len(self.converters)}, "
            f"types={len(self._by_type)}, providers={sum(map(len, self._providers.values()))})"
        )

    # ── Configuration ────────────────────────────────────────────

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> FunctionRegistry:
        """Build a registry from a config dict::

            FunctionRegistry.from_config({
                "converters": {"datetime.date": "datetime:date.fromisoformat"},
                "functions": {"builtins.str": ["mypkg.text:TextFunctions"]},
                "defaults": True,
            })

        Type names may also be width type names (``"int16"``) for converters.
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config must be a mapping, got {type(config).__name__}")
        unknown = set(config) - {'converters', 'functions', 'defaults'}
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        registry = cls()
        for key_name, coerce_name in _section(config, 'converters').items():
            coerce = resolve_name(coerce_name)
            if not callable(coerce):
                raise ConfigurationError(f"Converter {coerce_name!r} is not callable")
            registry.register_converter(_resolve_key(key_name), coerce)

        if config.get('defaults', True):
            from .functions import install_default_functions
            install_default_functions(registry)

        for type_name_, provider_names in _section(config, 'functions').items():
            value_type = resolve_name(type_name_)
            if isinstance(provider_names, str):
                provider_names = [provider_names]
            registry.register_function_classes(
                value_type, *(resolve_name(p) for p in provider_names)
            )
        return registry


def _section(config: dict[str, Any], key: str) -> dict[str, Any]:
    section = config.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section {key!r} must be a mapping")
    return section


def _owner_name(owner: Any) -> str:
    return getattr(owner, '__qualname__', None) or getattr(owner, '__name__', repr(owner))


def _resolve_key(name: str) -> TypeKey:
    try:
        return get_type_by_name(name)
    except KeyError:
        pass
    key = resolve_name(name)
    if not isinstance(key, (type, ParamType)):
        raise ConfigurationError(f"{name!r} is not a class: {type_name(key)}")
    return key


def resolve_name(name: str) -> Any:
    """Import the object named ``"module:qualname"``, ``"module.name"`` or a module.

    Raises
    ------
    ConfigurationError
        If the module or attribute cannot be found.
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"Expected a dotted name, got {name!r}")
    if ':' in name:
        module_name, _, qualname = name.partition(':')
    else:
        try:
            return importlib.import_module(name)
        except ImportError:
            module_name, _, qualname = name.rpartition('.')
    if not module_name or not qualname:
        raise ConfigurationError(f"Malformed name {name!r}; use 'module:qualname'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import {module_name!r} for {name!r}") from exc
    for attr in qualname.split('.'):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise ConfigurationError(f"Cannot resolve {name!r}: no attribute {attr!r}") from exc
    return obj


# ── Process-wide default ─────────────────────────────────────────

_default: FunctionRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> FunctionRegistry:
    """The shared registry, created with the built-in functions on first use."""
    global _default
    with _default_lock:
        if _default is None:
            from .functions import install_default_functions
            registry = FunctionRegistry()
            install_default_functions(registry)
            _default = registry
        return _default


def reset_default_registry() -> None:
    """Discard the shared registry (used by tests)."""
    global _default
    with _default_lock:
        _default = None
