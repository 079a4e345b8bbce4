"""Class-keyed dispatch with nearest-ancestor fallback."""

from __future__ import annotations

import threading
from typing import Generic, Iterator, TypeVar

T = TypeVar('T')


class TypeDispatchMap(Generic[T]):
    """Maps classes to values; unregistered classes get their nearest ancestor's.

    The nearest ancestor is the first registered class in the MRO, so an
    entry for ``object`` acts as the fallback for everything.

    Usage::

        formatters = TypeDispatchMap[Callable[[Any], str]]()
        formatters.register(object, repr)
        formatters.register(str, str.upper)
        formatters.lookup(bool)   # repr, via object
    """

    def __init__(self) -> None:
        self._entries: dict[type, T] = {}
        self._resolved: dict[type, T] = {}
        self._lock = threading.Lock()

    def register(self, cls: type, value: T) -> None:
        with self._lock:
            self._entries[cls] = value
            self._resolved.clear()

    def lookup(self, cls: type) -> T:
        """Value for *cls* or its nearest registered ancestor.

        Raises KeyError when no ancestor is registered.
        """
        try:
            return self._resolved[cls]
        except KeyError:
            pass
        with self._lock:
            for ancestor in cls.__mro__:
                if ancestor in self._entries:
                    value = self._resolved[cls] = self._entries[ancestor]
                    return value
        raise KeyError(cls)

    def __contains__(self, cls: object) -> bool:
        """Whether *cls* itself is registered, ignoring ancestors."""
        return cls in self._entries

    def __iter__(self) -> Iterator[type]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
