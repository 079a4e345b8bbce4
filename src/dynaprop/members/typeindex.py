"""Map from declared parameter type to the first parameter position using it."""

from __future__ import annotations

import threading
from typing import Iterator

from ..exc import ConfigurationError
from ..types.coerce import TypeKey, is_assignable, type_name


class TypeIndexMap:
    """Records, per declared type key, the first parameter index it appears at.

    :meth:`index_for` answers "which parameter can receive a value of this
    class", used to inject the target value into a static function.
    Answers are cached per class.
    """

    __slots__ = ('_first', '_cache', '_lock')

    def __init__(self) -> None:
        self._first: dict[TypeKey, int] = {}
        self._cache: dict[type, int | None] = {}
        self._lock = threading.Lock()

    @classmethod
    def of(cls, keys: tuple[TypeKey, ...]) -> TypeIndexMap:
        index = cls()
        for position, key in enumerate(keys):
            index.put_if_absent(key, position)
        return index

    def put_if_absent(self, key: TypeKey, position: int) -> None:
        with self._lock:
            self._first.setdefault(key, position)
            self._cache.clear()

    def index_for(self, cls: type) -> int | None:
        """Position of the parameter that accepts a *cls* value, or None.

        An exact declared match wins.  Otherwise exactly one distinct
        assignable declared type must exist.

        Raises
        ------
        ConfigurationError
            If several distinct declared types could receive the value.
        """
        try:
            return self._cache[cls]
        except KeyError:
            pass
        with self._lock:
            position = self._first.get(cls)
            if position is None:
                candidates = [(k, i) for k, i in self._first.items() if is_assignable(k, cls)]
                if len(candidates) > 1:
                    names = ", ".join(f"{type_name(k)}@{i}" for k, i in candidates)
                    raise ConfigurationError(
                        f"Ambiguous value parameter for {cls.__qualname__}: {names}"
                    )
                position = candidates[0][1] if candidates else None
            self._cache[cls] = position
            return position

    def __len__(self) -> int:
        return len(self._first)

    def __iter__(self) -> Iterator[TypeKey]:
        return iter(list(self._first))

    def __repr__(self) -> str:
        items = ", ".join(f"{type_name(k)}: {i}" for k, i in self._first.items())
        return f"TypeIndexMap({{{items}}})"
