"""Per-name, arity-indexed collections of member descriptors."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Iterator, NamedTuple

from .invoker import MemberInvoker


class _Snapshot(NamedTuple):
    invokers: tuple[MemberInvoker, ...]
    # arity -> (start, end) slice of ``invokers``
    slices: dict[int, tuple[int, int]]
    max_arity: int


def _index(invokers: Iterable[MemberInvoker]) -> _Snapshot:
    ordered = tuple(sorted(invokers, key=MemberInvoker.sort_key))
    slices: dict[int, tuple[int, int]] = {}
    start = 0
    for i in range(1, len(ordered) + 1):
        if i == len(ordered) or ordered[i].arity != ordered[start].arity:
            slices[ordered[start].arity] = (start, i)
            start = i
    max_arity = ordered[-1].arity if ordered else 0
    return _Snapshot(ordered, slices, max_arity)


class InvokerIndex:
    """Sorted descriptors sharing one name, with an arity lookup table.

    Descriptors sort by arity, then by per-position converter rank.
    The sorted tuple and the arity table are built lazily as a single
    immutable snapshot, replaced whenever descriptors are added, so a
    reader never sees a half-built index.
    """

    def __init__(self, name: str, invokers: Iterable[MemberInvoker] = ()) -> None:
        self.name = name
        self._pending: list[MemberInvoker] = list(invokers)
        self._snapshot: _Snapshot | None = None
        self._lock = threading.Lock()

    def add(self, invoker: MemberInvoker) -> None:
        with self._lock:
            self._pending.append(invoker)
            self._snapshot = None

    def merge(self, invokers: Iterable[MemberInvoker]) -> int:
        """Add each descriptor not equal to one already present.

        Returns the number of descriptors added.
        """
        with self._lock:
            seen = set(self._pending)
            added = 0
            for invoker in invokers:
                if invoker not in seen:
                    seen.add(invoker)
                    self._pending.append(invoker)
                    added += 1
            if added:
                self._snapshot = None
            return added

    def _indexed(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                snapshot = self._snapshot
                if snapshot is None:
                    snapshot = self._snapshot = _index(self._pending)
        return snapshot

    def sort(self) -> None:
        """Build the sorted snapshot now rather than on first use."""
        self._indexed()

    @property
    def max_arity(self) -> int:
        """Largest argument count any descriptor takes."""
        return self._indexed().max_arity

    def arities(self) -> list[int]:
        return list(self._indexed().slices)

    def find(self, only_public: bool, return_type: type,
             args: list[Any], extras: int = 0) -> MemberInvoker | None:
        """Return the first descriptor, in sorted order, accepting *args*.

        Only descriptors whose arity equals ``len(args)`` are tried.  On
        success *args* is replaced by the winning descriptor's converted
        values; failed attempts leave it untouched.
        """
        snapshot = self._indexed()
        bounds = snapshot.slices.get(len(args))
        if bounds is None:
            return None
        for i in range(*bounds):
            invoker = snapshot.invokers[i]
            if not invoker.is_accessible(only_public) or not invoker.returns(return_type):
                continue
            converted = invoker.convert(args, extras)
            if converted is not None:
                args[:] = converted
                return invoker
        return None

    def __iter__(self) -> Iterator[MemberInvoker]:
        return iter(self._indexed().invokers)

    def __len__(self) -> int:
        return len(self._indexed().invokers)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        snapshot = self._indexed()
        return (
            f"InvokerIndex({self.name!r}, size={len(snapshot.invokers)}, "
            f"max_arity={snapshot.max_arity})"
        )


class _EmptyIndex(InvokerIndex):
    """Shared index for unknown names; it never matches and cannot grow."""

    def add(self, invoker: MemberInvoker) -> None:
        raise TypeError("EMPTY_INDEX is immutable")

    def merge(self, invokers: Iterable[MemberInvoker]) -> int:
        raise TypeError("EMPTY_INDEX is immutable")


EMPTY_INDEX: InvokerIndex = _EmptyIndex("")
