"""Property adaptors: resolve a template property access to a member call.

A template supplies at most one argument per property step, so
``"ABC".substring "1" "2"`` arrives as three steps.  :class:`InvokeAdaptor`
handles the first step; if the member can take arguments it returns an
:class:`ArgsAdaptor`, which the host feeds each following step until the
call is complete.
"""

from __future__ import annotations

import enum
import logging
import re
import threading
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, NamedTuple, Protocol

from .diagnostics import render_path
from .exc import (
    FATAL_ERRORS, AdaptorStateError, InvocationError, NoMatchError, NoSuchPropertyError,
)
from .members.index import InvokerIndex
from .members.invoker import MemberInvoker
from .registry import FunctionRegistry, default_registry

if TYPE_CHECKING:
    from .host import Host

log = logging.getLogger("dynaprop.adaptor")

_CAMEL_HUMP = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """``toSortedList`` -> ``to_sorted_list``."""
    return _CAMEL_HUMP.sub(r"_\1", name).lower()


class PropertyHandler(Protocol):
    """What a host dispatches property steps to."""

    def get_property(self, host: Host, target: Any, prop: Any, prop_name: str) -> Any: ...


class State(enum.Enum):
    SEEDED = "seeded"
    ACCUMULATING = "accumulating"
    RESOLVED = "resolved"


class _Match(NamedTuple):
    invoker: MemberInvoker
    args: list[Any]
    consumed: int


_UNSET = object()


class ArgsAdaptor:
    """One in-flight call that collects its arguments a step at a time.

    Every :meth:`accept` re-runs the overload search over all arguments so
    far, from their original values; a match at a higher argument count
    replaces the previous one.  Once the largest arity of any candidate is
    reached, or :meth:`resolve` is called, the latest match is invoked.
    Arguments beyond the matched arity are then applied, in order, as
    property steps on the result.  The handler for each such step is
    chosen by the result's type, not the argument's, so a result that is
    itself a pending call keeps collecting arguments.

    The outcome, value or error, is kept: resolving again returns it, and
    further arguments raise :class:`AdaptorStateError`.
    """

    def __init__(self, host: Host, target: Any, prop_name: str, index: InvokerIndex,
                 only_public: bool = True, return_type: type = object) -> None:
        self.host = host
        self.target = target
        self.prop_name = prop_name
        self.index = index
        self.only_public = only_public
        self.return_type = return_type
        self._args: list[Any] = []
        self._state = State.SEEDED
        self._match = self._find()
        self._result: Any = _UNSET
        self._error: NoSuchPropertyError | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> State:
        return self._state

    @property
    def args(self) -> list[Any]:
        """Arguments received so far, unconverted."""
        return list(self._args)

    @property
    def matched(self) -> MemberInvoker | None:
        """Descriptor that would be invoked if resolved now."""
        match = self._match
        return match.invoker if match is not None else None

    def _find(self) -> _Match | None:
        args = list(self._args)
        invoker = self.index.find(self.only_public, self.return_type, args)
        if invoker is None:
            return None
        return _Match(invoker, args, len(self._args))

    def path(self, count: int | None = None) -> str:
        args = self._args if count is None else self._args[:count]
        return render_path(self.prop_name, args)

    def accept(self, arg: Any) -> Any:
        """Add the next argument.

        Returns this adaptor while more arguments could still matter,
        otherwise the call's result.
        """
        with self._lock:
            if self._state is State.RESOLVED:
                raise AdaptorStateError(
                    f"{self.path()} already resolved; cannot accept {arg!r}"
                )
            self._args.append(arg)
            self._state = State.ACCUMULATING
            match = self._find()
            if match is not None:
                self._match = match
            if len(self._args) < self.index.max_arity:
                return self
            return self._resolve()

    def resolve(self) -> Any:
        """Invoke the latest match now, or return the kept outcome."""
        with self._lock:
            return self._resolve()

    def _resolve(self) -> Any:
        if self._state is not State.RESOLVED:
            self._state = State.RESOLVED
            try:
                self._result = self._invoke()
            except NoSuchPropertyError as exc:
                self._error = exc
        if self._error is not None:
            raise self._error
        return self._result

    def _invoke(self) -> Any:
        match = self._match
        if match is None:
            log.debug("No overload of %r on %s accepts %s",
                      self.prop_name, type(self.target).__qualname__, self.path())
            raise NoMatchError(self.target, self.path(), "no overload accepts the arguments")
        step = match.consumed
        try:
            result = match.invoker.invoke(self.target, match.args)
            for step, arg in enumerate(self._args[match.consumed:], match.consumed + 1):
                result = self.host.get_property(result, arg)
        except FATAL_ERRORS:
            raise
        except Exception as exc:
            path = self.path(step)
            log.debug("Invocation of %s on %s failed: %r",
                      path, type(self.target).__qualname__, exc)
            raise InvocationError(self.target, path, f"{type(exc).__name__}: {exc}") from exc
        return result

    def __str__(self) -> str:
        if not self._lock.acquire(blocking=False):
            return f"locked:{self.path()}"
        try:
            return str(self._resolve())
        finally:
            self._lock.release()

    def __repr__(self) -> str:
        return f"ArgsAdaptor({type(self.target).__name__}.{self.path()}, {self._state.value})"


class ArgsAdaptorHandler:
    """Host handler feeding each further property step to a pending call."""

    def get_property(self, host: Host, target: ArgsAdaptor, prop: Any, prop_name: str) -> Any:
        return target.accept(prop)


class InvokeAdaptor:
    """Resolves ``target.prop`` against the merged members of ``type(target)``.

    Parameters
    ----------
    registry : FunctionRegistry, optional
        Defaults to the process-wide registry, looked up on each call.
    only_public : bool
        Hide single-underscore members.
    return_type : type
        Only members producing instances of this class are candidates.
    """

    aliases: ClassVar[Mapping[str, str]] = {}

    def __init__(self, registry: FunctionRegistry | None = None,
                 only_public: bool = True, return_type: type = object) -> None:
        self._registry = registry
        self.only_public = only_public
        self.return_type = return_type

    @property
    def registry(self) -> FunctionRegistry:
        return self._registry if self._registry is not None else default_registry()

    def to_alias(self, name: str) -> str:
        return self.aliases.get(name, name)

    def resolve_index(self, value_type: type, prop_name: str) -> InvokerIndex:
        registry = self.registry
        name = self.to_alias(prop_name)
        index = registry.lookup(value_type, name)
        if not index:
            snake = snake_case(name)
            if snake != name:
                index = registry.lookup(value_type, snake)
        return index

    def get_property(self, host: Host, target: Any, prop: Any, prop_name: str) -> Any:
        """Result of ``target.prop_name``, or an :class:`ArgsAdaptor` awaiting arguments.

        Raises
        ------
        NoMatchError
            If no member of that name exists, or none takes zero arguments
            and the member cannot take more.
        InvocationError
            If the member raised.
        """
        index = self.resolve_index(type(target), prop_name)
        if not index:
            log.debug("No member %r on %s", prop_name, type(target).__qualname__)
            raise NoMatchError(target, prop_name, "unknown member")
        pending = ArgsAdaptor(host, target, prop_name, index,
                              only_public=self.only_public, return_type=self.return_type)
        if index.max_arity == 0:
            return pending.resolve()
        host.ensure_handler(ArgsAdaptor, ArgsAdaptorHandler)
        return pending

    def __repr__(self) -> str:
        return f"{type(self).__name__}(only_public={self.only_public})"


class ObjectAdaptor(InvokeAdaptor):
    aliases: ClassVar[Mapping[str, str]] = {
        'asList': 'to_list',
        'toList': 'to_list',
        'asSortedList': 'to_sorted_list',
        'toSortedList': 'to_sorted_list',
        'asSet': 'to_set',
        'toSet': 'to_set',
        'asSortedSet': 'to_sorted_set',
        'toSortedSet': 'to_sorted_set',
        'equals': '__eq__',
        'length': '__len__',
        'size': '__len__',
    }


class NumberAdaptor(ObjectAdaptor):
    """Number members; private members are never visible."""

    def __init__(self, registry: FunctionRegistry | None = None,
                 return_type: type = object) -> None:
        super().__init__(registry, only_public=True, return_type=return_type)


class StringAdaptor(ObjectAdaptor):
    aliases: ClassVar[Mapping[str, str]] = {
        **ObjectAdaptor.aliases,
        'url-encode': 'escape_url',
        'xml-encode': 'escape_xml',
    }
