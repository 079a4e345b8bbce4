"""Member descriptors: one invocable field, method, static function or constructor.

Descriptors compare and sort only by their parameter converters.  They are
already grouped by name and filtered by return type before being compared.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from ..converters import TypeConverter
from ..exc import FATAL_ERRORS
from ..types.coerce import TypeKey, type_name
from .typeindex import TypeIndexMap

NO_CONVERTERS: tuple[TypeConverter, ...] = ()


class MemberInvoker:
    """Base class for all member descriptors.

    Parameters
    ----------
    name : str
        Member name as seen by templates.
    converters : tuple[TypeConverter, ...]
        One converter per argument the caller must supply.
    return_type : type
        Class of the produced value, ``object`` when unknown.
    public : bool
        False for single-underscore names.
    """

    __slots__ = ('name', 'converters', 'return_type', 'public', '_hash')

    kind = "member"

    def __init__(self, name: str, converters: tuple[TypeConverter, ...],
                 return_type: type, public: bool) -> None:
        self.name = name
        self.converters = converters
        self.return_type = return_type
        self.public = public
        self._hash = hash(converters)

    @property
    def arity(self) -> int:
        """Number of arguments the caller supplies."""
        return len(self.converters)

    @property
    def is_static(self) -> bool:
        return False

    def sort_key(self) -> tuple[int, tuple[int, ...]]:
        return len(self.converters), tuple(c.rank for c in self.converters)

    def is_accessible(self, only_public: bool) -> bool:
        return self.public or not only_public

    def returns(self, required: type) -> bool:
        """Whether the produced value is an instance of *required*."""
        return required is object or issubclass(self.return_type, required)

    def convert(self, args: Sequence[Any], extras: int = 0) -> list[Any] | None:
        """Convert *args* for this member, or return None if they do not fit.

        The leading ``len(args) - extras`` arguments are converted; the
        trailing *extras* are only tested.  *args* itself is never modified.
        """
        n = len(args)
        if n != len(self.converters):
            return None
        converted = list(args)
        lead = n - extras
        try:
            for i in range(lead):
                converted[i] = self.converters[i].convert(converted[i])
            for i in range(lead, n):
                if not self.converters[i].test(converted[i]):
                    return None
        except FATAL_ERRORS:
            raise
        except Exception:
            return None
        return converted

    def invoke(self, value: Any, args: Sequence[Any]) -> Any:
        raise NotImplementedError

    @property
    def signature(self) -> str:
        params = ", ".join(type_name(c.target) for c in self.converters)
        return f"{self.name}({params}) -> {type_name(self.return_type)}"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, MemberInvoker):
            return NotImplemented
        return self.converters == other.converters

    def __hash__(self) -> int:
        return self._hash

    def __lt__(self, other: MemberInvoker) -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.signature})"


class FieldInvoker(MemberInvoker):
    """Zero-argument getter for an attribute or property."""

    __slots__ = ('_getter',)

    kind = "field"

    def __init__(self, name: str, return_type: type, public: bool,
                 getter: Callable[[Any], Any]) -> None:
        super().__init__(name, NO_CONVERTERS, return_type, public)
        self._getter = getter

    def invoke(self, value: Any, args: Sequence[Any]) -> Any:
        return self._getter(value)


class MethodInvoker(MemberInvoker):
    """Instance method; the target value is passed as the first argument."""

    __slots__ = ('_func',)

    kind = "method"

    def __init__(self, name: str, converters: tuple[TypeConverter, ...],
                 return_type: type, public: bool, func: Callable[..., Any]) -> None:
        super().__init__(name, converters, return_type, public)
        self._func = func

    def invoke(self, value: Any, args: Sequence[Any]) -> Any:
        return self._func(value, *args[:len(self.converters)])


class StaticInvoker(MemberInvoker):
    """Static function or constructor.

    Invoked directly it ignores the target value.  :meth:`for_value_type`
    derives a descriptor that feeds the target value into one parameter,
    so ``add(a, b)`` can be called as a one-argument method on a number.
    """

    __slots__ = ('_func', 'value_index_of', 'qualname', 'constructor')

    def __init__(self, name: str, converters: tuple[TypeConverter, ...],
                 return_type: type, public: bool, func: Callable[..., Any],
                 keys: tuple[TypeKey, ...], qualname: str = "",
                 constructor: bool = False) -> None:
        super().__init__(name, converters, return_type, public)
        self._func = func
        self.value_index_of = TypeIndexMap.of(keys)
        self.qualname = qualname or name
        self.constructor = constructor

    @property
    def kind(self) -> str:  # type: ignore[override]
        return "constructor" if self.constructor else "static"

    @property
    def is_static(self) -> bool:
        return True

    def invoke(self, value: Any, args: Sequence[Any]) -> Any:
        return self._func(*args[:len(self.converters)])

    def invoke_with_value(self, value_index: int, value: Any, args: Sequence[Any]) -> Any:
        """Invoke with *value* placed at *value_index*, other args around it."""
        full = list(args[:len(self.converters) - 1])
        full.insert(value_index, value)
        return self._func(*full)

    def for_value_type(self, cls: type) -> ValueInjectedInvoker | None:
        """Descriptor exposing this function as a member of *cls* values.

        Returns None when no parameter accepts a *cls* value.
        """
        value_index = self.value_index_of.index_for(cls)
        if value_index is None:
            return None
        others = self.converters[:value_index] + self.converters[value_index + 1:]
        return ValueInjectedInvoker(self, value_index, others)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.qualname}: {self.signature})"


class ValueInjectedInvoker(MemberInvoker):
    """A static function seen as a member, with the target value injected."""

    __slots__ = ('function', 'value_index')

    kind = "function"

    def __init__(self, function: StaticInvoker, value_index: int,
                 converters: tuple[TypeConverter, ...]) -> None:
        super().__init__(function.name, converters, function.return_type, function.public)
        self.function = function
        self.value_index = value_index

    @property
    def is_static(self) -> bool:
        return True

    def invoke(self, value: Any, args: Sequence[Any]) -> Any:
        return self.function.invoke_with_value(self.value_index, value, args)

    def __repr__(self) -> str:
        return (
            f"ValueInjectedInvoker({self.function.qualname}: {self.signature}, "
            f"value_index={self.value_index})"
        )
