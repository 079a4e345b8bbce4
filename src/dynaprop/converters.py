"""Type converters: coerce loosely typed arguments to declared parameter types.

Each :class:`TypeConverter` pairs a target type key with a coercion
function and a rank.  Ranks come from registration order in a
:class:`ConverterTable` and give member descriptors a stable sort order.
"""

from __future__ import annotations

import decimal
import fractions
import logging
import re
import threading
from typing import Any, Callable, Iterable, Iterator

from .exc import ConfigurationError, ConversionError
from .types.atoms import p_byte, p_char, p_int, p_long, p_short
from .types.base import ParamType
from .types.coerce import TypeKey, is_assignable, type_name

log = logging.getLogger("dynaprop.converters")

Coercion = Callable[[Any], Any]

_BOOL = re.compile(r"^(?:(t|true)|f|false)$", re.IGNORECASE)


class TypeConverter:
    """Converts argument values to one target type.

    Equality, hashing and ordering use only the rank, so converter
    sequences compare the same way member descriptors are sorted.
    """

    __slots__ = ('rank', 'target', '_coerce')

    def __init__(self, rank: int, target: TypeKey, coerce: Coercion | None) -> None:
        self.rank = rank
        self.target = target
        self._coerce = coerce

    @property
    def is_placeholder(self) -> bool:
        """True when only instance matching is possible."""
        return self._coerce is None

    def test(self, value: Any) -> bool:
        """Whether *value* is acceptable as-is, without conversion."""
        if value is None:
            return False
        if isinstance(self.target, ParamType):
            return self.target.accepts(value)
        return isinstance(value, self.target)

    def convert(self, value: Any) -> Any:
        """Return *value* converted to the target type.

        Raises
        ------
        ConversionError
            If the value is incompatible.  Coercion functions may also
            raise ``ValueError``, ``ArithmeticError`` and the like.
        """
        if value is None:
            raise ConversionError(f"None is not a valid {type_name(self.target)}")
        if self.test(value):
            return value
        if self._coerce is None:
            raise ConversionError(
                f"{type(value).__name__} is not a {type_name(self.target)}"
            )
        # bytes carry text, their repr does not
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode('utf-8')
        return self._coerce(value)

    def replace(self, coerce: Coercion) -> TypeConverter:
        """A usable converter keeping this one's rank and target."""
        return TypeConverter(self.rank, self.target, coerce)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TypeConverter):
            return self.rank == other.rank
        return NotImplemented

    def __hash__(self) -> int:
        return self.rank

    def __lt__(self, other: TypeConverter) -> bool:
        return self.rank < other.rank

    def __repr__(self) -> str:
        kind = "placeholder" if self.is_placeholder else "converter"
        return f"TypeConverter({type_name(self.target)}, rank={self.rank}, {kind})"


# ── Default coercions ─────────────────────────────────────────────

def to_char(value: Any) -> str:
    text = value if isinstance(value, str) else str(value)
    if len(text) != 1:
        raise ConversionError(f"expected a single character, got {text!r}")
    return text


def to_int(value: Any) -> int:
    """Exact integer extraction; fractional values are rejected."""
    if isinstance(value, int):
        return int(value)
    if isinstance(value, decimal.Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise ConversionError(f"{value} is not an exact integer")
        return int(value)
    if isinstance(value, fractions.Fraction):
        if value.denominator != 1:
            raise ConversionError(f"{value} is not an exact integer")
        return value.numerator
    if isinstance(value, float):
        if not value.is_integer():
            raise ConversionError(f"{value} is not an exact integer")
        return int(value)
    return int(str(value))


def exact_width(ptype: ParamType) -> Coercion:
    """Build a coercion narrowing to *ptype*'s signed width, never truncating."""
    def coerce(value: Any) -> int:
        result = to_int(value)
        if not ptype.in_range(result):
            raise ConversionError(f"{ptype.name} overflow: {result}")
        return result
    return coerce


def to_float(value: Any) -> float:
    if isinstance(value, (int, decimal.Decimal, fractions.Fraction)):
        return float(value)
    return float(str(value))


def to_bool(value: Any) -> bool:
    if isinstance(value, int):
        return value != 0
    text = str(value)
    m = _BOOL.match(text)
    if m:
        return m.group(1) is not None
    return int(text) != 0


def to_decimal(value: Any) -> decimal.Decimal:
    if isinstance(value, int):
        return decimal.Decimal(value)
    return decimal.Decimal(str(value))


def to_str(value: Any) -> str:
    return str(value)


def to_bytes(value: Any) -> bytes:
    return str(value).encode('utf-8')


# Registration order is the rank order.
DEFAULT_CONVERTERS: tuple[tuple[TypeKey, Coercion], ...] = (
    (p_char, to_char),
    (int, to_int),
    (p_long, exact_width(p_long)),
    (p_int, exact_width(p_int)),
    (p_short, exact_width(p_short)),
    (p_byte, exact_width(p_byte)),
    (float, to_float),
    (bool, to_bool),
    (decimal.Decimal, to_decimal),
    (str, to_str),
    (bytes, to_bytes),
)


class ConverterTable:
    """Ordered, append-only map from type key to :class:`TypeConverter`.

    Lookups for unregistered classes fall back to the nearest registered
    ancestor, then to any registered type the class is assignable to.  If
    nothing matches, a placeholder is installed so later lookups are O(1).

    Usage::

        table = ConverterTable.with_defaults()
        table.register(datetime.date, datetime.date.fromisoformat)
        table.lookup(datetime.date).convert("2024-01-15")
    """

    def __init__(self) -> None:
        self._converters: dict[TypeKey, TypeConverter] = {}
        # Cache of lookups answered by an ancestor's converter.
        self._derived: dict[TypeKey, TypeConverter] = {}
        self._lock = threading.RLock()

    @classmethod
    def with_defaults(cls) -> ConverterTable:
        """Create a table holding the default converters."""
        table = cls()
        for key, coerce in DEFAULT_CONVERTERS:
            table.register(key, coerce)
        return table

    def register(self, key: TypeKey, coerce: Coercion) -> bool:
        """Add a converter for *key*, unless a usable one is already present.

        A placeholder is replaced in its original rank slot.  Returns True
        if the table changed.
        """
        if not isinstance(key, (type, ParamType)):
            raise ConfigurationError(f"Converter key must be a class or ParamType, got {key!r}")
        if not callable(coerce):
            raise ConfigurationError(f"Converter for {type_name(key)} is not callable: {coerce!r}")
        with self._lock:
            old = self._converters.get(key)
            if old is not None and not old.is_placeholder:
                return False
            if old is None:
                self._converters[key] = TypeConverter(len(self._converters), key, coerce)
            else:
                self._converters[key] = old.replace(coerce)
            self._derived.clear()
        log.debug("Registered converter for %s", type_name(key))
        return True

    def lookup(self, key: TypeKey) -> TypeConverter:
        """Return the converter for *key*, installing a placeholder if needed."""
        converter = self._converters.get(key) or self._derived.get(key)
        if converter is not None:
            return converter
        with self._lock:
            converter = self._converters.get(key) or self._derived.get(key)
            if converter is not None:
                return converter
            converter = self._find_assignable(key)
            if converter is not None:
                self._derived[key] = converter
                return converter
            converter = TypeConverter(len(self._converters), key, None)
            self._converters[key] = converter
            log.debug("Installed placeholder converter for %s", type_name(key))
            return converter

    def lookup_all(self, keys: Iterable[TypeKey]) -> tuple[TypeConverter, ...]:
        """Look up converters for a whole parameter list, atomically."""
        with self._lock:
            return tuple(self.lookup(key) for key in keys)

    def _find_assignable(self, key: TypeKey) -> TypeConverter | None:
        if isinstance(key, ParamType):
            return None
        for ancestor in key.__mro__[1:]:
            converter = self._converters.get(ancestor)
            if converter is not None and not converter.is_placeholder:
                return converter
        # Virtual subclasses (ABC registration) are not in the MRO.
        for target, converter in self._converters.items():
            if not converter.is_placeholder and is_assignable(target, key):
                return converter
        return None

    def __contains__(self, key: object) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)

    def __iter__(self) -> Iterator[TypeConverter]:
        return iter(list(self._converters.values()))

    def __repr__(self) -> str:
        names = ", ".join(type_name(k) for k in self._converters)
        return f"ConverterTable([{names}])"
