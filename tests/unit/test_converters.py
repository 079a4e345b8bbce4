"""Unit tests for TypeConverter and ConverterTable."""

import abc
from decimal import Decimal
from fractions import Fraction

import pytest

from dynaprop.converters import ConverterTable, to_bool, to_int
from dynaprop.exc import ConfigurationError, ConversionError
from dynaprop.types import p_byte, p_char, p_int, p_long, p_short


@pytest.fixture
def table():
    return ConverterTable.with_defaults()


class Celsius:
    def __init__(self, degrees):
        self.degrees = float(degrees)


class TestDefaultOrder:
    def test_registration_order_is_rank(self, table):
        targets = [c.target for c in table]
        assert targets == [p_char, int, p_long, p_int, p_short, p_byte,
                           float, bool, Decimal, str, bytes]
        assert [c.rank for c in table] == list(range(len(targets)))

    def test_ordering_follows_rank(self, table):
        assert table.lookup(int) < table.lookup(str)
        assert sorted([table.lookup(str), table.lookup(p_char)])[0].target is p_char


class TestConvert:
    def test_pass_through_when_already_valid(self, table):
        value = 42
        assert table.lookup(int).convert(value) is value

    def test_string_to_int(self, table):
        assert table.lookup(int).convert("12") == 12

    def test_exact_integer_extraction(self, table):
        conv = table.lookup(int)
        assert conv.convert(Decimal("5")) == 5
        assert conv.convert(Fraction(6, 3)) == 2
        assert conv.convert(4.0) == 4
        for inexact in (Decimal("2.5"), Fraction(1, 3), 0.5):
            with pytest.raises(ConversionError, match="exact integer"):
                conv.convert(inexact)

    def test_narrowing_round_trip(self, table):
        conv = table.lookup(p_byte)
        for v in (-128, -1, 0, 127):
            assert conv.convert(v) == v
            assert conv.convert(str(v)) == v

    def test_narrowing_overflow_raises(self, table):
        with pytest.raises(ConversionError, match="int8 overflow"):
            table.lookup(p_byte).convert("300")
        with pytest.raises(ConversionError, match="int16 overflow"):
            table.lookup(p_short).convert(40000)
        with pytest.raises(ConversionError, match="int32 overflow"):
            table.lookup(p_int).convert(Decimal(2**31))
        assert table.lookup(p_long).convert(2**63 - 1) == 2**63 - 1

    def test_char(self, table):
        conv = table.lookup(p_char)
        assert conv.convert("a") == "a"
        assert conv.convert(7) == "7"
        with pytest.raises(ConversionError, match="single character"):
            conv.convert("ab")

    def test_bytes_are_decoded_first(self, table):
        assert table.lookup(p_char).convert(b"x") == "x"
        assert table.lookup(int).convert(bytearray(b"15")) == 15

    def test_bool(self, table):
        conv = table.lookup(bool)
        assert conv.convert("TRUE") is True
        assert conv.convert("t") is True
        assert conv.convert("f") is False
        assert conv.convert("0") is False
        assert conv.convert("2") is True
        with pytest.raises(ValueError):
            conv.convert("maybe")

    def test_float_decimal_str_bytes(self, table):
        assert table.lookup(float).convert("1.5") == 1.5
        assert table.lookup(Decimal).convert(3) == Decimal(3)
        assert table.lookup(Decimal).convert(0.5) == Decimal("0.5")
        assert table.lookup(str).convert(12) == "12"
        assert table.lookup(bytes).convert("é") == "é".encode()

    def test_none_never_converts(self, table):
        for conv in table:
            assert not conv.test(None)
            with pytest.raises(ConversionError):
                conv.convert(None)

    def test_module_level_coercions(self):
        assert to_int(True) == 1
        assert to_bool(0) is False


class TestLookup:
    def test_subclass_uses_nearest_ancestor(self, table):
        class MyInt(int):
            pass

        assert table.lookup(MyInt) is table.lookup(int)
        assert MyInt not in table

    def test_bool_is_exact_not_int(self, table):
        assert table.lookup(bool).target is bool

    def test_virtual_subclass(self, table):
        class Shape(abc.ABC):
            pass

        class Blob:
            pass

        Shape.register(Blob)
        table.register(Shape, lambda v: v)
        assert table.lookup(Blob) is table.lookup(Shape)

    def test_placeholder_installed_once(self, table):
        size = len(table)
        conv = table.lookup(Celsius)
        assert conv.is_placeholder
        assert conv.rank == size
        assert table.lookup(Celsius) is conv
        assert len(table) == size + 1

    def test_placeholder_only_matches_instances(self, table):
        conv = table.lookup(Celsius)
        c = Celsius(1)
        assert conv.convert(c) is c
        with pytest.raises(ConversionError, match="is not a Celsius"):
            conv.convert("20")

    def test_lookup_all(self, table):
        convs = table.lookup_all((int, str))
        assert [c.target for c in convs] == [int, str]


class TestRegister:
    def test_register_new_type(self, table):
        assert table.register(Celsius, Celsius)
        assert table.lookup(Celsius).convert("21.5").degrees == 21.5

    def test_register_replaces_placeholder_keeping_rank(self, table):
        rank = table.lookup(Celsius).rank
        assert table.register(Celsius, Celsius)
        conv = table.lookup(Celsius)
        assert not conv.is_placeholder
        assert conv.rank == rank

    def test_usable_converter_not_overridden(self, table):
        assert not table.register(int, float)
        assert table.lookup(int).convert("3") == 3

    def test_subclass_placeholder_survives_parent_registration(self, table):
        class Warm(Celsius):
            pass

        assert table.lookup(Warm).is_placeholder
        table.register(Celsius, Celsius)
        assert table.lookup(Warm).is_placeholder

        class Hot(Celsius):
            pass

        assert table.lookup(Hot) is table.lookup(Celsius)

    def test_bad_key_or_coercion(self, table):
        with pytest.raises(ConfigurationError, match="class or ParamType"):
            table.register("int", int)
        with pytest.raises(ConfigurationError, match="not callable"):
            table.register(Celsius, 3)

    def test_repr(self, table):
        assert "int16" in repr(table)
        assert "placeholder" in repr(table.lookup(Celsius))
