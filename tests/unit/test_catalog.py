"""Unit tests for member catalog building."""

import dataclasses
import textwrap
import threading
from typing import ClassVar

import pytest

from dynaprop.converters import ConverterTable
from dynaprop.members import CatalogCache, build_catalog, member
from dynaprop.types import Short


@dataclasses.dataclass
class Point:
    x: int
    y: int = 0
    label: ClassVar[str] = "pt"

    @property
    def norm(self) -> int:
        return abs(self.x) + abs(self.y)

    def moved(self, dx: int, dy: int = 0) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def scale(self, factor: float) -> "Point":
        return Point(int(self.x * factor), int(self.y * factor))

    def reset(self) -> None:
        pass

    def needs_flag(self, *, flag: bool) -> int:
        return int(flag)

    def optional_flag(self, *, flag: bool = False) -> int:
        return int(flag)

    def _hidden(self) -> int:
        return 1

    def equals(self, other) -> bool:
        return self == other

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"

    @staticmethod
    def distance(p: "Point", q: "Point") -> int:
        return abs(p.x - q.x) + abs(p.y - q.y)

    @classmethod
    def of(cls, x: int) -> "Point":
        return cls(x)

    @staticmethod
    def origin() -> "Point":
        return Point(0)


class Slotted:
    __slots__ = ('value',)

    def __init__(self, value: str):
        self.value = value


class TextFunctions:
    @staticmethod
    def shout(value: str) -> str:
        return value.upper() + "!"

    @staticmethod
    @member("shout")
    def shout_times(value: str, times: Short) -> str:
        return (value.upper() + "!") * times

    @staticmethod
    def _secret(value: str) -> str:
        return value

    @staticmethod
    def log_it(value: str) -> None:
        pass

    @staticmethod
    def untyped(value: "NoSuchType") -> str:  # noqa: F821
        return value


@pytest.fixture
def table():
    return ConverterTable.with_defaults()


@pytest.fixture
def point(table):
    return build_catalog(Point, table)


class TestInstanceMembers:
    def test_exposed_names(self, point):
        names = set(point.instance)
        assert {'x', 'y', 'norm', 'moved', 'scale', 'optional_flag',
                '_hidden', 'equals', '__eq__'} <= names
        assert not {'reset', 'needs_flag', 'label', '__repr__', '__init__'} & names

    def test_defaults_give_one_descriptor_per_arity(self, point):
        assert point.instance['moved'].arities() == [1, 2]

    def test_fields(self, point):
        p = Point(3, -4)
        assert point.instance['norm'].find(True, object, []).invoke(p, []) == 7
        assert point.instance['x'].find(True, object, []).invoke(p, []) == 3

    def test_method_invocation(self, point):
        args = ["2"]
        inv = point.instance['moved'].find(True, object, args)
        assert args == [2]
        assert inv.return_type is Point
        assert inv.invoke(Point(1, 1), args) == Point(3, 1)

    def test_private_member(self, point):
        index = point.instance['_hidden']
        assert index.find(True, object, []) is None
        assert index.find(False, object, []).invoke(Point(0), []) == 1

    def test_equality_parameter_uses_declaring_class(self, point):
        for name in ('equals', '__eq__'):
            (inv,) = point.instance[name]
            assert inv.converters[0].target is Point
        args = ["1"]
        assert point.instance['equals'].find(True, object, args) is None

    def test_slots_become_fields(self, table):
        members = build_catalog(Slotted, table)
        assert members.instance['value'].find(True, object, []).invoke(Slotted("v"), []) == "v"


class TestStaticMembers:
    def test_static_and_classmethods(self, point):
        assert point.static['distance'].arities() == [2]
        args = ["5"]
        inv = point.static['of'].find(True, object, args)
        assert inv.invoke(None, args) == Point(5)

    def test_zero_parameter_statics_skipped(self, point):
        assert 'origin' not in point.static

    def test_constructor_named_after_class(self, point):
        index = point.static['Point']
        assert index.arities() == [1, 2]
        args = ["1", "2"]
        inv = index.find(True, object, args)
        assert inv.kind == "constructor"
        assert inv.return_type is Point
        assert inv.invoke(None, args) == Point(1, 2)

    def test_member_decorator_groups_overloads(self, table):
        members = build_catalog(TextFunctions, table)
        assert members.static['shout'].arities() == [1, 2]
        assert not members.static['_secret'].find(True, object, ["a"])
        assert 'log_it' not in members.static
        assert 'untyped' not in members.static
        assert 'shout_times' not in members.static

    def test_functions_for_injects_value(self, table):
        members = build_catalog(TextFunctions, table)
        functions = dict(members.functions_for(str))
        arities = sorted(inv.arity for inv in functions['shout'])
        assert arities == [0, 1]
        (one,) = [inv for inv in functions['shout'] if inv.arity == 1]
        assert one.invoke("hi", [2]) == "HI!HI!"


class TestModuleProvider:
    def test_public_functions(self, table):
        members = build_catalog(textwrap, table)
        assert members.static['indent'].arities() == [2, 3]
        assert 'dedent' in members.static
        assert 'TextWrapper' not in members.static
        assert not members.instance

    def test_rejects_other_objects(self, table):
        with pytest.raises(TypeError, match="class or module"):
            build_catalog(42, table)


class TestCatalogCache:
    def test_built_once(self, table):
        cache = CatalogCache(table)
        first = cache.of(Point)
        assert cache.of(Point) is first
        assert Point in cache
        assert len(cache) == 1
        cache.clear()
        assert cache.of(Point) is not first

    def test_concurrent_first_use(self, table):
        cache = CatalogCache(table)
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(cache.of(Point))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(r) for r in results}) == 1

    def test_repr(self, point):
        assert repr(point).startswith("ClassMembers(Point, instance=[")
