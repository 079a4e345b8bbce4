"""Unit tests for Host, TypeDispatchMap and path rendering."""

from decimal import Decimal
from fractions import Fraction

import pytest

from dynaprop.adaptor import ArgsAdaptor, ArgsAdaptorHandler, NumberAdaptor, ObjectAdaptor, StringAdaptor
from dynaprop.diagnostics import register_formatter, render_arg, render_path
from dynaprop.dispatch import TypeDispatchMap
from dynaprop.host import Host


class Base:
    pass


class Child(Base):
    pass


class Grandchild(Child):
    pass


class TestTypeDispatchMap:
    def test_nearest_ancestor(self):
        m = TypeDispatchMap()
        m.register(object, "object")
        m.register(Base, "base")
        assert m.lookup(Grandchild) == "base"
        m.register(Child, "child")
        assert m.lookup(Grandchild) == "child"
        assert m.lookup(int) == "object"

    def test_missing_without_fallback(self):
        m = TypeDispatchMap()
        m.register(Base, "base")
        with pytest.raises(KeyError):
            m.lookup(int)

    def test_contains_is_exact(self):
        m = TypeDispatchMap()
        m.register(Base, "base")
        assert Base in m
        assert Child not in m
        assert list(m) == [Base]
        assert len(m) == 1


class TestRendering:
    def test_strings_quoted(self):
        assert render_arg("x") == '"x"'
        assert render_arg('say "hi"') == '"say \\"hi\\""'

    def test_other_values_show_type(self):
        assert render_arg(5) == '{int:"5"}'
        assert render_arg(None) == '{NoneType:"None"}'

    def test_path(self):
        assert render_path("substring", ["1", 2]) == 'substring."1".{int:"2"}'
        assert render_path("upper") == "upper"

    def test_custom_formatter(self):
        register_formatter(Base, lambda v: "<base>")
        assert render_arg(Child()) == "<base>"


class TestHost:
    def test_default_handlers(self, host):
        assert isinstance(host.lookup_handler(object), ObjectAdaptor)
        assert isinstance(host.lookup_handler(bool), NumberAdaptor)
        assert isinstance(host.lookup_handler(Decimal), NumberAdaptor)
        assert isinstance(host.lookup_handler(Fraction), NumberAdaptor)
        assert isinstance(host.lookup_handler(str), StringAdaptor)
        assert isinstance(host.lookup_handler(list), ObjectAdaptor)

    def test_continuation_handler_registered_on_demand(self, host):
        assert ArgsAdaptor not in host._handlers
        host.get_property("ABC", "substring")
        assert isinstance(host.lookup_handler(ArgsAdaptor), ArgsAdaptorHandler)

    def test_ensure_handler_keeps_existing(self, host):
        custom = ArgsAdaptorHandler()
        host.register_handler(ArgsAdaptor, custom)
        host.ensure_handler(ArgsAdaptor, ArgsAdaptorHandler)
        assert host.lookup_handler(ArgsAdaptor) is custom

    def test_custom_handler(self, host):
        class Upper:
            def get_property(self, host, target, prop, prop_name):
                return prop_name.upper()

        host.register_handler(Base, Upper())
        assert host.evaluate(Child(), "name") == "NAME"

    def test_evaluate_without_props(self, host):
        assert host.evaluate(5) == 5

    def test_default_registry(self):
        assert Host().evaluate(123, "add", "1") == 124
