"""Unit tests for logging integration."""

import logging

import pytest

from dynaprop.exc import InvocationError, NoMatchError
from dynaprop.members import build_catalog
from dynaprop.converters import ConverterTable


class Base:
    pass


class Leaf(Base):
    @staticmethod
    def merge(a: Base, b: object) -> Base:
        return a

    def name(self) -> str:
        return "leaf"


class Empty:
    pass


class TestCatalogLogging:
    def test_build_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="dynaprop"):
            build_catalog(Leaf, ConverterTable.with_defaults())
        assert any(
            r.name == "dynaprop.catalog" and "Built catalog for Leaf" in r.message
            for r in caplog.records
        )

    def test_ambiguous_own_static_skipped_with_warning(self, caplog, registry):
        with caplog.at_level(logging.WARNING, logger="dynaprop"):
            functions = registry.get(Leaf)
        assert "merge" not in functions
        assert "name" in functions
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("Skipping" in r.message and "merge" in r.message for r in warnings)


class TestRegistryLogging:
    def test_provider_registration_logged(self, caplog, bare_registry):
        class Shout:
            @staticmethod
            def shout(value: str) -> str:
                return value.upper() + "!"

        with caplog.at_level(logging.DEBUG, logger="dynaprop"):
            bare_registry.register_function_classes(str, Shout)
        assert any(
            r.name == "dynaprop.registry" and "Registered provider" in r.message
            and "shout" in r.message
            for r in caplog.records
        )

    def test_provider_without_functions_warns(self, caplog, bare_registry):
        with caplog.at_level(logging.WARNING, logger="dynaprop"):
            bare_registry.register_function_classes(str, Empty)
        assert any("exposes no functions" in r.message for r in caplog.records)

    def test_merge_logged(self, caplog, registry):
        with caplog.at_level(logging.DEBUG, logger="dynaprop"):
            registry.get(Empty)
        assert any("Merged" in r.message and "Empty" in r.message for r in caplog.records)


class TestAdaptorLogging:
    def test_unknown_member_logged(self, caplog, host):
        with caplog.at_level(logging.DEBUG, logger="dynaprop"):
            with pytest.raises(NoMatchError):
                host.evaluate(42, "nope")
        assert any(
            r.name == "dynaprop.adaptor" and "No member 'nope'" in r.message
            for r in caplog.records
        )

    def test_invocation_failure_logged(self, caplog, host):
        with caplog.at_level(logging.DEBUG, logger="dynaprop"):
            with pytest.raises(InvocationError):
                host.evaluate(1, "div", "0")
        assert any("Invocation of" in r.message and "failed" in r.message
                   for r in caplog.records)

    def test_silent_at_default_level(self, caplog, host):
        with caplog.at_level(logging.WARNING, logger="dynaprop"):
            assert host.evaluate(123, "add", "1") == 124
        assert not caplog.records
