"""Shared fixtures: isolated registries and hosts."""

from __future__ import annotations

import pytest

from dynaprop.functions import install_default_functions
from dynaprop.host import Host
from dynaprop.registry import FunctionRegistry, reset_default_registry


@pytest.fixture(autouse=True)
def _fresh_default_registry():
    """Keep the process-wide registry from leaking between tests."""
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def bare_registry() -> FunctionRegistry:
    """Registry with default converters and no function providers."""
    return FunctionRegistry()


@pytest.fixture
def registry() -> FunctionRegistry:
    """Registry with the built-in function providers installed."""
    r = FunctionRegistry()
    install_default_functions(r)
    return r


@pytest.fixture
def host(registry) -> Host:
    return Host(registry)
