"""Exception hierarchy for dynaprop."""

from __future__ import annotations

from typing import Any


class DispatchError(Exception):
    """Base exception for all dynaprop errors."""


class ConversionError(DispatchError):
    """A value cannot be converted to a parameter type.

    Raised by converters and treated as a non-match for the candidate
    being tried; it never escapes member lookup.
    """


class ConfigurationError(DispatchError):
    """Malformed provider, converter, or configuration file."""


class AdaptorStateError(DispatchError):
    """Argument supplied to an adaptor that has already resolved."""


class NoSuchPropertyError(DispatchError):
    """A property chain could not be resolved on a target value."""

    def __init__(self, target: Any, property_path: str, reason: str = "") -> None:
        self.target = target
        self.property_path = property_path
        self.reason = reason
        message = (
            f"no such property or can't access: "
            f"{type(target).__name__}({target!r}).{property_path}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoMatchError(NoSuchPropertyError):
    """No member descriptor accepts the supplied arguments."""


class InvocationError(NoSuchPropertyError):
    """The chosen member, or a chained excess property, raised."""


# Failures of the interpreter itself are never wrapped.
FATAL_ERRORS: tuple[type[BaseException], ...] = (MemoryError, RecursionError, SystemError)
