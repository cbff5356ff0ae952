"""Exception hierarchy for accessgate.

All errors raised by the engine inherit from AccessGateError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry so callers can map codes to their own transport

Usage:
    from accessgate.exceptions import (
        AccessGateError,
        PermissionDeniedError,
        SubjectNotFoundError,
    )

Note that a denied ``authorize()`` call is a value, not an exception.
``PermissionDeniedError`` is only raised by ``AuthorizationGate.require()``.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "AccessGateError",
    "ConfigurationError",
    "InvalidPermissionError",
    "SubjectNotFoundError",
    "PermissionDeniedError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class AccessGateError(Exception):
    """Base exception for the authorization engine.

    Attributes:
        code: Stable error code string (e.g. "SUBJECT_NOT_FOUND").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessGateError):
    """Invalid or missing configuration (including hierarchy files)."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid configuration"


class InvalidPermissionError(AccessGateError):
    """A permission token or condition tree violates its construction contract."""

    code: str = "INVALID_PERMISSION"
    message: str = "Invalid permission"


class SubjectNotFoundError(AccessGateError):
    """The permission source could not resolve a subject id."""

    code: str = "SUBJECT_NOT_FOUND"
    message: str = "Subject not found"

    def __init__(self, subject_id: str, message: str | None = None, **kwargs: Any) -> None:
        self.subject_id = subject_id
        super().__init__(message or f"Subject not found: {subject_id}", subject_id=subject_id, **kwargs)


class PermissionDeniedError(AccessGateError):
    """Denial signal raised by ``AuthorizationGate.require``.

    Carries the subject id only. Which sub-condition failed is never exposed.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "Insufficient permissions"

    def __init__(self, subject_id: str, message: str | None = None, **kwargs: Any) -> None:
        self.subject_id = subject_id
        super().__init__(message, subject_id=subject_id, **kwargs)


# ---- Error Registry ----------------------------------------------------------

_E = TypeVar("_E", bound=type[AccessGateError])


class ErrorRegistry:
    """Registry for mapping error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[AccessGateError]] = {}

    def register(self, code: str, error_cls: type[AccessGateError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[AccessGateError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[AccessGateError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("TENANT_MISMATCH")
        class TenantMismatchError(AccessGateError):
            code = "TENANT_MISMATCH"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


error_registry.register("INTERNAL_ERROR", AccessGateError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("INVALID_PERMISSION", InvalidPermissionError)
error_registry.register("SUBJECT_NOT_FOUND", SubjectNotFoundError)
error_registry.register("PERMISSION_DENIED", PermissionDeniedError)
