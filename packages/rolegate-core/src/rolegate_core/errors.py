"""Exception taxonomy for rolegate."""

from __future__ import annotations


class RolegateError(Exception):
    """Base class for every error raised by rolegate."""


class RoleValidationError(RolegateError, TypeError):
    """Raised when a role, operation or role definition has the wrong shape."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class UnknownRoleError(RolegateError, LookupError):
    """Raised when a permission check names a role that is not defined.

    An unknown role is a caller bug, not a denial.
    """

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Undefined role: {role!r}")


class ConfigError(RolegateError, ValueError):
    """Raised when a config or roles file cannot be loaded."""
