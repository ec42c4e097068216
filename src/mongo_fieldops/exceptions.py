"""Custom exceptions for mongo-fieldops."""

from __future__ import annotations


class FieldOpsError(Exception):
    """Base exception for mongo-fieldops."""

    pass


class ConfigurationError(FieldOpsError):
    """Raised when configuration is missing or invalid."""

    pass


class ArgumentError(FieldOpsError, ValueError):
    """Raised when a caller passes an unusable rename mapping or reference."""

    pass
