"""
Exception classes raised by datanorm.
"""

from __future__ import annotations

from typing import Any


class NormalizationError(ValueError):
    """Base class for every error raised while normalizing data."""

    def __init__(self, message: str, *, key: Any = None, value: Any = None) -> None:
        super().__init__(message)
        self.key = key
        self.value = value


class ParseError(NormalizationError):
    """Raised when a value cannot be converted to its target type."""

    pass


class UnrecognizedValueError(NormalizationError):
    """Raised when a candidate value matches no recognized token."""

    pass


class StructuralError(NormalizationError):
    """Raised when walking the input tree fails unexpectedly."""

    pass


class ConfigurationError(StructuralError):
    """Raised when a configuration mapping is malformed."""

    pass
