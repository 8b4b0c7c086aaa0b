"""
Exception hierarchy for StatusList2021 operations.

Every error derives from StatusListError. Each kind also derives from the
closest built-in exception, so callers can catch either.
"""

from __future__ import annotations

from typing import Any


class StatusListError(Exception):
    """Base class for all StatusList2021 errors."""


class InvalidArgumentError(StatusListError, TypeError):
    """Raised when a required argument is missing or has the wrong type."""


class StructuralError(StatusListError, ValueError):
    """Raised when a document violates the status list shape or context."""


class ResolutionError(StatusListError):
    """Raised when a referenced status list credential cannot be loaded."""


class ProofError(StatusListError):
    """Raised when a status list credential's proof does not verify.

    Attributes:
        errors: Per-suite error details, as reported by the suites.
    """

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class DecodeError(StatusListError, ValueError):
    """Raised when an encoded status list cannot be decoded.

    Attributes:
        reason: The underlying base64 or decompression failure.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Could not decode encoded status list; reason: {reason}")
        self.reason = reason


class NotFoundError(StatusListError, LookupError):
    """Raised when a requested credential status entry is absent."""


class IndexOutOfRangeError(StatusListError, IndexError):
    """Raised when a bit index falls outside a status list."""
