"""Exception types raised by the generation flows."""
from __future__ import annotations


class KarigarError(Exception):
    """Base error for all flow failures."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputValidationError(KarigarError):
    """Rejected input, raised before any provider call is made."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class ProviderError(KarigarError):
    """The model provider failed or rejected the request.

    ``str(exc)`` is the provider's message, unchanged.
    """

    status_code = 502


class MissingOutputError(KarigarError):
    """A finished response did not contain the expected media."""

    status_code = 502


class GenerationTimeout(KarigarError):
    status_code = 504


class GenerationCancelled(KarigarError):
    status_code = 499
