#!/usr/bin/env python3
"""Typed errors for the PR description action.

Every error carries a lightweight `.code` so the CLI can print a friendly
message without inspecting exception text.
"""

from __future__ import annotations

from typing import Optional


class ActionError(Exception):
    """Base class for all fatal errors raised by the action."""

    def __init__(self, message: str, code: str = "UNKNOWN", *, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause


class ConfigurationError(ActionError, ValueError):
    """Invalid action input (mode, numeric range, marker, missing key)."""

    def __init__(self, message: str, code: str = "CONFIG") -> None:
        super().__init__(message, code=code)


class FetchError(ActionError):
    """PR context, files or commits could not be fetched."""


class GenerationError(ActionError):
    """The text generator failed to return usable content."""


class TransientGenerationError(GenerationError):
    """Rate limits, timeouts and 5xx-shaped failures. Safe to retry."""

    def __init__(self, message: str, code: str = "TRANSIENT", *, cause: Optional[Exception] = None) -> None:
        super().__init__(message, code=code, cause=cause)


class PermanentGenerationError(GenerationError):
    """Anything not matching a transient signature, including empty responses."""

    def __init__(self, message: str, code: str = "PERMANENT", *, cause: Optional[Exception] = None) -> None:
        super().__init__(message, code=code, cause=cause)


class PersistError(ActionError):
    """Writing the final description back to the PR failed."""


# Lowercased message fragments that mark a generator failure as temporary.
TRANSIENT_SIGNATURES = (
    "rate limit",
    "quota",
    "429",
    "resource exhausted",
    "resource_exhausted",
    "503",
    "service unavailable",
    "unavailable",
    "timeout",
    "timed out",
    "deadline exceeded",
    "500",
    "internal server error",
    "internal error",
)


def is_transient_message(message: str) -> bool:
    low = (message or "").lower()
    return any(sig in low for sig in TRANSIENT_SIGNATURES)


def classify_generation_error(exc: Exception) -> GenerationError:
    """Map any exception raised by a generator SDK onto the generation taxonomy.

    Already-typed generation errors are returned unchanged.
    """
    if isinstance(exc, GenerationError):
        return exc
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, TimeoutError) or is_transient_message(message):
        return TransientGenerationError(message, cause=exc)
    return PermanentGenerationError(message, cause=exc)


__all__ = [
    "ActionError",
    "ConfigurationError",
    "FetchError",
    "GenerationError",
    "TransientGenerationError",
    "PermanentGenerationError",
    "PersistError",
    "TRANSIENT_SIGNATURES",
    "is_transient_message",
    "classify_generation_error",
]
