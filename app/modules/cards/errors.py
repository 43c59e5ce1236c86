"""Exception taxonomy for the card generation pipeline.

``ConfigurationError`` is the only error that reaches callers of
``CardGenerator``. Everything deriving from ``AttemptError`` marks a single
failed attempt: it is retried by the invoker and, once retries run out,
turned into placeholder cards by the generator.
"""

from __future__ import annotations

from typing import Optional

RAW_EXCERPT_CHARS = 200


def excerpt(text: Optional[str], limit: int = RAW_EXCERPT_CHARS) -> str:
    """Shorten a raw model response for log lines."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


class CardGenerationError(Exception):
    """Base class for everything raised by the cards module."""


class ConfigurationError(CardGenerationError, ValueError):
    """The request names an unknown age group / course length or an empty topic."""


class AttemptError(CardGenerationError):
    """A generation attempt failed; the attempt may be retried."""

    kind = "attempt"

    def __init__(self, message: str, *, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw


class BackendError(AttemptError):
    kind = "backend"


class BackendTimeoutError(BackendError):
    kind = "timeout"


class StructureNotFoundError(AttemptError):
    """No bracketed region in the model reply."""

    kind = "no_structure"


class JsonSyntaxError(AttemptError):
    """Payload could not be parsed even after repair and salvage."""

    kind = "json_syntax"


class SchemaValidationError(AttemptError):
    """Payload parsed but does not have the card shape."""

    kind = "schema"


__all__ = [
    "CardGenerationError",
    "ConfigurationError",
    "AttemptError",
    "BackendError",
    "BackendTimeoutError",
    "StructureNotFoundError",
    "JsonSyntaxError",
    "SchemaValidationError",
    "excerpt",
]
