"""Learning cards module exports."""

from .errors import (
    AttemptError,
    BackendError,
    BackendTimeoutError,
    CardGenerationError,
    ConfigurationError,
    JsonSyntaxError,
    SchemaValidationError,
    StructureNotFoundError,
)
from .generator import CardGenerator
from .invoker import ModelInvoker
from .models.cards import (
    AgeGroup,
    Card,
    CardSource,
    CourseLength,
    GenerationOutcome,
    GenerationRequest,
)

__all__ = [
    "AgeGroup",
    "AttemptError",
    "BackendError",
    "BackendTimeoutError",
    "Card",
    "CardGenerationError",
    "CardGenerator",
    "CardSource",
    "ConfigurationError",
    "CourseLength",
    "GenerationOutcome",
    "GenerationRequest",
    "JsonSyntaxError",
    "ModelInvoker",
    "SchemaValidationError",
    "StructureNotFoundError",
]
