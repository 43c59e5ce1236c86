from .cards import (
    AgeGroup,
    Card,
    CardSource,
    CourseLength,
    GenerationOutcome,
    GenerationRequest,
)

__all__ = [
    "AgeGroup",
    "Card",
    "CardSource",
    "CourseLength",
    "GenerationOutcome",
    "GenerationRequest",
]
