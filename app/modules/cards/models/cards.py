"""Pydantic models for learning cards and generation requests.

Cards are serialised with the ``funFact`` key the web client expects; Python
code uses ``fun_fact``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.modules.cards.errors import ConfigurationError


class AgeGroup(str, Enum):
    YOUNG = "5-7"
    MIDDLE = "8-10"
    OLDER = "11-12"


class CourseLength(str, Enum):
    QUICK = "quick"
    STANDARD = "standard"
    DEEP = "deep"


class CardSource(str, Enum):
    """Which path of the pipeline produced the cards."""

    MODEL = "model"
    REPAIRED = "repaired"
    SALVAGED = "salvaged"
    FALLBACK = "fallback"


class Card(BaseModel):
    """A single learning card."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    content: str
    fun_fact: Optional[str] = Field(default=None, alias="funFact")


class GenerationRequest(BaseModel):
    """Validated (topic, age group, course length) triple."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    topic: str = Field(min_length=1)
    age_group: AgeGroup
    course_length: CourseLength

    @classmethod
    def build(
        cls, topic: str, age_group: str | AgeGroup, course_length: str | CourseLength
    ) -> "GenerationRequest":
        """Build from raw boundary values, raising ``ConfigurationError`` on bad input."""
        try:
            return cls(topic=topic, age_group=age_group, course_length=course_length)
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(p) for p in err["loc"]) for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid generation request ({fields})") from exc


class GenerationOutcome(BaseModel):
    """Cards produced for one request and how they were obtained."""

    cards: list[Card] = Field(default_factory=list)
    source: CardSource
    attempts: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.source is CardSource.FALLBACK
