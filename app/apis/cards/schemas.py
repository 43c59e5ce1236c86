from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.modules.cards.models.cards import AgeGroup, Card, CourseLength


class GenerateCardsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(..., min_length=1, description="Topic to learn about")
    age_group: AgeGroup = Field(..., alias="ageGroup")
    course_length: CourseLength = Field(..., alias="courseLength")


class GenerateCardsResponse(BaseModel):
    cards: list[Card] = Field(default_factory=list)
