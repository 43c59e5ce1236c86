"""Deterministic placeholder cards used when generation keeps failing."""

from __future__ import annotations

from app.modules.cards.models.cards import Card, GenerationRequest
from app.modules.cards.prompts import target_card_count

PLACEHOLDER_CONTENT = (
    'This is a placeholder card for "{topic}" created when the card generator '
    "was unavailable. Please try again later to get AI-generated content."
)


def generate_fallback_cards(request: GenerationRequest) -> list[Card]:
    count = target_card_count(request.course_length)
    return [
        Card(
            title=f"{request.topic} - Part {i}",
            content=PLACEHOLDER_CONTENT.format(topic=request.topic),
            fun_fact=None,
        )
        for i in range(1, count + 1)
    ]
