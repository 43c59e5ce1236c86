"""Prompt construction for learning-card generation."""

from __future__ import annotations

from typing import NamedTuple

from app.modules.cards.errors import ConfigurationError
from app.modules.cards.models.cards import AgeGroup, CourseLength, GenerationRequest

AGE_GROUP_PROMPTS: dict[AgeGroup, str] = {
    AgeGroup.YOUNG: (
        "The content should be very simple, using short sentences and basic "
        "vocabulary. Explain concepts in concrete terms with familiar examples. "
        "Include colorful descriptions and fun facts that are easy to grasp. "
        "Content should be enthusiastic and encourage curiosity."
    ),
    AgeGroup.MIDDLE: (
        "The content should use moderate vocabulary with occasional new words "
        "explained in context. Include more details and a broader range of facts. "
        "Make connections between concepts and real-world applications. "
        "Content should be engaging and educational."
    ),
    AgeGroup.OLDER: (
        "The content can use more advanced vocabulary and introduce more complex "
        "concepts. Include historical context, scientific principles, and deeper "
        "connections between ideas. Content should be intellectually stimulating "
        "while still being accessible."
    ),
}

COURSE_LENGTH_CARDS: dict[CourseLength, int] = {
    CourseLength.QUICK: 5,
    CourseLength.STANDARD: 10,
    CourseLength.DEEP: 15,
}


class CardPrompt(NamedTuple):
    target_count: int
    text: str


def target_card_count(course_length: CourseLength) -> int:
    try:
        return COURSE_LENGTH_CARDS[CourseLength(course_length)]
    except (KeyError, ValueError) as exc:
        raise ConfigurationError(f"Unknown course length: {course_length!r}") from exc


def age_directive(age_group: AgeGroup) -> str:
    try:
        return AGE_GROUP_PROMPTS[AgeGroup(age_group)]
    except (KeyError, ValueError) as exc:
        raise ConfigurationError(f"Unknown age group: {age_group!r}") from exc


def build_prompt(request: GenerationRequest) -> CardPrompt:
    """Return the target card count and the instruction sent to the model."""
    count = target_card_count(request.course_length)
    style = age_directive(request.age_group)
    age = request.age_group.value

    text = (
        f"Generate {count} learning cards about {request.topic} "
        f"for a {age} year old.\n\n"
        "IMPORTANT: Your response MUST be valid JSON that can be parsed directly.\n"
        "Do not include ANY text before or after the JSON.\n"
        "Do not include code blocks, markdown, or explanations.\n\n"
        "I need exactly this format (an array of objects):\n"
        "[\n"
        "  {\n"
        '    "title": "Card Title",\n'
        '    "content": "Card content paragraph(s)",\n'
        '    "funFact": "A fun fact about the topic"\n'
        "  },\n"
        "  ...more cards\n"
        "]\n\n"
        f"Return exactly {count} objects. Each object must have exactly these keys:\n"
        '1. "title": a concise, engaging title.\n'
        f'2. "content": 2-3 paragraphs tailored to the age group ({style})\n'
        '3. "funFact": an interesting fact related to the card\'s topic.\n\n'
        f"Return ONLY the JSON array of {count} objects with the keys "
        '"title", "content" and "funFact". No prose, no code fences, nothing else.'
    )
    return CardPrompt(target_count=count, text=text)
