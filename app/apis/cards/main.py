from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.core.config import settings
from app.modules.cards.generator import CardGenerator
from .schemas import GenerateCardsRequest, GenerateCardsResponse


router = APIRouter()


def get_card_generator(request: Request) -> CardGenerator:
    """Return the app-wide generator, building it from settings on first use."""
    generator = getattr(request.app.state, "card_generator", None)
    if generator is None:
        generator = CardGenerator.from_settings(settings)
        request.app.state.card_generator = generator
    return generator


Generator = Annotated[CardGenerator, Depends(get_card_generator)]


@router.post(
    f"/{settings.app.version}/cards/generate",
    response_model=GenerateCardsResponse,
    status_code=status.HTTP_200_OK,
    tags=["cards"],
)
async def generate_cards(
    req: GenerateCardsRequest, generator: Generator
) -> GenerateCardsResponse:
    cards = await generator.generate_cards(req.topic, req.age_group, req.course_length)
    return GenerateCardsResponse(cards=cards)
