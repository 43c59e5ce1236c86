"""Learning-card generation pipeline.

``CardGenerator`` turns a (topic, age group, course length) triple into cards:
prompt → backend (with retries) → payload extraction → strict parse or repair
→ schema validation. When every attempt fails the request is answered with
placeholder cards, so callers only ever see ``ConfigurationError`` for input
they should have validated themselves.
"""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING, Optional

from app.core.logging import get_logger, request_logger
from app.modules.cards.errors import AttemptError
from app.modules.cards.fallback import generate_fallback_cards
from app.modules.cards.invoker import ModelInvoker
from app.modules.cards.models.cards import (
    AgeGroup,
    Card,
    CardSource,
    CourseLength,
    GenerationOutcome,
    GenerationRequest,
)
from app.modules.cards.prompts import build_prompt
from app.modules.cards.repair import JsonRepairer
from app.modules.cards.sanitizer import extract_payload
from app.modules.cards.validator import validate_cards

if TYPE_CHECKING:
    from app.core.config import Settings

logger = get_logger(__name__)


class CardGenerator:
    """Orchestrates prompt building, invocation, parsing and fallback."""

    def __init__(
        self,
        invoker: ModelInvoker,
        *,
        repairer: Optional[JsonRepairer] = None,
        trim_excess: bool = True,
    ) -> None:
        self.invoker = invoker
        self.repairer = repairer or JsonRepairer()
        self.trim_excess = trim_excess

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CardGenerator":
        from app.modules.cards.backend import PydanticAIBackend

        gen = settings.generation
        invoker = ModelInvoker(
            PydanticAIBackend(settings),
            timeout=gen.timeout_seconds,
            max_retries=gen.max_retries,
            backoff_base=gen.backoff_seconds,
            max_backoff=gen.max_backoff_seconds,
        )
        return cls(invoker)

    def parse_cards(self, raw: str) -> tuple[list[Card], CardSource]:
        """Turn one raw model reply into validated cards or raise an ``AttemptError``."""
        payload = extract_payload(raw)
        try:
            value = json.loads(payload)
            source = CardSource.MODEL
        except (ValueError, RecursionError) as exc:
            # ValueError also covers integers past the digit limit
            logger.debug(f"Strict parse failed ({exc}); attempting repair")
            result = self.repairer.repair(payload)
            value = result.value
            source = CardSource.SALVAGED if result.salvaged else CardSource.REPAIRED
        return validate_cards(value), source

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        request_id = uuid.uuid4().hex[:8]
        log = request_logger(logger, request_id)

        target, prompt = build_prompt(request)
        log.info(
            f"Generating {target} cards about {request.topic!r} "
            f"for age group {request.age_group.value}"
        )

        try:
            invocation = await self.invoker.run(prompt, self.parse_cards, log=log)
        except AttemptError as exc:
            log.error(
                f"All {self.invoker.max_attempts} attempts failed "
                f"(last: {exc.kind}); using fallback cards"
            )
            return GenerationOutcome(
                cards=generate_fallback_cards(request),
                source=CardSource.FALLBACK,
                attempts=self.invoker.max_attempts,
            )

        cards, source = invocation.value
        if len(cards) > target and self.trim_excess:
            log.info(f"Model returned {len(cards)} cards, trimming to {target}")
            cards = cards[:target]
        elif len(cards) < target:
            log.warning(f"Model returned {len(cards)} of {target} requested cards")

        log.info(
            f"Generated {len(cards)} cards via {source.value} "
            f"after {invocation.attempts} attempt(s)"
        )
        return GenerationOutcome(cards=cards, source=source, attempts=invocation.attempts)

    async def generate_cards(
        self,
        topic: str,
        age_group: str | AgeGroup,
        course_length: str | CourseLength,
    ) -> list[Card]:
        """Public entry point taking raw request values.

        Raises ``ConfigurationError`` before any backend call when the input
        is invalid; never raises for bad model output.
        """
        request = GenerationRequest.build(topic, age_group, course_length)
        outcome = await self.generate(request)
        return outcome.cards
