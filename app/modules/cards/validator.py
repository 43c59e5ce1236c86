"""Schema validation of parsed model output into ``Card`` objects."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.modules.cards.errors import SchemaValidationError
from app.modules.cards.models.cards import Card

_CARD_LIST = TypeAdapter(list[Card])


def validate_cards(value: Any) -> list[Card]:
    """Validate ``value`` as a non-empty list of card objects.

    ``funFact`` may be missing, null or a string; a missing one becomes ``None``.
    """
    if not isinstance(value, list):
        raise SchemaValidationError(
            f"Expected a JSON array of cards, got {type(value).__name__}"
        )
    if not value:
        raise SchemaValidationError("Model returned an empty card array")
    try:
        return _CARD_LIST.validate_python(value)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()[:5]
        )
        raise SchemaValidationError(f"Card schema mismatch: {problems}") from exc
