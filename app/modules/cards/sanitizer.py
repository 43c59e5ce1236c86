"""Locate the JSON payload inside a raw model reply.

The extraction is a bracket heuristic, not a parser: it slices from the first
``[`` to the last ``]`` (or the first ``{`` to the last ``}``) and assumes the
model emitted a single structural region. Stray brackets in surrounding prose
can widen the slice; the repair stage deals with what that produces.
"""

from __future__ import annotations

import re

from app.core.logging import get_logger
from app.modules.cards.errors import StructureNotFoundError, excerpt

logger = get_logger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def strip_control_characters(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def _slice_between(text: str, opener: str, closer: str) -> str | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1]
    return None


def extract_payload(raw: str) -> str:
    """Return the array- (preferred) or object-shaped region of ``raw``."""
    cleaned = strip_control_characters(raw or "")

    payload = _slice_between(cleaned, "[", "]")
    if payload is not None:
        logger.debug(f"Found array markers, payload length {len(payload)}")
        return payload

    payload = _slice_between(cleaned, "{", "}")
    if payload is not None:
        logger.debug(f"Found object markers, payload length {len(payload)}")
        return payload

    raise StructureNotFoundError(
        f"No JSON structure found in model response: {excerpt(cleaned, 80)!r}",
        raw=raw,
    )
