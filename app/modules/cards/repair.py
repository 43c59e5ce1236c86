"""Best-effort repair of near-JSON produced by language models.

Repairs are textual and cumulative: each stage rewrites the output of the
previous one and a strict ``json.loads`` is attempted after every stage. The
rewrites only touch text outside double-quoted strings, so commas and colons
inside card content are left alone.

When no stage yields valid JSON, object-level salvage parses every balanced
top-level ``{...}`` region on its own and keeps the ones that survive.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from app.core.logging import get_logger
from app.modules.cards.errors import JsonSyntaxError, excerpt

logger = get_logger(__name__)

SALVAGE_STAGE = "salvage"

_UNQUOTED_KEY = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")
_SINGLE_QUOTED_KEY = re.compile(r"([{,]\s*)'([^'\n]+?)'\s*:")
_SINGLE_QUOTED_VALUE = re.compile(r"(:\s*)'((?:[^'\\]|\\.)*)'")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_ADJACENT_OBJECTS = re.compile(r"}(\s*){")
_BARE_VALUE = re.compile(
    r"(:\s*)(?!(?:true|false|null)\s*(?:[,}\]]|$))([A-Za-z_][^,{}\[\]\n]*?)(?=\s*(?:[,}\]]|$))"
)


@dataclass(frozen=True)
class RepairResult:
    value: Any
    stage: str
    discarded: int = 0

    @property
    def salvaged(self) -> bool:
        return self.stage == SALVAGE_STAGE


def _segments(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_string, chunk)`` pieces, splitting on double-quoted strings."""
    buf_start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] != '"':
            i += 1
            continue
        if i > buf_start:
            yield False, text[buf_start:i]
        j = i + 1
        while j < n:
            if text[j] == "\\":
                j += 2
                continue
            if text[j] == '"':
                break
            j += 1
        end = min(j + 1, n)
        yield True, text[i:end]
        i = buf_start = end
    if buf_start < n:
        yield False, text[buf_start:]


def _outside_strings(text: str, rewrite: Callable[[str], str]) -> str:
    return "".join(
        chunk if is_string else rewrite(chunk) for is_string, chunk in _segments(text)
    )


def _json_string(value: str) -> str:
    return json.dumps(value.replace("\\'", "'"), ensure_ascii=False)


def quote_keys(text: str) -> str:
    def rewrite(chunk: str) -> str:
        chunk = _SINGLE_QUOTED_KEY.sub(r'\1"\2":', chunk)
        return _UNQUOTED_KEY.sub(r'\1"\2":', chunk)

    return _outside_strings(text, rewrite)


def single_quotes(text: str) -> str:
    def rewrite(chunk: str) -> str:
        return _SINGLE_QUOTED_VALUE.sub(
            lambda m: m.group(1) + _json_string(m.group(2)), chunk
        )

    return _outside_strings(text, rewrite)


def trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _TRAILING_COMMA.sub(r"\1", chunk))


def missing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _ADJACENT_OBJECTS.sub(r"},\1{", chunk))


def bare_values(text: str) -> str:
    def rewrite(chunk: str) -> str:
        return _BARE_VALUE.sub(
            lambda m: m.group(1) + _json_string(m.group(2).strip()), chunk
        )

    return _outside_strings(text, rewrite)


def _top_level_objects(text: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` spans of balanced top-level ``{...}`` regions."""
    depth = 0
    start = -1
    in_string = False
    escape = False
    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if in_string:
            if ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield start, i + 1


def close_truncated(text: str) -> str:
    """Cut a truncated payload back to its last complete object and close the array."""
    stripped = text.strip()
    if not stripped or stripped[0] not in "[{":
        return text
    last_end = -1
    for _, end in _top_level_objects(stripped):
        last_end = end
    if last_end == -1:
        return text
    body = stripped[:last_end]
    if body.startswith("["):
        return body + "]"
    return "[" + body + "]"


REPAIR_STAGES: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("quote_keys", quote_keys),
    ("single_quotes", single_quotes),
    ("trailing_commas", trailing_commas),
    ("missing_commas", missing_commas),
    ("bare_values", bare_values),
    ("close_truncated", close_truncated),
)


def _try_parse(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


class JsonRepairer:
    """Staged textual repair with object-level salvage as the last resort."""

    def __init__(
        self, stages: Optional[tuple[tuple[str, Callable[[str], str]], ...]] = None
    ) -> None:
        self.stages = stages if stages is not None else REPAIR_STAGES

    def _run_stages(
        self, text: str, *, skip: tuple[str, ...] = ()
    ) -> Optional[tuple[Any, str]]:
        current = text
        for name, stage in self.stages:
            if name in skip:
                continue
            repaired = stage(current)
            if repaired == current:
                continue
            current = repaired
            ok, value = _try_parse(current)
            if ok:
                return value, name
            logger.debug(f"Repair stage {name} did not produce valid JSON")
        return None

    def repair(self, payload: str) -> RepairResult:
        """Repair ``payload`` or raise ``JsonSyntaxError`` when nothing is salvageable."""
        ok, value = _try_parse(payload)
        if ok:
            return RepairResult(value=value, stage="none")

        staged = self._run_stages(payload)
        if staged is not None:
            value, stage = staged
            logger.info(f"JSON repaired at stage {stage}")
            return RepairResult(value=value, stage=stage)

        return self.salvage(payload)

    def salvage(self, payload: str) -> RepairResult:
        """Parse each top-level object independently and keep the valid ones."""
        survivors: list[dict] = []
        discarded = 0
        for start, end in _top_level_objects(payload):
            chunk = payload[start:end]
            ok, value = _try_parse(chunk)
            if not ok:
                staged = self._run_stages(chunk, skip=("close_truncated",))
                value = staged[0] if staged is not None else None
            if isinstance(value, dict):
                survivors.append(value)
            else:
                discarded += 1
                logger.debug(f"Discarding unrepairable object: {excerpt(chunk, 80)!r}")

        if not survivors:
            raise JsonSyntaxError(
                "Unrepairable JSON payload: no stage or object salvage succeeded",
                raw=payload,
            )

        logger.warning(
            f"Salvaged {len(survivors)} object(s) from malformed payload, "
            f"discarded {discarded}"
        )
        return RepairResult(value=survivors, stage=SALVAGE_STAGE, discarded=discarded)
