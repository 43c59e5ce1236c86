from __future__ import annotations

import argparse
import asyncio
import json
from typing import Optional

from app.core.config import settings
from app.modules.cards.errors import ConfigurationError
from app.modules.cards.generator import CardGenerator
from app.modules.cards.models.cards import AgeGroup, CourseLength, GenerationRequest


def main(
    argv: list[str] | None = None, *, generator: Optional[CardGenerator] = None
) -> int:
    parser = argparse.ArgumentParser(
        prog="cards-gen", description="Learning cards generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate learning cards for a topic")
    g.add_argument("--topic", "-t", required=True, help="Topic to learn about")
    g.add_argument(
        "--age-group",
        "-a",
        default=AgeGroup.MIDDLE.value,
        choices=[a.value for a in AgeGroup],
    )
    g.add_argument(
        "--course-length",
        "-l",
        default=CourseLength.QUICK.value,
        choices=[c.value for c in CourseLength],
    )
    g.add_argument(
        "--with-source",
        action="store_true",
        help="Include how the cards were produced (model/repaired/salvaged/fallback)",
    )

    args = parser.parse_args(argv)
    if args.cmd == "generate":
        svc = generator or CardGenerator.from_settings(settings)
        try:
            request = GenerationRequest.build(
                args.topic, args.age_group, args.course_length
            )
        except ConfigurationError as e:
            parser.error(str(e))
        outcome = asyncio.run(svc.generate(request))
        payload: dict = {
            "cards": [c.model_dump(by_alias=True) for c in outcome.cards]
        }
        if args.with_source:
            payload["source"] = outcome.source.value
            payload["attempts"] = outcome.attempts
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
