"""Fake backends and helpers shared by the test suite."""

from __future__ import annotations

import asyncio
import json
from typing import Union

from app.modules.cards.generator import CardGenerator
from app.modules.cards.invoker import ModelInvoker

Reply = Union[str, BaseException]


def cards_json(count: int, *, fun_fact: bool = True) -> str:
    cards = []
    for i in range(1, count + 1):
        card = {"title": f"Card {i}", "content": f"<p>Content {i}</p>"}
        if fun_fact:
            card["funFact"] = f"Fact {i}"
        cards.append(card)
    return json.dumps(cards)


class ScriptedBackend:
    """Returns (or raises) the scripted replies in order, repeating the last one."""

    def __init__(self, *replies: Reply) -> None:
        if not replies:
            raise ValueError("ScriptedBackend needs at least one reply")
        self.replies = list(replies)
        self.calls: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.calls.append(prompt)
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if isinstance(reply, BaseException):
            raise reply
        return reply


class SlowBackend:
    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return cards_json(1)


class SleepRecorder:
    """Stands in for ``asyncio.sleep`` so backoff delays are recorded, not waited."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_invoker(backend, *, max_retries: int = 2, timeout: float = 5.0, sleep=None):
    return ModelInvoker(
        backend,
        timeout=timeout,
        max_retries=max_retries,
        backoff_base=1.0,
        sleep=sleep or SleepRecorder(),
    )


def make_generator(backend, *, max_retries: int = 2) -> CardGenerator:
    return CardGenerator(make_invoker(backend, max_retries=max_retries))
