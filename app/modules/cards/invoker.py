"""Backend invocation with a per-attempt timeout and bounded retries.

``ModelInvoker.run`` treats every ``AttemptError`` the same way, whether it
came from the backend call itself or from the handler that parses the reply,
so a reply that cannot be turned into cards costs one attempt just like a
network failure does.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.core.logging import get_logger
from app.modules.cards.backend import TextGenerationBackend
from app.modules.cards.errors import (
    AttemptError,
    BackendError,
    BackendTimeoutError,
    excerpt,
)

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_RETRIES = 2


@dataclass(frozen=True)
class Invocation(Generic[T]):
    value: T
    attempts: int


class ModelInvoker:
    """Calls a ``TextGenerationBackend`` with timeout, retry and exponential backoff."""

    def __init__(
        self,
        backend: TextGenerationBackend,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = 1.0,
        max_backoff: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.backend = backend
        self.timeout = float(timeout)
        self.max_retries = max(0, int(max_retries))
        self.backoff_base = max(0.0, float(backoff_base))
        self.max_backoff = max(0.0, float(max_backoff))
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    async def invoke(self, prompt: str) -> str:
        """Single backend call bounded by ``timeout``."""
        try:
            raw = await asyncio.wait_for(self.backend.complete(prompt), self.timeout)
        except asyncio.TimeoutError as exc:
            raise BackendTimeoutError(
                f"Backend request timed out after {self.timeout:g} seconds"
            ) from exc
        except AttemptError:
            raise
        except Exception as exc:
            raise BackendError(f"Backend request failed: {exc}") from exc

        if not isinstance(raw, str):
            raise BackendError(
                f"Backend returned {type(raw).__name__} instead of text"
            )
        logger.debug(f"Received response of {len(raw)} characters")
        return raw

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_base, min=0, max=self.max_backoff),
            retry=retry_if_exception_type(AttemptError),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.info(
            f"Waiting {delay:.2f}s before attempt "
            f"{retry_state.attempt_number + 1}/{self.max_attempts}"
        )

    async def run(
        self,
        prompt: str,
        handle: Callable[[str], T],
        *,
        log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> Invocation[T]:
        """Invoke the backend and pass the reply to ``handle`` until one succeeds.

        Raises the last ``AttemptError`` once ``max_retries`` extra attempts
        have failed. ``asyncio.CancelledError`` is never retried.
        """
        log = log or logger
        value: T
        attempts = 0
        async for attempt in self._retrying():
            with attempt:
                attempts = attempt.retry_state.attempt_number
                raw: Optional[str] = None
                try:
                    raw = await self.invoke(prompt)
                    value = handle(raw)
                except AttemptError as exc:
                    log.warning(
                        f"Attempt {attempts}/{self.max_attempts} failed "
                        f"[{exc.kind}]: {exc} | raw={excerpt(exc.raw or raw)!r}"
                    )
                    raise
        return Invocation(value=value, attempts=attempts)
