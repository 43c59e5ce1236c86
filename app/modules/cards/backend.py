"""Text-generation backends for card generation.

The pipeline only needs ``complete(prompt) -> str``. The default
implementation runs a pydantic-ai ``Agent`` with plain-text output so that the
raw reply reaches the sanitizer and repair stages untouched. Provider imports
are kept lazy to avoid import-time errors when credentials are missing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from app.core.config import Settings


class TextGenerationBackend(Protocol):
    async def complete(self, prompt: str) -> str: ...


def _build_ollama_model(settings: "Settings"):
    """Build an Ollama model through its OpenAI-compatible endpoint (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.ollama import OllamaProvider

    gen = settings.generation
    base_url = gen.ollama_host.rstrip("/") + "/v1"
    return OpenAIChatModel(gen.ollama_model, provider=OllamaProvider(base_url=base_url))


def _build_google_model(settings: "Settings"):
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(settings.generation.gemini_model, provider=provider)


def _build_openrouter_model(settings: "Settings"):
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.generation.openrouter_model, provider=provider)


def build_model_by_settings(settings: "Settings"):
    """Return a pydantic-ai Model based on configured provider selection."""
    provider = (settings.generation.provider or "ollama").lower()
    if provider == "google":
        return _build_google_model(settings)
    if provider == "openrouter":
        return _build_openrouter_model(settings)
    return _build_ollama_model(settings)


class PydanticAIBackend:
    """Runs a single-message chat completion through a pydantic-ai agent.

    The agent is built on first use and reused across requests; it holds no
    per-request state.
    """

    def __init__(self, settings: "Settings", *, model: Optional[Any] = None) -> None:
        self.settings = settings
        self._model = model
        self._agent = None

    def _get_agent(self):
        if self._agent is None:
            from pydantic_ai import Agent

            model = self._model or build_model_by_settings(self.settings)
            self._agent = Agent(model=model, output_type=str)
        return self._agent

    async def complete(self, prompt: str) -> str:
        res = await self._get_agent().run(prompt)
        return res.output
