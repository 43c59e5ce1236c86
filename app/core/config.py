from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="kids-cards", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class GenerationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # Model provider selection: "ollama", "google" or "openrouter"
    provider: str = Field(default="ollama", alias="MODEL_PROVIDER")
    ollama_host: str = Field(default="http://localhost:11434", alias="OLLAMA_HOST")
    ollama_model: str = Field(default="tinyllama", alias="OLLAMA_MODEL")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")
    openrouter_model: str = Field(
        default="meta-llama/llama-3.1-8b-instruct", alias="OPENROUTER_MODEL"
    )

    timeout_seconds: float = Field(default=60.0, alias="GENERATION_TIMEOUT_SECONDS")
    max_retries: int = Field(default=2, alias="GENERATION_MAX_RETRIES")
    backoff_seconds: float = Field(default=1.0, alias="GENERATION_BACKOFF_SECONDS")
    max_backoff_seconds: float = Field(
        default=30.0, alias="GENERATION_MAX_BACKOFF_SECONDS"
    )

    @computed_field
    def active_model(self) -> str:
        provider = (self.provider or "ollama").lower()
        if provider == "google":
            return self.gemini_model
        if provider == "openrouter":
            return self.openrouter_model
        return self.ollama_model


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    generation: GenerationSettings = Field(
        default_factory=lambda: GenerationSettings()
    )

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")


settings = Settings()
