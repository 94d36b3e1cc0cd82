"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

GENERATOR_BACKENDS = frozenset({"placeholder", "openai"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str | None = None
    api_base_url: str = "http://localhost:8000"
    request_timeout_seconds: float = 30
    generator_backend: str = "placeholder"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_image_model: str = "gpt-image-1"
    openai_tts_model: str = "gpt-4o-mini-tts"
    openai_tts_voice: str = "alloy"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_generator_backend(raw: str | None) -> str:
    """Normalize the configured generator backend name."""
    if raw is None:
        return "placeholder"
    cleaned = raw.strip().lower()
    if cleaned in GENERATOR_BACKENDS:
        return cleaned
    return "placeholder"
