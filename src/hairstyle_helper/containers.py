"""Dependency container wiring for the backend and the client core."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from hairstyle_helper.adapters.favorites_client import HttpxFavoritesClient
from hairstyle_helper.adapters.generation_client import HttpxGenerationClient
from hairstyle_helper.adapters.openai_generator import OpenAIGenerator
from hairstyle_helper.adapters.supabase_auth_provider import SupabaseAuthProvider
from hairstyle_helper.adapters.supabase_favorite_repository import (
    SupabaseFavoriteRepository,
)
from hairstyle_helper.adapters.supabase_token_verifier import SupabaseTokenVerifier
from hairstyle_helper.config import Settings, parse_generator_backend
from hairstyle_helper.services.favorites import FavoritesService
from hairstyle_helper.services.generators import GeneratorBackend, PlaceholderGenerator
from hairstyle_helper.services.orchestrator import GenerationOrchestrator
from hairstyle_helper.services.preferences import PreferenceStore
from hairstyle_helper.services.saved_favorites import SavedFavoritesService
from hairstyle_helper.services.session_gate import SessionGate
from hairstyle_helper.services.telemetry import ErrorReporter, LoggingErrorReporter
from hairstyle_helper.services.tokens import TokenVerifier

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds backend dependencies."""

    settings: Settings
    generator: GeneratorBackend
    saved_favorites_service: SavedFavoritesService
    token_verifier: TokenVerifier
    error_reporter: ErrorReporter
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class ClientContainer:
    """Holds the client-side orchestration core."""

    settings: Settings
    preferences: PreferenceStore
    orchestrator: GenerationOrchestrator
    favorites: FavoritesService
    session_gate: SessionGate
    close_resources: Callable[[], Awaitable[None]]


def build_generator(settings: Settings) -> GeneratorBackend:
    """Select the generator backend named in the settings."""
    backend = parse_generator_backend(settings.generator_backend)
    if backend == "openai":
        if not settings.openai_api_key:
            logger.warning("OpenAI backend selected without an API key")
        else:
            return OpenAIGenerator.create(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                image_model=settings.openai_image_model,
                tts_model=settings.openai_tts_model,
                tts_voice=settings.openai_tts_voice,
            )
    return PlaceholderGenerator()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default backend dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key or resolved_settings.supabase_anon_key,
    )
    generator = build_generator(resolved_settings)

    async def close_resources() -> None:
        if isinstance(generator, OpenAIGenerator):
            await generator.client.close()

    return AppContainer(
        settings=resolved_settings,
        generator=generator,
        saved_favorites_service=SavedFavoritesService(
            SupabaseFavoriteRepository(supabase_client)
        ),
        token_verifier=SupabaseTokenVerifier(supabase_client),
        error_reporter=LoggingErrorReporter(),
        close_resources=close_resources,
    )


def build_client_container(settings: Settings | None = None) -> ClientContainer:
    """Create the client-side core wired to the HTTP API and Supabase Auth."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    reporter = LoggingErrorReporter()
    generation_client = HttpxGenerationClient.create(
        resolved_settings.api_base_url,
        timeout=resolved_settings.request_timeout_seconds,
    )
    favorites_client = HttpxFavoritesClient.create(
        resolved_settings.api_base_url,
        timeout=resolved_settings.request_timeout_seconds,
    )
    favorites = FavoritesService(api=favorites_client, reporter=reporter)
    session_gate = SessionGate(
        provider=SupabaseAuthProvider(supabase_client),
        favorites=favorites,
        reporter=reporter,
    )

    async def close_resources() -> None:
        await generation_client.close()
        await favorites_client.close()

    return ClientContainer(
        settings=resolved_settings,
        preferences=PreferenceStore(),
        orchestrator=GenerationOrchestrator(client=generation_client, reporter=reporter),
        favorites=favorites,
        session_gate=session_gate,
        close_resources=close_resources,
    )
