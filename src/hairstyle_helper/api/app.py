"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from hairstyle_helper.app_logging import configure_logging
from hairstyle_helper.containers import AppContainer
from hairstyle_helper.domain.errors import AuthFailure, ValidationFailure
from hairstyle_helper.domain.suggestions import Favorite
from hairstyle_helper.services.tokens import extract_bearer_token

INTERNAL_ERROR = "Internal Server Error"
AUTH_FAILED = "Authentication failed"
SAVE_FAILED = "Error saving favorite"
LIST_FAILED = "Error loading favorites"


class PromptRequest(BaseModel):
    prompt: str = ""


class SpeechRequest(BaseModel):
    text: str = ""


class SaveFavoriteRequest(BaseModel):
    name: str | None = None
    description: str | None = None


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Serving generation routes with %s",
            type(app.state.container.generator).__name__,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/hairstyleSuggestions", response_model=None)
    async def hairstyle_suggestions(
        body: PromptRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Return hairstyle suggestions for a prompt."""
        state_container: AppContainer = request.app.state.container
        try:
            suggestions = await state_container.generator.suggest(body.prompt)
        except Exception as exc:
            state_container.error_reporter.capture(exc, context="hairstyle suggestions")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        return {"suggestions": [item.model_dump() for item in suggestions]}

    @app.post("/api/generateImage", response_model=None)
    async def generate_image(
        body: PromptRequest, request: Request
    ) -> dict[str, str] | JSONResponse:
        """Return a generated image reference."""
        state_container: AppContainer = request.app.state.container
        try:
            image_url = await state_container.generator.generate_image(body.prompt)
        except Exception as exc:
            state_container.error_reporter.capture(exc, context="image generation")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        return {"imageUrl": image_url}

    @app.post("/api/textToSpeech", response_model=None)
    async def text_to_speech(
        body: SpeechRequest, request: Request
    ) -> dict[str, str] | JSONResponse:
        """Return a narrated audio reference."""
        state_container: AppContainer = request.app.state.container
        try:
            audio_url = await state_container.generator.text_to_speech(body.text)
        except Exception as exc:
            state_container.error_reporter.capture(exc, context="text to speech")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        return {"audioUrl": audio_url}

    @app.api_route(
        "/api/saveFavorite",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        response_model=None,
    )
    async def save_favorite(request: Request) -> JSONResponse:
        """Persist a favorite for the authenticated user."""
        if request.method != "POST":
            return JSONResponse(
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                content={"error": f"Method {request.method} Not Allowed"},
                headers={"Allow": "POST"},
            )
        state_container: AppContainer = request.app.state.container
        try:
            user_id = _authenticate(request, state_container)
            body = SaveFavoriteRequest.model_validate(await _read_json(request))
            favorite = state_container.saved_favorites_service.save(
                user_id, body.name, body.description
            )
        except AuthFailure as exc:
            state_container.error_reporter.capture(exc, context="save favorite")
            return _error(status.HTTP_401_UNAUTHORIZED, AUTH_FAILED)
        except (ValidationFailure, ValidationError) as exc:
            logger.info("Rejected favorite payload: %s", exc)
            return _error(
                status.HTTP_400_BAD_REQUEST, "Name and description are required"
            )
        except Exception as exc:
            state_container.error_reporter.capture(exc, context="save favorite")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SAVE_FAILED)
        return JSONResponse(
            status_code=status.HTTP_201_CREATED, content=_favorite_payload(favorite)
        )

    @app.get("/api/favorites", response_model=None)
    async def list_favorites(request: Request) -> list[dict[str, object]] | JSONResponse:
        """Return the authenticated user's favorites."""
        state_container: AppContainer = request.app.state.container
        try:
            user_id = _authenticate(request, state_container)
            favorites = state_container.saved_favorites_service.list_favorites(user_id)
        except AuthFailure as exc:
            state_container.error_reporter.capture(exc, context="list favorites")
            return _error(status.HTTP_401_UNAUTHORIZED, AUTH_FAILED)
        except Exception as exc:
            state_container.error_reporter.capture(exc, context="list favorites")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, LIST_FAILED)
        return [_favorite_payload(favorite) for favorite in favorites]

    return app


def _authenticate(request: Request, container: AppContainer) -> str:
    """Resolve the bearer token on a request to a user id."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    return container.token_verifier.verify(token)


async def _read_json(request: Request) -> object:
    """Return the JSON body, treating an unreadable body as empty."""
    try:
        return await request.json()
    except ValueError:
        return {}


def _favorite_payload(favorite: Favorite) -> dict[str, object]:
    return {
        "id": favorite.id,
        "userId": favorite.user_id,
        "name": favorite.name,
        "description": favorite.description,
        "createdAt": favorite.created_at.isoformat() if favorite.created_at else None,
    }


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
