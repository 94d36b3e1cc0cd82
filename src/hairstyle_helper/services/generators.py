"""Generator backends serving the suggestion, image and audio routes."""

import base64
from dataclasses import dataclass
from typing import Protocol

from hairstyle_helper.domain.suggestions import Suggestion

SUGGESTIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["name", "description"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["suggestions"],
    "additionalProperties": False,
}


class GeneratorBackend(Protocol):
    """Interface for the opaque generation services."""

    async def suggest(self, prompt: str) -> list[Suggestion]:
        """Return hairstyle suggestions for a prompt."""

    async def generate_image(self, prompt: str) -> str:
        """Return a reference to an image generated from a prompt."""

    async def text_to_speech(self, text: str) -> str:
        """Return a reference to narrated audio for a text."""


@dataclass
class PlaceholderGenerator(GeneratorBackend):
    """Backend returning fixed values, used when no model provider is set."""

    image_url: str = "https://example.com/generated-image.png"
    audio_url: str = "https://example.com/generated-audio.mp3"

    async def suggest(self, prompt: str) -> list[Suggestion]:
        return [
            Suggestion(
                name="Classic Bob",
                description="A timeless short hairstyle that frames the face.",
            )
        ]

    async def generate_image(self, prompt: str) -> str:
        return self.image_url

    async def text_to_speech(self, text: str) -> str:
        return self.audio_url


def to_data_url(content: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
