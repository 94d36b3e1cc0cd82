"""HTTP client for the suggestion, image and speech services."""

from dataclasses import dataclass

import httpx

from hairstyle_helper.adapters.api_errors import decode_json, raise_for_api_error
from hairstyle_helper.domain.errors import NetworkFailure
from hairstyle_helper.services.orchestrator import GenerationClient


@dataclass
class HttpxGenerationClient(GenerationClient):
    """Generation client implemented with httpx.

    Payloads are returned undecoded: either a bare value or an envelope.
    """

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(cls, base_url: str, timeout: float = 30) -> "HttpxGenerationClient":
        """Create a generation client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def suggest(self, prompt: str) -> object:
        return await self._post("/api/hairstyleSuggestions", {"prompt": prompt})

    async def generate_image(self, prompt: str) -> object:
        return await self._post("/api/generateImage", {"prompt": prompt})

    async def text_to_speech(self, text: str) -> object:
        return await self._post("/api/textToSpeech", {"text": text})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _post(self, path: str, payload: dict[str, object]) -> object:
        try:
            response = await self.http_client.post(
                f"{self.base_url}{path}", json=payload, timeout=self.timeout
            )
        except httpx.TransportError as exc:
            raise NetworkFailure(f"Request to {path} failed: {exc}") from exc
        raise_for_api_error(response)
        return decode_json(response)
