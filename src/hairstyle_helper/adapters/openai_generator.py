"""OpenAI-backed generator for suggestions, images and narration."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from hairstyle_helper.domain.suggestions import Suggestion, SuggestionEnvelope
from hairstyle_helper.services.generators import (
    SUGGESTIONS_SCHEMA,
    GeneratorBackend,
    to_data_url,
)


@dataclass
class OpenAIGenerator(GeneratorBackend):
    """Generator backend using the OpenAI API."""

    client: AsyncOpenAI
    model: str
    image_model: str
    tts_model: str
    tts_voice: str

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        model: str,
        image_model: str,
        tts_model: str,
        tts_voice: str,
    ) -> "OpenAIGenerator":
        """Create an OpenAI generator."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            image_model=image_model,
            tts_model=tts_model,
            tts_voice=tts_voice,
        )

    async def suggest(self, prompt: str) -> list[Suggestion]:
        """Call the Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=self.model,
            input=prompt,
            text={
                "format": {
                    "type": "json_schema",
                    "name": "hairstyle_suggestions",
                    "strict": True,
                    "schema": SUGGESTIONS_SCHEMA,
                }
            },
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return SuggestionEnvelope.model_validate_json(output_text).suggestions

    async def generate_image(self, prompt: str) -> str:
        response = await self.client.images.generate(
            model=self.image_model, prompt=prompt, size="1024x1024"
        )
        if not response.data:
            raise RuntimeError("OpenAI returned no image")
        image = response.data[0]
        if image.url:
            return image.url
        if image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
        raise RuntimeError("OpenAI image carried neither url nor data")

    async def text_to_speech(self, text: str) -> str:
        """Synthesize narration and return it as an MP3 data URL."""
        response = await self.client.audio.speech.create(
            model=self.tts_model,
            voice=self.tts_voice,
            input=text,
            response_format="mp3",
        )
        return to_data_url(response.content, "audio/mpeg")
