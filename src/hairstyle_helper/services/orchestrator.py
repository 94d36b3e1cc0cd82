"""Orchestration of the suggestion, image and audio generation calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Protocol, TypeVar

from hairstyle_helper.domain.errors import HairstyleHelperError, MalformedResponse
from hairstyle_helper.domain.generation import (
    AudioResult,
    Failed,
    GenerationResult,
    GenerationState,
    ImageResult,
    OperationKind,
    Pending,
)
from hairstyle_helper.domain.preferences import Preferences
from hairstyle_helper.domain.suggestions import Suggestion
from hairstyle_helper.services.normalizer import (
    normalize_audio,
    normalize_image,
    normalize_suggestions,
)
from hairstyle_helper.services.observable import Observable
from hairstyle_helper.services.prompts import (
    build_image_prompt,
    build_narration_text,
    build_suggestions_prompt,
)
from hairstyle_helper.services.telemetry import ErrorReporter, LoggingErrorReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_MESSAGES: dict[OperationKind, str] = {
    OperationKind.SUGGESTIONS: "Failed to get hairstyle suggestions. Please try again.",
    OperationKind.IMAGE: "Failed to generate the hairstyle image. Please try again.",
    OperationKind.AUDIO: "Failed to generate the audio description. Please try again.",
}

CANCELLED_REASON = "cancelled"

_RESULT_SLOTS: dict[OperationKind, str] = {
    OperationKind.IMAGE: "image",
    OperationKind.AUDIO: "audio",
}


class GenerationClient(Protocol):
    """Interface for the remote generation services."""

    async def suggest(self, prompt: str) -> object:
        """Return the raw suggestions payload."""

    async def generate_image(self, prompt: str) -> object:
        """Return the raw image payload."""

    async def text_to_speech(self, text: str) -> object:
        """Return the raw audio payload."""


@dataclass
class GenerationOrchestrator:
    """Runs generation requests with one busy flag and error slot per kind.

    Requests of different kinds may overlap. A request issued while another
    request of the same kind is in flight is rejected and returns ``None``.
    Failures never propagate: they are reported, stored as a user-facing
    message in the kind's error slot, and the call returns ``None``.
    """

    client: GenerationClient
    reporter: ErrorReporter = field(default_factory=LoggingErrorReporter)
    _state: Observable[GenerationState] = field(init=False, repr=False)
    _inflight: dict[OperationKind, asyncio.Future] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._state = Observable(GenerationState())

    @property
    def state(self) -> GenerationState:
        return self._state.value

    @property
    def suggestions(self) -> list[Suggestion]:
        return list(self.state.suggestions)

    def subscribe(
        self, callback: Callable[[GenerationState], None]
    ) -> Callable[[], None]:
        """Notify ``callback`` with every committed state snapshot."""
        return self._state.subscribe(callback)

    def is_busy(self, kind: OperationKind) -> bool:
        return kind in self.state.busy

    def error(self, kind: OperationKind) -> str | None:
        return self.state.errors.get(kind)

    async def request_suggestions(
        self, preferences: Preferences
    ) -> list[Suggestion] | None:
        """Fetch suggestions and replace the current list wholesale."""
        prompt = build_suggestions_prompt(preferences)

        def apply(raw: object) -> tuple[list[Suggestion], dict[str, object]]:
            suggestions = normalize_suggestions(raw)
            return suggestions, {"suggestions": tuple(suggestions)}

        return await self._run(
            OperationKind.SUGGESTIONS, lambda: self.client.suggest(prompt), apply
        )

    async def request_image(
        self, preferences: Preferences, suggestion: Suggestion
    ) -> str | None:
        """Generate an illustrative image for ``suggestion``."""
        prompt = build_image_prompt(preferences, suggestion)

        def apply(raw: object) -> tuple[str, dict[str, object]]:
            url = normalize_image(raw)
            if url is None:
                raise MalformedResponse("Image response carried no reference")
            return url, {"image": ImageResult(url)}

        return await self._run(
            OperationKind.IMAGE,
            lambda: self.client.generate_image(prompt),
            apply,
            start={"selected": suggestion},
        )

    async def request_audio(
        self, preferences: Preferences, suggestion: Suggestion
    ) -> str | None:
        """Generate a narrated description of ``suggestion``."""
        text = build_narration_text(preferences, suggestion)

        def apply(raw: object) -> tuple[str, dict[str, object]]:
            url = normalize_audio(raw)
            if url is None:
                raise MalformedResponse("Audio response carried no reference")
            return url, {"audio": AudioResult(url)}

        return await self._run(
            OperationKind.AUDIO, lambda: self.client.text_to_speech(text), apply
        )

    def cancel(self, kind: OperationKind) -> bool:
        """Cancel the in-flight request of ``kind``, if any."""
        task = self._inflight.get(kind)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def _run(
        self,
        kind: OperationKind,
        call: Callable[[], Awaitable[object]],
        apply: Callable[[object], tuple[T, dict[str, object]]],
        start: dict[str, object] | None = None,
    ) -> T | None:
        if self.is_busy(kind):
            logger.info("Rejected %s request while one is in flight", kind)
            return None

        state = self.state
        changes: dict[str, object] = {
            "busy": state.busy | {kind},
            "errors": {k: v for k, v in state.errors.items() if k is not kind},
        }
        changes.update(_result_change(kind, Pending()))
        changes.update(start or {})
        self._commit(**changes)

        try:
            task = asyncio.ensure_future(call())
            self._inflight[kind] = task
            try:
                raw = await task
                value, success_changes = apply(raw)
            except asyncio.CancelledError:
                self._finish(kind, **_result_change(kind, Failed(CANCELLED_REASON)))
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
                logger.info("%s request cancelled", kind)
                return None
            except Exception as exc:
                self.reporter.capture(exc, context=f"{kind} generation")
                self._finish(
                    kind,
                    errors={**self.state.errors, kind: USER_MESSAGES[kind]},
                    **_result_change(kind, Failed(_failure_reason(exc))),
                )
                return None
            self._finish(kind, **success_changes)
            return value
        finally:
            self._inflight.pop(kind, None)
            if self.is_busy(kind):
                self._commit(busy=self.state.busy - {kind})

    def _finish(self, kind: OperationKind, **changes: object) -> None:
        """Commit the outcome of a request together with clearing its flag."""
        self._commit(busy=self.state.busy - {kind}, **changes)

    def _commit(self, **changes: object) -> None:
        self._state.set(replace(self.state, **changes))


def _result_change(kind: OperationKind, result: GenerationResult) -> dict[str, object]:
    slot = _RESULT_SLOTS.get(kind)
    return {slot: result} if slot else {}


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, HairstyleHelperError):
        return exc.message
    return str(exc) or type(exc).__name__
