"""Model provider interface shared by every flow."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, TypeVar

from pydantic import BaseModel

from .media import MediaPart

T = TypeVar("T", bound=BaseModel)


@dataclass
class GenerationRequest:
    """A long-running generation job as submitted to the provider."""
    prompt: str
    reference: MediaPart | None = None
    duration_seconds: int = 5
    aspect_ratio: str = "16:9"
    person_generation: str | None = None


@dataclass
class OutputPart:
    text: str | None = None
    media_uri: str | None = None
    mime_type: str | None = None


@dataclass
class GenerationOperation:
    """Handle for an in-flight job. Terminal once ``done`` is true."""
    name: str
    done: bool = False
    error: str | None = None
    outputs: list[OutputPart] = field(default_factory=list)
    handle: Any = None  # provider SDK object, needed to re-poll

    def first_media(self) -> OutputPart | None:
        for part in self.outputs:
            if part.media_uri:
                return part
        return None


class ModelProvider(Protocol):
    def generate_structured(self, prompt: str, schema: type[T], media: Sequence[MediaPart] = ()) -> T:
        ...

    def generate_text(self, prompt: str, media: Sequence[MediaPart] = ()) -> str:
        ...

    def generate_image(self, prompt: str, reference: MediaPart | None = None) -> MediaPart:
        ...

    def submit_video(self, request: GenerationRequest) -> GenerationOperation:
        ...

    def check_operation(self, operation: GenerationOperation) -> GenerationOperation:
        ...
