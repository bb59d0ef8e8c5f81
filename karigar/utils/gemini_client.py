"""Gemini / Imagen / Veo client."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Sequence

import requests
from google import genai
from google.genai import errors, types
from pydantic import ValidationError

from ..config import Config
from ..errors import MissingOutputError, ProviderError
from ..media import MediaPart
from ..provider import GenerationOperation, GenerationRequest, OutputPart, T

log = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def _part(media: MediaPart) -> types.Part:
    return types.Part.from_bytes(data=media.data, mime_type=media.mime_type)


def _provider_error(exc: errors.APIError) -> ProviderError:
    return ProviderError(exc.message or str(exc), status_code=502)


def _to_operation(op: types.GenerateVideosOperation) -> GenerationOperation:
    message = None
    if op.error:
        message = op.error.get("message") or str(op.error)

    outputs: list[OutputPart] = []
    response = op.response
    if op.done and response:
        for generated in response.generated_videos or []:
            video = generated.video
            if video is None:
                continue
            outputs.append(OutputPart(media_uri=video.uri, mime_type=video.mime_type or "video/mp4"))

    return GenerationOperation(
        name=op.name or "",
        done=bool(op.done),
        error=message,
        outputs=outputs,
        handle=op,
    )


class GeminiProvider:
    """ModelProvider backed by the Gemini API."""

    def __init__(self, config: Config, client: genai.Client | None = None):
        if not config.gemini_api_key and client is None:
            raise ValueError("GEMINI_API_KEY is not set.")
        self.config = config
        self.client = client or genai.Client(api_key=config.gemini_api_key)

    def generate_structured(self, prompt: str, schema: type[T], media: Sequence[MediaPart] = ()) -> T:
        log.info("Structured call %s with %d media part(s)", schema.__name__, len(media))
        try:
            response = self.client.models.generate_content(
                model=self.config.text_model,
                contents=[prompt, *(_part(m) for m in media)],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except errors.APIError as e:
            raise _provider_error(e) from e

        if isinstance(response.parsed, schema):
            return response.parsed
        try:
            return schema.model_validate_json(response.text or "")
        except ValidationError as e:
            raise ProviderError(f"Model output did not match {schema.__name__}: {e}") from e

    def generate_text(self, prompt: str, media: Sequence[MediaPart] = ()) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.config.text_model,
                contents=[prompt, *(_part(m) for m in media)],
            )
        except errors.APIError as e:
            raise _provider_error(e) from e
        if not response.text:
            raise MissingOutputError("Model returned no text.")
        return response.text.strip()

    def generate_image(self, prompt: str, reference: MediaPart | None = None) -> MediaPart:
        if reference is None:
            return self._text_to_image(prompt)
        return self._edit_image(prompt, reference)

    def _text_to_image(self, prompt: str) -> MediaPart:
        log.info("Generating image with %s", self.config.image_model)
        try:
            response = self.client.models.generate_images(
                model=self.config.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=1),
            )
        except errors.APIError as e:
            raise _provider_error(e) from e

        for generated in response.generated_images or []:
            image = generated.image
            if image is not None and image.image_bytes:
                return MediaPart(mime_type=image.mime_type or "image/png", data=image.image_bytes)
        raise MissingOutputError("Could not generate image.")

    def _edit_image(self, prompt: str, reference: MediaPart) -> MediaPart:
        log.info("Generating image from reference with %s", self.config.image_edit_model)
        try:
            response = self.client.models.generate_content(
                model=self.config.image_edit_model,
                contents=[prompt, _part(reference)],
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except errors.APIError as e:
            raise _provider_error(e) from e

        for candidate in response.candidates or []:
            parts = candidate.content.parts if candidate.content else None
            for part in parts or []:
                if part.inline_data and part.inline_data.data:
                    return MediaPart(
                        mime_type=part.inline_data.mime_type or "image/png",
                        data=part.inline_data.data,
                    )
        raise MissingOutputError("Could not generate image.")

    def submit_video(self, request: GenerationRequest) -> GenerationOperation:
        log.info("Submitting video job to %s: %s", self.config.video_model, request.prompt)
        image = None
        if request.reference is not None:
            image = types.Image(image_bytes=request.reference.data, mime_type=request.reference.mime_type)
        try:
            op = self.client.models.generate_videos(
                model=self.config.video_model,
                prompt=request.prompt,
                image=image,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    duration_seconds=request.duration_seconds,
                    aspect_ratio=request.aspect_ratio,
                    person_generation=request.person_generation,
                ),
            )
        except errors.APIError as e:
            raise _provider_error(e) from e
        return _to_operation(op)

    def check_operation(self, operation: GenerationOperation) -> GenerationOperation:
        try:
            op = self.client.operations.get(operation.handle)
        except errors.APIError as e:
            raise _provider_error(e) from e
        return _to_operation(op)


def iter_media(uri: str, api_key: str) -> Iterator[bytes]:
    """Stream provider-hosted media. The key goes in a header, not the URL."""
    headers = {"x-goog-api-key": api_key}
    try:
        with requests.get(uri, headers=headers, stream=True, timeout=60) as r:
            r.raise_for_status()
            for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    yield chunk
    except requests.RequestException as e:
        raise ProviderError(f"Media download failed: {e}") from e


def download_media(uri: str, output_path: Path, api_key: str) -> Path:
    """Download provider media to a local path (requires API key auth)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wb") as f:
        for chunk in iter_media(uri, api_key):
            f.write(chunk)
    return output_path
