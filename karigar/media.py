"""Inline media handling: data URIs, MIME detection and upload limits."""
from __future__ import annotations

import base64
import binascii
import io
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import InputValidationError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*?);base64,(?P<data>.*)$", re.DOTALL)

# Pillow format name -> MIME type
_PIL_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}

MIME_EXTENSION_MAP = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
    "audio/webm": ".webm",
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
}


@dataclass(frozen=True)
class MediaPart:
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def kind(self) -> str:
        """Top-level MIME type: ``image``, ``video``, ``audio``..."""
        return self.mime_type.split("/", 1)[0].lower()

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)

    @classmethod
    def from_data_uri(cls, uri: str) -> "MediaPart":
        return parse_data_uri(uri)

    @classmethod
    def from_file(cls, path: Path) -> "MediaPart":
        data = Path(path).read_bytes()
        mime, _ = mimetypes.guess_type(str(path))
        if not mime:
            mime = sniff_image_mime(data) or "application/octet-stream"
        return cls(mime_type=mime, data=data)


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str, field: str = "media") -> MediaPart:
    """Decode ``data:<mimetype>;base64,<payload>`` into a MediaPart.

    Raises InputValidationError for anything else.
    """
    match = _DATA_URI_RE.match(uri.strip()) if uri else None
    if not match:
        raise InputValidationError(field, "Expected a base64 data URI ('data:<mimetype>;base64,<data>').")
    mime = match.group("mime")
    if not mime:
        raise InputValidationError(field, "Data URI is missing a MIME type.")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise InputValidationError(field, "Data URI payload is not valid base64.")
    return MediaPart(mime_type=mime.lower(), data=data)


def sniff_image_mime(data: bytes) -> str | None:
    """Identify an image payload with Pillow; None if it is not an image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return _PIL_MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def get_extension_for_mime(mime_type: str | None, default: str = ".bin") -> str:
    base = (mime_type or "").split(";")[0].strip().lower()
    if base in MIME_EXTENSION_MAP:
        return MIME_EXTENSION_MAP[base]
    return mimetypes.guess_extension(base) or default


def _megabytes(n: int) -> str:
    return f"{n / (1024 * 1024):g}MB"


def validate_image(part: MediaPart, max_bytes: int, field: str = "image") -> MediaPart:
    """Check an uploaded image before it is sent anywhere."""
    if part.kind != "image":
        raise InputValidationError(field, f"Expected an image, got {part.mime_type}.")
    if part.size > max_bytes:
        raise InputValidationError(field, f"Please upload an image smaller than {_megabytes(max_bytes)}.")
    return part


def validate_media(
    part: MediaPart,
    max_bytes: int,
    kinds: tuple[str, ...] = ("audio", "video", "image"),
    field: str = "media",
) -> MediaPart:
    if part.kind not in kinds:
        raise InputValidationError(field, f"Unsupported media type {part.mime_type}; expected {', '.join(kinds)}.")
    if part.size > max_bytes:
        raise InputValidationError(field, f"Please upload a file smaller than {_megabytes(max_bytes)}.")
    return part


def load_image(uri: str, max_bytes: int, field: str = "image") -> MediaPart:
    """Parse and validate an image data URI in one step."""
    return validate_image(parse_data_uri(uri, field=field), max_bytes, field=field)
