"""Device capability boundary.

Camera, microphone and speech recognition live in the client. The flows only
ever see the captured result, so they depend on these small protocols instead
of on a device.
"""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .media import MediaPart


class MediaCapture(Protocol):
    def capture(self) -> MediaPart:
        """Return one captured photo, recording or clip."""
        ...


class SpeechInput(Protocol):
    def listen(self) -> str:
        """Return the recognised utterance as text."""
        ...


class FileMediaCapture:
    """Reads a previously captured file from disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def capture(self) -> MediaPart:
        if not self.path.exists():
            raise FileNotFoundError(f"No such media file: {self.path}")
        return MediaPart.from_file(self.path)


class TextSpeechInput:
    """Typed text standing in for a recognised utterance."""

    def __init__(self, text: str):
        self.text = text

    def listen(self) -> str:
        return self.text.strip()
