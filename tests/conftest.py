import base64
import io
import threading

import pytest
from PIL import Image

from karigar.config import Config
from karigar.media import MediaPart
from karigar.provider import GenerationOperation, OutputPart


def png_bytes(size=(8, 8)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()


def data_uri(data, mime="image/png"):
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def pending(name="operations/test"):
    return GenerationOperation(name=name, done=False)


def done_with_media(uri="https://files.example/video.mp4", name="operations/test"):
    return GenerationOperation(name=name, done=True, outputs=[OutputPart(media_uri=uri, mime_type="video/mp4")])


def done_with_error(message, name="operations/test"):
    return GenerationOperation(name=name, done=True, error=message)


class FakeProvider:
    """Scripted ModelProvider that records every call."""

    def __init__(self, structured=None, text=None, image=None, operations=()):
        self.structured = structured
        self.text = text
        self.image = image or MediaPart(mime_type="image/png", data=png_bytes())
        self.operations = list(operations)
        self.calls = []
        self.checks = 0
        self._lock = threading.Lock()

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def generate_structured(self, prompt, schema, media=()):
        self._record("structured", prompt, schema, list(media))
        if callable(self.structured):
            return self.structured(prompt, schema)
        return self.structured

    def generate_text(self, prompt, media=()):
        self._record("text", prompt, list(media))
        if callable(self.text):
            return self.text(prompt)
        return self.text if self.text is not None else f"echo: {prompt}"

    def generate_image(self, prompt, reference=None):
        self._record("image", prompt, reference)
        return self.image

    def submit_video(self, request):
        self._record("submit", request)
        return pending()

    def check_operation(self, operation):
        with self._lock:
            self.checks += 1
            if not self.operations:
                return pending(operation.name)
            return self.operations.pop(0)

    def calls_of(self, kind):
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def config(tmp_path):
    return Config(gemini_api_key="test-key-1234", output_dir=tmp_path / "output", poll_interval=0.0)


@pytest.fixture
def image_uri():
    return data_uri(png_bytes())
