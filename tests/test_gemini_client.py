from types import SimpleNamespace

import pytest
import requests
from google.genai import errors

from karigar.errors import MissingOutputError, ProviderError
from karigar.media import MediaPart
from karigar.provider import GenerationOperation
from karigar.utils import gemini_client
from karigar.utils.gemini_client import GeminiProvider, _to_operation, iter_media
from schemas.chat import ChatReply


class FakeModels:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.kwargs = None

    def generate_content(self, **kwargs):
        self.kwargs = kwargs
        if self.exc:
            raise self.exc
        return self.response


def _client(models, operations=None):
    return SimpleNamespace(models=models, operations=operations)


def _veo_op(done=True, error=None, uris=()):
    videos = [SimpleNamespace(video=SimpleNamespace(uri=u, mime_type=None)) for u in uris]
    return SimpleNamespace(
        name="models/veo/operations/abc",
        done=done,
        error=error,
        response=SimpleNamespace(generated_videos=videos) if done else None,
    )


def test_requires_key(config):
    config.gemini_api_key = ""
    with pytest.raises(ValueError):
        GeminiProvider(config)


def test_to_operation_with_video():
    op = _to_operation(_veo_op(uris=["https://files.example/abc"]))
    assert op.done
    assert op.error is None
    assert op.first_media().media_uri == "https://files.example/abc"
    assert op.first_media().mime_type == "video/mp4"


def test_to_operation_error_message():
    op = _to_operation(_veo_op(error={"code": 3, "message": "Prompt blocked by safety filters"}))
    assert op.error == "Prompt blocked by safety filters"
    assert op.first_media() is None


def test_to_operation_pending():
    op = _to_operation(_veo_op(done=None))
    assert not op.done
    assert op.outputs == []


def test_check_operation_repolls_handle(config):
    handle = object()
    seen = []

    def get(operation):
        seen.append(operation)
        return _veo_op(done=False)

    provider = GeminiProvider(config, client=_client(FakeModels(), SimpleNamespace(get=get)))
    op = provider.check_operation(GenerationOperation(name="x", handle=handle))
    assert seen == [handle]
    assert not op.done


def test_structured_falls_back_to_text(config):
    models = FakeModels(SimpleNamespace(parsed=None, text='{"message": "Namaste"}'))
    provider = GeminiProvider(config, client=_client(models))

    reply = provider.generate_structured("hi", ChatReply, media=[MediaPart("image/png", b"x")])

    assert reply == ChatReply(message="Namaste")
    assert models.kwargs["model"] == config.text_model
    assert len(models.kwargs["contents"]) == 2


def test_structured_bad_output(config):
    provider = GeminiProvider(config, client=_client(FakeModels(SimpleNamespace(parsed=None, text="nope"))))
    with pytest.raises(ProviderError):
        provider.generate_structured("hi", ChatReply)


def test_api_error_message_kept(config):
    exc = errors.APIError(429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}})
    provider = GeminiProvider(config, client=_client(FakeModels(exc=exc)))
    with pytest.raises(ProviderError) as info:
        provider.generate_text("hi")
    assert str(info.value) == "Resource exhausted"


def test_empty_text_is_missing_output(config):
    provider = GeminiProvider(config, client=_client(FakeModels(SimpleNamespace(text=""))))
    with pytest.raises(MissingOutputError):
        provider.generate_text("hi")


class FakeResponse:
    def __init__(self, chunks, status=200):
        self.chunks = chunks
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Client Error")

    def iter_content(self, chunk_size):
        return iter(self.chunks)


def test_iter_media_sends_key_in_header(monkeypatch):
    seen = {}

    def fake_get(url, headers, stream, timeout):
        seen.update(url=url, headers=headers)
        return FakeResponse([b"abc", b"", b"def"])

    monkeypatch.setattr(gemini_client.requests, "get", fake_get)
    assert b"".join(iter_media("https://files.example/v", "secret")) == b"abcdef"
    assert seen["url"] == "https://files.example/v"
    assert seen["headers"] == {"x-goog-api-key": "secret"}


def test_iter_media_http_error(monkeypatch):
    monkeypatch.setattr(gemini_client.requests, "get", lambda *a, **kw: FakeResponse([], status=403))
    with pytest.raises(ProviderError):
        list(iter_media("https://files.example/v", "secret"))
