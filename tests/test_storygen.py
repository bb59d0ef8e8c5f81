import pytest

from conftest import FakeProvider, data_uri
from karigar.errors import InputValidationError
from karigar.storygen import (
    LANGUAGES,
    generate_product_stories,
    language_name,
    qr_code_url,
    translate_all,
    translation_prompt,
    unique_codes,
)
from schemas.story import CraftStory, StoryInput

CRAFT = CraftStory(
    craft_description="Hand-thrown terracotta",
    making_techniques="Wheel and kiln",
    history_of_craft="Centuries old",
    cultural_references="Diwali diyas",
    about_craftsperson="Third-generation potter",
)


def test_translate_all_keys_are_distinct_codes():
    provider = FakeProvider(text=lambda prompt: prompt.split(" to ")[1].split(":")[0])
    result = translate_all(provider, "My pots", ["hi", "ta", "hi", "bn", "ta"])

    assert set(result) == {"hi", "ta", "bn"}
    assert result["ta"] == "Tamil"
    assert len(provider.calls_of("text")) == 3


def test_translate_all_single_code():
    result = translate_all(FakeProvider(text="नमस्ते"), "Hello", ["hi"], max_workers=1)
    assert result == {"hi": "नमस्ते"}


def test_translate_all_requires_a_code():
    with pytest.raises(InputValidationError):
        translate_all(FakeProvider(), "Hello", [])


def test_unknown_code_passes_through():
    assert language_name("xx") == "xx"
    assert translation_prompt("hi there", "ml") == 'Translate the following text to Malayalam: "hi there"'
    assert len(LANGUAGES) == 23


def test_unique_codes_keeps_order():
    assert unique_codes(["ta", "hi", "ta"]) == ["ta", "hi"]


def test_qr_code_url_encodes_data():
    url = qr_code_url("a b&c")
    assert url.startswith("https://api.qrserver.com/v1/create-qr-code/?size=200x200&data=")
    assert url.endswith("a%20b%26c")


def test_audio_story(config):
    provider = FakeProvider(text=lambda prompt: "transcript" if prompt.startswith("Transcribe") else "translated")
    request = StoryInput(
        media_data_uri=data_uri(b"RIFF....WAVE", "audio/wav"),
        product_details="Clay water pot",
        target_languages=["hi", "hi", "bn"],
    )
    result = generate_product_stories(request, provider, config)

    assert result.original_transcription == "transcript"
    assert result.translated_stories == {"hi": "translated", "bn": "translated"}
    assert result.craft_story is None
    assert result.qr_code_url is None
    assert provider.calls_of("structured") == []


def test_video_story_adds_craft_story_and_qr(config):
    provider = FakeProvider(structured=CRAFT, text="text")
    request = StoryInput(
        media_data_uri=data_uri(b"\x00\x00\x00\x18ftypmp42", "video/mp4"),
        product_details="Terracotta diya",
        target_languages=["ta"],
    )
    result = generate_product_stories(request, provider, config)

    assert result.craft_story == CRAFT
    assert result.qr_code_url.startswith("https://api.qrserver.com/")
    structured = provider.calls_of("structured")[0]
    assert "Terracotta diya" in structured[1]
    assert structured[3][0].mime_type == "video/mp4"


def test_story_rejects_unsupported_media(config):
    provider = FakeProvider()
    request = StoryInput(
        media_data_uri=data_uri(b"%PDF-1.4", "application/pdf"),
        product_details="Clay water pot",
        target_languages=["hi"],
    )
    with pytest.raises(InputValidationError):
        generate_product_stories(request, provider, config)
    assert provider.calls == []
