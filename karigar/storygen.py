"""Product stories: transcribe the artisan's recording, translate it into
each requested language and, for videos, extract a structured craft story.

Translations are independent calls fanned out over a thread pool. The result
is keyed by language *code*; duplicate codes collapse to one entry.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable
from urllib.parse import quote

from schemas.story import CraftStory, ProductStories, StoryInput

from .config import QR_CODE_API, QR_CODE_SIZE, Config
from .errors import InputValidationError
from .media import MediaPart, parse_data_uri, validate_media
from .provider import ModelProvider

log = logging.getLogger(__name__)

# The 22 scheduled languages of India plus English
LANGUAGES: dict[str, str] = {
    "as": "Assamese",
    "bn": "Bengali",
    "brx": "Bodo",
    "doi": "Dogri",
    "en": "English",
    "gu": "Gujarati",
    "hi": "Hindi",
    "kn": "Kannada",
    "ks": "Kashmiri",
    "gom": "Konkani",
    "mai": "Maithili",
    "ml": "Malayalam",
    "mni": "Manipuri",
    "mr": "Marathi",
    "ne": "Nepali",
    "or": "Odia",
    "pa": "Punjabi",
    "sa": "Sanskrit",
    "sat": "Santali",
    "sd": "Sindhi",
    "ta": "Tamil",
    "te": "Telugu",
    "ur": "Urdu",
}

DEFAULT_LANGUAGES = ["hi", "bn", "ta"]

TRANSCRIBE_PROMPT = "Transcribe the following media file."

_CRAFT_STORY_PROMPT = """You are an expert at creating compelling narratives from video. An artisan has uploaded a video about their craft. Analyze the video's audio and visual content to extract key information and synthesize it into a cohesive story.

From the video, extract the following information:
1. Craft Description: A detailed overview of the craft, its purpose, and aesthetic qualities.
2. Making Techniques: Explanations of how the craft is made, including tools and materials.
3. History of the Craft: Any historical origins or evolution mentioned.
4. Cultural References: Connections to specific traditions, rituals, or social contexts.
5. About the Craftsperson: The artisan's personal journey, passion, or connection to the craft.

Synthesize this information into a natural, engaging narrative.

Product Details: {product_details}

Return the structured story in the specified JSON format."""


def language_name(code: str) -> str:
    return LANGUAGES.get(code, code)


def translation_prompt(text: str, code: str) -> str:
    return f'Translate the following text to {language_name(code)}: "{text}"'


def unique_codes(codes: Iterable[str]) -> list[str]:
    """Drop duplicate language codes, keeping first-seen order."""
    return list(dict.fromkeys(codes))


def translate_all(
    provider: ModelProvider,
    text: str,
    codes: Iterable[str],
    max_workers: int = 4,
) -> dict[str, str]:
    """Translate ``text`` into every language code, one provider call each.

    The returned mapping has exactly one key per distinct code. Any failed
    translation fails the whole call.
    """
    targets = unique_codes(codes)
    if not targets:
        raise InputValidationError("target_languages", "Please select at least one language.")

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(targets)))) as pool:
        futures = {code: pool.submit(provider.generate_text, translation_prompt(text, code)) for code in targets}
        return {code: futures[code].result() for code in targets}


def render_story(product_details: str, story: CraftStory) -> str:
    return (
        f"# {product_details}\n\n"
        f"## About the Craft\n{story.craft_description}\n\n"
        f"## Making Techniques\n{story.making_techniques}\n\n"
        f"## History\n{story.history_of_craft}\n\n"
        f"## Cultural Significance\n{story.cultural_references}\n\n"
        f"## About the Artisan\n{story.about_craftsperson}"
    )


def qr_code_url(data: str, size: int = QR_CODE_SIZE) -> str:
    """URL of a QR code image encoding ``data``."""
    return f"{QR_CODE_API}?size={size}x{size}&data={quote(data, safe='')}"


def transcribe(provider: ModelProvider, media: MediaPart) -> str:
    return provider.generate_text(TRANSCRIBE_PROMPT, media=[media])


def generate_product_stories(
    request: StoryInput,
    provider: ModelProvider,
    config: Config,
    progress_cb: Callable[[str], None] | None = None,
) -> ProductStories:
    media = validate_media(
        parse_data_uri(request.media_data_uri, field="media_data_uri"),
        config.max_media_bytes,
        field="media_data_uri",
    )
    targets = unique_codes(request.target_languages)

    if progress_cb:
        progress_cb(f"  Transcribing {media.kind} ({media.size} bytes)...")
    transcription = transcribe(provider, media)

    if progress_cb:
        progress_cb(f"  Translating into {len(targets)} language(s): {', '.join(targets)}")
    translated = translate_all(provider, transcription, targets, max_workers=config.translate_workers)

    craft_story = None
    qr_url = None
    if media.kind == "video":
        if progress_cb:
            progress_cb("  Extracting craft story from video...")
        craft_story = provider.generate_structured(
            _CRAFT_STORY_PROMPT.format(product_details=request.product_details),
            CraftStory,
            media=[media],
        )
        qr_url = qr_code_url(render_story(request.product_details, craft_story))

    log.info("Generated product stories in %d language(s), craft story=%s", len(translated), craft_story is not None)
    return ProductStories(
        original_transcription=transcription,
        translated_stories=translated,
        craft_story=craft_story,
        qr_code_url=qr_url,
    )
