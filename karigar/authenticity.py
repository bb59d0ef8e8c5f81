"""Authenticity badge: judge a design against traditional Indian crafts."""
from __future__ import annotations

import logging

from schemas.authenticity import AuthenticationInput, AuthenticationResult

from .config import Config
from .media import load_image
from .provider import ModelProvider

log = logging.getLogger(__name__)

_PROMPT = """You are an AI expert in traditional Indian art and crafts. Your task is to authenticate the cultural roots of an artisan's design based on an uploaded image and notes.

Analyze the provided image for its design, patterns, motifs, color palette, and techniques. Compare these elements against a vast knowledge base of traditional Indian art forms.

Artisan's Notes: {notes}
Design Image: attached

Based on your analysis:
1. Determine if the design is an authentic representation of a specific traditional craft.
2. Identify the specific cultural origin (e.g., "Warli Painting," "Pattachitra," "Bandhani").
3. Provide a confidence score between 0 and 1 for your assessment.
4. Generate a detailed report explaining your reasoning.
5. If authentic, prepare the data for a digital heritage certificate. For the certificate, invent a plausible artisan name if none is provided, and generate a unique certificate ID.

Return the result in the specified JSON format."""


def authenticate_design(request: AuthenticationInput, provider: ModelProvider, config: Config) -> AuthenticationResult:
    image = load_image(request.design_image_uri, config.max_image_bytes, field="design_image_uri")
    prompt = _PROMPT.format(notes=request.artisan_notes or "None provided.")
    result = provider.generate_structured(prompt, AuthenticationResult, media=[image])
    log.info("Design authenticated as %s (authentic=%s)", result.cultural_origin, result.is_authentic)
    return result
