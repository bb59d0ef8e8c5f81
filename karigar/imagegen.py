"""Product image generation."""
from __future__ import annotations

import io
import logging
from typing import Callable

from PIL import Image, ImageDraw, ImageFont

from schemas.media import GeneratedImage, ImageRequest

from .config import Config
from .media import MediaPart, load_image
from .provider import ModelProvider

log = logging.getLogger(__name__)

PLACEHOLDER_SIZE = 768


def build_prompt(request: ImageRequest) -> str:
    return (
        f"Generate a product image with the following description: {request.product_description}, "
        f"style: {request.style_preference}, view: {request.view_preference}. Make it photorealistic."
    )


def generate_product_image(
    request: ImageRequest,
    provider: ModelProvider,
    config: Config,
    progress_cb: Callable[[str], None] | None = None,
) -> GeneratedImage:
    """Generate a product image, optionally guided by a reference photo."""
    reference = None
    if request.product_image_uri:
        reference = load_image(request.product_image_uri, config.max_image_bytes, field="product_image_uri")

    if progress_cb:
        model = config.image_edit_model if reference else config.image_model
        progress_cb(f"  Image gen: {model}")
    log.info("Generating product image (reference=%s)", reference is not None)

    image = provider.generate_image(build_prompt(request), reference=reference)
    return GeneratedImage(image_data_uri=image.to_data_uri())


def generate_placeholder_image(
    prompt: str,
    width: int = PLACEHOLDER_SIZE,
    height: int = PLACEHOLDER_SIZE,
) -> MediaPart:
    """Render a simple placeholder image (no API needed). Used for test mode."""
    img = Image.new("RGB", (width, height), color=(60, 40, 30))
    draw = ImageDraw.Draw(img)

    try:
        font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 24)
    except OSError:
        font = ImageFont.load_default()

    # Simple word wrap
    words = prompt.split()
    lines: list[str] = []
    current = ""
    for w in words:
        test = f"{current} {w}".strip()
        bbox = draw.textbbox((0, 0), test, font=font)
        if bbox[2] > width - 80 and current:
            lines.append(current)
            current = w
        else:
            current = test
    if current:
        lines.append(current)

    y = height // 2 - len(lines) * 18
    for line in lines:
        bbox = draw.textbbox((0, 0), line, font=font)
        x = (width - bbox[2]) // 2
        draw.text((x + 2, y + 2), line, fill=(0, 0, 0), font=font)
        draw.text((x, y), line, fill=(250, 220, 180), font=font)
        y += 36

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return MediaPart(mime_type="image/png", data=buf.getvalue())


def placeholder_product_image(request: ImageRequest) -> GeneratedImage:
    image = generate_placeholder_image(build_prompt(request))
    return GeneratedImage(image_data_uri=image.to_data_uri())
