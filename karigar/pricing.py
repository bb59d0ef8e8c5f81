"""Fair-price prediction for a handcrafted product."""
from __future__ import annotations

import logging

from schemas.pricing import PriceInput, PricePrediction

from .config import Config
from .media import load_image
from .provider import ModelProvider

log = logging.getLogger(__name__)

_PROMPT = """You are an AI expert in pricing strategies for handcrafted goods. Your task is to predict a fair price for an artisan's product.

Analyze the provided image, description, and crafting details. Consider the following factors:
- Type of craft (identified from image and description)
- Material cost
- Crafting time and skill level (to determine labor cost)
- Market demand for similar items
- Uniqueness and artistic value

All currency values should be in Indian Rupees (₹).

Artisan's Inputs:
- Product Image: attached
- Product Description: {product_description}
- Crafting Time: {crafting_time} hours
- Material Cost: ₹{material_cost}
- Skill Level: {skill_level}

Based on your analysis:
1.  Calculate a suggested price range (min and max) in INR.
2.  Provide a price breakdown in INR:
    - Material Cost: Use the provided value.
    - Labor Cost: Estimate a fair hourly wage based on skill level and craft type (e.g., Expert potter might be ₹800/hr, Beginner weaver ₹300/hr). Multiply by crafting time.
    - Artistic Premium: Add a premium based on the perceived uniqueness, complexity, and artistic merit from the image and description.
3.  Provide a short market comparison summary (e.g., "This price is competitive with similar hand-thrown ceramic mugs on platforms like Etsy, which average around ₹XX.").

Return the result in the specified JSON format."""


def format_number(value: float) -> str:
    """Full-precision text for a number; whole floats drop the ``.0``."""
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def build_prompt(request: PriceInput) -> str:
    return _PROMPT.format(
        product_description=request.product_description,
        crafting_time=format_number(request.crafting_time),
        material_cost=format_number(request.material_cost),
        skill_level=request.skill_level,
    )


def predict_price(request: PriceInput, provider: ModelProvider, config: Config) -> PricePrediction:
    image = load_image(request.product_image_uri, config.max_image_bytes, field="product_image_uri")
    log.info("Predicting price (%s, %gh, ₹%g)", request.skill_level, request.crafting_time, request.material_cost)
    return provider.generate_structured(build_prompt(request), PricePrediction, media=[image])
