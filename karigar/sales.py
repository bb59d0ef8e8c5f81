"""Sales strategy suggestions."""
from __future__ import annotations

from schemas.sales import SalesStrategy, SalesStrategyInput

from .pricing import format_number
from .provider import ModelProvider

_PROMPT = """You are an expert in sales and marketing strategies for artisans. Based on the following information, provide a tailored sales strategy to improve their sales performance.

Product Data: {product_data}
Business Data: {business_data}
Growth Rate: {growth_rate}%
Materials Used: {materials_used}

Consider all factors and suggest concrete actions the artisan can take to improve sales. Explain your reasoning for each suggestion."""


def suggest_sales_strategy(request: SalesStrategyInput, provider: ModelProvider) -> SalesStrategy:
    fields = request.model_dump()
    fields["growth_rate"] = format_number(request.growth_rate)
    prompt = _PROMPT.format(**fields)
    return provider.generate_structured(prompt, SalesStrategy)
