from pydantic import BaseModel, Field


class SalesStrategyInput(BaseModel):
    product_data: str = Field(..., min_length=10, description="Products, including descriptions, pricing and variations")
    business_data: str = Field(..., min_length=10, description="Revenue, expenses and profit margins")
    growth_rate: float = Field(..., ge=0, description="Current growth rate of the business, in percent")
    materials_used: str = Field(..., min_length=10, description="Materials used, including costs and sourcing")


class SalesStrategy(BaseModel):
    suggested_strategy: str = Field(..., description="Recommendations for pricing, marketing and sales channels")
    reasoning: str = Field(..., description="Why the strategy fits the provided data")
