from pydantic import BaseModel, Field
from typing import Literal

SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]


class PriceInput(BaseModel):
    """Artisan's inputs to the price predictor. Currency is INR, time is hours."""
    product_image_uri: str = Field(..., description="Photo of the product as a 'data:<mimetype>;base64,<data>' URI")
    product_description: str = Field(..., min_length=1, description="Materials, size and special features")
    crafting_time: float = Field(..., ge=0, description="Time taken to create the product in hours")
    material_cost: float = Field(..., ge=0, description="Cost of raw materials in INR")
    skill_level: SkillLevel


class PriceRange(BaseModel):
    min: float = Field(..., description="The minimum suggested price")
    max: float = Field(..., description="The maximum suggested price")


class PriceBreakdown(BaseModel):
    material_cost: float = Field(..., description="The estimated material cost")
    labor_cost: float = Field(..., description="The estimated labor cost based on crafting time and skill level")
    artistic_premium: float = Field(..., description="A premium for artistic value, uniqueness, and skill")


class PricePrediction(BaseModel):
    """Returned by the model; passed to the caller untouched."""
    price_range: PriceRange
    breakdown: PriceBreakdown
    market_comparison: str = Field(..., description="How the price compares to similar products in online marketplaces")
