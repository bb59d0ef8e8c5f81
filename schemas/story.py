from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class StoryInput(BaseModel):
    media_data_uri: str = Field(..., description="Voice recording or video of the artisan as a data URI")
    product_details: str = Field(..., min_length=5, description="The name and description of the product")
    target_languages: List[str] = Field(..., min_length=1, description="Language codes to translate the story to")


class CraftStory(BaseModel):
    """Structured narrative extracted from a craft video."""
    craft_description: str = Field(..., description="Overview of the craft, its purpose and aesthetic qualities")
    making_techniques: str = Field(..., description="How the craft is made, including tools and materials")
    history_of_craft: str = Field(..., description="Historical origins, evolution or significant periods")
    cultural_references: str = Field(..., description="Connections to cultures, traditions, rituals or social contexts")
    about_craftsperson: str = Field(..., description="The artisan's journey, passion or personal connection to the craft")


class ProductStories(BaseModel):
    original_transcription: str
    translated_stories: Dict[str, str] = Field(default_factory=dict, description="Language code -> story")
    craft_story: Optional[CraftStory] = None
    qr_code_url: Optional[str] = None
