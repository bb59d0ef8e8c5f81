from pydantic import BaseModel, Field
from typing import Literal, Optional


class ImageRequest(BaseModel):
    product_description: str = Field(..., min_length=10, description="Detailed description of the product")
    style_preference: str = Field(..., min_length=1, description="e.g. minimalist, rustic, modern")
    view_preference: str = Field(..., min_length=1, description="e.g. front, side, 3D")
    product_image_uri: Optional[str] = Field(None, description="Optional reference photo as a data URI")


class GeneratedImage(BaseModel):
    image_data_uri: str


class VideoRequest(BaseModel):
    """A short social-media video request.

    Unset options follow the photo: 9:16 portrait with people allowed when a
    reference photo is given, 16:9 otherwise.
    """
    prompt: str = Field(..., min_length=10, description="What the video should show")
    photo_data_uri: Optional[str] = Field(None, description="Optional reference photo as a data URI")
    duration_seconds: int = Field(default=5, ge=5, le=8)
    aspect_ratio: Optional[Literal["16:9", "9:16"]] = None
    person_generation: Optional[Literal["dont_allow", "allow_adult"]] = None

    def resolved_aspect_ratio(self) -> str:
        if self.aspect_ratio:
            return self.aspect_ratio
        return "9:16" if self.photo_data_uri else "16:9"

    def resolved_person_generation(self) -> Optional[str]:
        if self.person_generation:
            return self.person_generation
        return "allow_adult" if self.photo_data_uri else None
