from pydantic import BaseModel, Field
from typing import Optional


class AuthenticationInput(BaseModel):
    design_image_uri: str = Field(..., description="Photo of the design as a 'data:<mimetype>;base64,<data>' URI")
    artisan_notes: Optional[str] = Field(None, description="Notes or claims from the artisan about the design's origin")


class CertificateData(BaseModel):
    artisan_name: str = Field(..., description="The name of the artisan")
    craft_name: str = Field(..., description="The name of the craft")
    date_of_authentication: str = Field(..., description="The date of authentication")
    certificate_id: str = Field(..., description="A unique ID for the certificate")


class AuthenticationResult(BaseModel):
    """Verdict on a design's cultural roots, with digital heritage certificate data."""
    is_authentic: bool = Field(..., description="Whether the design is authentic to the claimed cultural roots")
    cultural_origin: str = Field(..., description='The identified cultural origin, e.g. "Jaipur Blue Pottery"')
    confidence_score: float = Field(..., description="Confidence in the assessment, between 0 and 1")
    report: str = Field(..., description="Reasoning: visual elements, patterns and historical context")
    certificate_data: CertificateData
