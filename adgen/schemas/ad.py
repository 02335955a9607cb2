"""Pydantic schemas for ad generation requests and responses."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

FormText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
OfferText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]


class AdRequest(BaseModel):
    """Promotion details submitted by the browser form.

    Field names match the form's JSON keys (camelCase).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "businessName": "Sharma Sweets",
                "businessType": "Sweet shop",
                "city": "Jaipur",
                "offer": "20% off on all mithai this Diwali",
                "language": "Hindi",
                "tone": "Festive",
            }
        }
    )

    businessName: FormText = Field(..., description="Name of the business.")
    businessType: FormText = Field(..., description="Kind of business (e.g., 'Bakery').")
    city: FormText = Field(..., description="City the business operates in.")
    offer: OfferText = Field(..., description="Promotion being advertised.")
    language: FormText = Field(..., description="Output language (e.g., 'Tamil').")
    tone: FormText = Field(..., description="Desired tone (e.g., 'Friendly').")


class AdCopyResponse(BaseModel):
    """Generated ad copy for each channel the front-end renders."""

    whatsapp: str = Field(default="", description="WhatsApp broadcast message.")
    instagram: str = Field(default="", description="Instagram caption.")
    poster_headline: str = Field(default="", description="Short headline for a printed poster.")
    hashtags: str = Field(default="", description="Space-separated hashtags.")

    @field_validator("whatsapp", "instagram", "poster_headline", "hashtags", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        # Models sometimes answer hashtags (or lines) as arrays
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return " ".join(str(item).strip() for item in value if str(item).strip())
        if not isinstance(value, str):
            return str(value)
        return value
