"""
Pydantic models for neighbourhood incident reports.
These models handle validation for report submission, storage and responses.

Python attributes are snake_case (that is also how documents are stored);
the HTTP API speaks camelCase through field aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ReportCategory(str, Enum):
    """Top-level incident categories."""
    HARASSMENT = "harassment"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"
    DEGRADATION = "degradation"
    THEFT = "theft"
    CYBER = "cyber"


class InvolvementType(str, Enum):
    """How the reporter was involved in the incident."""
    VICTIM = "victim"
    WITNESS = "witness"


class ModerationStatus(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


CATEGORIES: Dict[ReportCategory, Dict] = {
    ReportCategory.HARASSMENT: {
        "name": "Personal Harassment",
        "color": "#ef4444",
        "subcategories": ["Physical aggression", "Unwanted behavior", "Threats"],
    },
    ReportCategory.SUSPICIOUS: {
        "name": "Suspicious Activity",
        "color": "#f97316",
        "subcategories": ["Strange behavior", "Suspicious noises"],
    },
    ReportCategory.DANGEROUS: {
        "name": "Dangerous Situation",
        "color": "#dc2626",
        "subcategories": ["Objects blocking road", "Slippery surfaces", "Dangerous animals", "Other"],
    },
    ReportCategory.DEGRADATION: {
        "name": "Public Space Degradation",
        "color": "#8b5cf6",
        "subcategories": ["Littering", "Illegal dumping", "Nighttime noise", "Dog fouling", "Graffiti", "Vandalism"],
    },
    ReportCategory.THEFT: {
        "name": "Theft & Vandalism",
        "color": "#06b6d4",
        "subcategories": ["Bike theft", "Property damage", "Porch piracy", "Pickpocketing"],
    },
    ReportCategory.CYBER: {
        "name": "Cybercrime",
        "color": "#ec4899",
        "subcategories": ["Online threats", "Identity theft", "Fraud"],
    },
}


def subcategories_for(category: ReportCategory) -> List[str]:
    return list(CATEGORIES[ReportCategory(category)]["subcategories"])


def category_name(category: ReportCategory) -> str:
    return CATEGORIES[ReportCategory(category)]["name"]


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True


def _check_report_consistency(model):
    """Shared invariants: paired coordinates, subcategory within its category."""
    if (model.latitude is None) != (model.longitude is None):
        raise ValueError("latitude and longitude must be provided together")

    if model.subcategory is not None:
        allowed = subcategories_for(model.category)
        if model.subcategory not in allowed:
            raise ValueError(
                f"subcategory '{model.subcategory}' is not valid for category '{model.category}' "
                f"(allowed: {', '.join(allowed)})"
            )
    return model


class ReportCreate(_CamelModel):
    """
    Model for an incoming submission (multipart form, already coerced).
    These are the fields residents provide when submitting a report.
    """
    title: str = Field(..., min_length=1, max_length=200, description="Short incident title")
    description: str = Field(..., min_length=1, max_length=5000, description="What the resident observed")
    category: ReportCategory
    subcategory: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    location_description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = None
    authorities_contacted: bool = False
    involvement_type: InvolvementType
    incident_date_time: Optional[datetime] = Field(None, description="When the incident occurred")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "title": "Mijn fiets is gejat!",
                "description": "bij de supermarkt",
                "category": "theft",
                "subcategory": "Bike theft",
                "latitude": 51.2213,
                "longitude": 4.4051,
                "authoritiesContacted": False,
                "involvementType": "victim",
            }
        }

    @field_validator("title", "description")
    @classmethod
    def _require_text(cls, value: str) -> str:
        # Stored verbatim; only all-whitespace input is refused
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("subcategory", "location_description", "image_url", "incident_date_time", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        # Form posts send empty strings for untouched optional fields
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_consistency(self):
        return _check_report_consistency(self)


class ReportRecord(_CamelModel):
    """
    A report carrying its moderation decision, ready to be persisted.
    Identity (id, created_at) is assigned by the repository.
    """
    title: str
    description: str
    original_title: str
    original_description: str
    category: ReportCategory
    subcategory: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_description: Optional[str] = None
    image_url: Optional[str] = None
    authorities_contacted: bool = False
    involvement_type: InvolvementType
    incident_date_time: Optional[datetime] = None
    moderation_status: ModerationStatus
    moderation_reason: Optional[str] = None
    is_moderated: bool = True
    is_public: bool
    was_formalized: bool = False

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.is_public != (self.moderation_status == ModerationStatus.APPROVED.value):
            raise ValueError("is_public must match moderation_status == 'approved'")
        return _check_report_consistency(self)


class Report(ReportRecord):
    """
    A persisted report (what the API returns).
    Includes system-generated fields like ID and creation timestamp.
    """
    id: str = Field(..., description="Opaque report ID")
    created_at: datetime


class ModerationPrompts(_CamelModel):
    """Operator-supplied rubric overrides for the two moderation stages."""
    content_filter: Optional[str] = None
    text_formalization: Optional[str] = None


class ModerationPromptsUpdate(_CamelModel):
    content_filter: str
    text_formalization: str
