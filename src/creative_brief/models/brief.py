from __future__ import annotations

from datetime import date, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"


class YesNo(str, Enum):
    yes = "Yes"
    no = "No"


PLATFORM_CHOICES = ("Instagram", "Facebook", "TikTok", "LinkedIn", "Stories", "Ads")


class BriefModel(BaseModel):
    """Base for brief sections: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null means "not filled in"; let the field default apply
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class GeneralSection(BriefModel):
    client_brand: str = ""
    project_name: str = ""
    date_of_request: str = ""
    requested_by: str = ""
    deadline_date: str = ""
    deadline_time: str = ""
    priority: Priority = Priority.medium

    @field_validator("date_of_request", "deadline_date", "deadline_time", mode="before")
    @classmethod
    def _isoformat(cls, value: Any) -> Any:
        if isinstance(value, (date, time)):
            return value.isoformat()
        return value


class ObjectiveSection(BriefModel):
    goal_awareness: bool = False
    goal_engagement: bool = False
    goal_traffic: bool = False
    goal_conversion: bool = False
    goal_community: bool = False
    goal_event: bool = False
    key_objective: str = ""


class PlatformSection(BriefModel):
    platforms: list[str] = Field(default_factory=list, description="Instagram, Facebook, TikTok, ...")
    format: str = Field(default="", description="Post, Carousel, Reel, ...")
    dimensions: str = ""
    visuals_count: str = ""

    @field_validator("platforms")
    @classmethod
    def _unique_in_order(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class AudienceSection(BriefModel):
    age_range: str = ""
    location: str = ""
    profile: str = ""
    pain_point: str = ""


class MessageSection(BriefModel):
    main_message: str = ""
    secondary_message: str = ""


class CopySection(BriefModel):
    headlines: list[str] = Field(min_length=1)
    ctas: list[str] = Field(min_length=1)
    language: str = ""


class VisualSection(BriefModel):
    mood: str = ""
    colors: str = ""
    style: str = ""
    references: str = ""


class BrandSection(BriefModel):
    logo_usage: YesNo
    fonts: str = ""
    dos: str = ""
    donts: str = ""


class AssetsSection(BriefModel):
    provide_photos: bool
    provide_videos: bool
    provide_logos: bool
    provide_guidelines: bool
    provide_previous: bool
    assets_links: list[str] = Field(min_length=1)


class DeliverablesSection(BriefModel):
    final_format: str = Field(default="", description="JPG, PNG, PDF, ...")
    editable_required: YesNo
    export_variations: str = ""


class ValidationSection(BriefModel):
    validator: str = ""
    revisions_included: str = ""
    feedback_deadline: str = ""


class ContextSection(BriefModel):
    past_insight: str = ""
    competitor_benchmark: str = ""


class NotesSection(BriefModel):
    internal_notes: str = ""


class BriefData(BriefModel):
    general: GeneralSection
    objective: ObjectiveSection
    platform: PlatformSection
    audience: AudienceSection
    message: MessageSection
    copy: CopySection
    visual: VisualSection
    brand: BrandSection
    assets: AssetsSection
    deliverables: DeliverablesSection
    validation: ValidationSection
    context: ContextSection
    notes: NotesSection

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "general": {
                    "clientBrand": "7Ciel",
                    "projectName": "Ramadan Special",
                    "requestedBy": "Sara",
                    "dateOfRequest": "2026-02-10",
                    "deadlineDate": "2026-02-20",
                    "deadlineTime": "18:00",
                    "priority": "Urgent",
                },
                "objective": {"goalAwareness": True, "keyObjective": "Drive iftar bookings"},
                "platform": {"platforms": ["Instagram", "TikTok"], "format": "Carousel"},
                "audience": {"ageRange": "25-40", "location": "Casablanca"},
                "message": {"mainMessage": "Break your fast with us"},
                "copy": {"headlines": ["Iftar, reimagined"], "ctas": ["Book now"], "language": "FR"},
                "visual": {"mood": "Warm"},
                "brand": {"logoUsage": "Yes"},
                "assets": {
                    "providePhotos": True,
                    "provideVideos": False,
                    "provideLogos": True,
                    "provideGuidelines": False,
                    "providePrevious": False,
                    "assetsLinks": ["https://drive.example.com/ramadan"],
                },
                "deliverables": {"editableRequired": "Yes"},
                "validation": {},
                "context": {},
                "notes": {},
            }
        }
    )


class BriefSection(str, Enum):
    general = "general"
    objective = "objective"
    platform = "platform"
    audience = "audience"
    message = "message"
    copy = "copy"
    visual = "visual"
    brand = "brand"
    assets = "assets"
    deliverables = "deliverables"
    validation = "validation"
    context = "context"
    notes = "notes"


SECTION_MODELS: dict[BriefSection, type[BriefModel]] = {
    BriefSection.general: GeneralSection,
    BriefSection.objective: ObjectiveSection,
    BriefSection.platform: PlatformSection,
    BriefSection.audience: AudienceSection,
    BriefSection.message: MessageSection,
    BriefSection.copy: CopySection,
    BriefSection.visual: VisualSection,
    BriefSection.brand: BrandSection,
    BriefSection.assets: AssetsSection,
    BriefSection.deliverables: DeliverablesSection,
    BriefSection.validation: ValidationSection,
    BriefSection.context: ContextSection,
    BriefSection.notes: NotesSection,
}

# List fields that must never drop below one entry.
REQUIRED_LIST_FIELDS: frozenset[tuple[BriefSection, str]] = frozenset(
    {
        (BriefSection.copy, "headlines"),
        (BriefSection.copy, "ctas"),
        (BriefSection.assets, "assets_links"),
    }
)


__all__ = [
    "AssetsSection",
    "AudienceSection",
    "BrandSection",
    "BriefData",
    "BriefModel",
    "BriefSection",
    "ContextSection",
    "CopySection",
    "DeliverablesSection",
    "GeneralSection",
    "MessageSection",
    "NotesSection",
    "ObjectiveSection",
    "PLATFORM_CHOICES",
    "PlatformSection",
    "Priority",
    "REQUIRED_LIST_FIELDS",
    "SECTION_MODELS",
    "ValidationSection",
    "VisualSection",
    "YesNo",
]
