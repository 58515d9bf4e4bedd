"""Parsing, validation and defaults for :class:`BriefData`.

Everything here is side-effect free. Callers get either a normalized
``BriefData`` or a :class:`SchemaValidationError` listing each offending
field path (camelCase, dotted, e.g. ``copy.headlines``).
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .errors import FieldIssue, SchemaValidationError
from .models.brief import (
    AssetsSection,
    AudienceSection,
    BrandSection,
    BriefData,
    ContextSection,
    CopySection,
    DeliverablesSection,
    GeneralSection,
    MessageSection,
    NotesSection,
    ObjectiveSection,
    PlatformSection,
    Priority,
    ValidationSection,
    VisualSection,
    YesNo,
)

# Name used by callers that think of this as "the schema's" error type.
ValidationError = SchemaValidationError


def default_brief() -> BriefData:
    """Return a fresh canonical default brief."""
    return BriefData(
        general=GeneralSection(priority=Priority.medium),
        objective=ObjectiveSection(),
        platform=PlatformSection(platforms=[]),
        audience=AudienceSection(),
        message=MessageSection(),
        copy=CopySection(headlines=[""], ctas=[""]),
        visual=VisualSection(),
        brand=BrandSection(logo_usage=YesNo.yes),
        assets=AssetsSection(
            provide_photos=False,
            provide_videos=False,
            provide_logos=False,
            provide_guidelines=False,
            provide_previous=False,
            assets_links=[""],
        ),
        deliverables=DeliverablesSection(editable_required=YesNo.no),
        validation=ValidationSection(),
        context=ContextSection(),
        notes=NotesSection(),
    )


def issues_from_pydantic(exc: PydanticValidationError, *, prefix: str = "") -> list[FieldIssue]:
    issues: list[FieldIssue] = []
    for error in exc.errors():
        parts = [str(part) for part in error.get("loc", ())]
        if prefix:
            parts.insert(0, prefix)
        path = ".".join(parts) or "$"
        issues.append(FieldIssue(path=path, reason=error.get("msg", "invalid value")))
    return issues


def parse_brief(value: Any) -> BriefData:
    """Validate ``value`` against the brief shape and return a normalized copy."""
    if isinstance(value, BriefData):
        return value.model_copy(deep=True)
    if not isinstance(value, Mapping):
        raise SchemaValidationError(
            [FieldIssue(path="$", reason=f"Expected an object, got {type(value).__name__}")]
        )
    try:
        return BriefData.model_validate(dict(value))
    except PydanticValidationError as exc:
        raise SchemaValidationError(issues_from_pydantic(exc)) from exc


def parse_brief_json(text: str | bytes) -> BriefData:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SchemaValidationError(
            [FieldIssue(path="$", reason=f"Invalid JSON: {exc}")], message="Invalid JSON file"
        ) from exc
    return parse_brief(data)


def dump_brief(brief: BriefData) -> dict[str, Any]:
    """JSON-ready mapping with camelCase keys."""
    return brief.model_dump(mode="json", by_alias=True)


__all__ = [
    "ValidationError",
    "default_brief",
    "dump_brief",
    "issues_from_pydantic",
    "parse_brief",
    "parse_brief_json",
]
