"""Pure selection of what a brief PDF shows.

The builder decides which fields are printed and in which order; it knows
nothing about fonts or pages. Empty strings, false flags and empty lists are
dropped so the document never shows a label without a value.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from .models.brief import BriefData, Priority
from .models.layout import BriefLayout, FooterBlock, HeaderBlock, LayoutItem, LayoutSection, LinkSpec

GENERATOR_NAME = "Brief Generator"

SECTION_TITLES: Sequence[tuple[str, str]] = (
    ("01", "OBJECTIVES & STRATEGY"),
    ("02", "PLATFORM SPECIFICS"),
    ("03", "TARGET AUDIENCE"),
    ("04", "MESSAGING & COPY"),
    ("05", "VISUAL DIRECTION"),
    ("06", "ASSETS & DELIVERABLES"),
)


def _field(label: str, value: str | None) -> LayoutItem | None:
    if not value or not value.strip():
        return None
    return LayoutItem(kind="field", label=label, value=value)


def _checkboxes(label: str, options: Iterable[tuple[str, bool]]) -> LayoutItem | None:
    checked = [name for name, enabled in options if enabled]
    if not checked:
        return None
    return LayoutItem(kind="checkboxes", label=label, entries=checked)


def _entries(kind: str, label: str, values: Iterable[str]) -> LayoutItem | None:
    kept = [value for value in values if value and value.strip()]
    if not kept:
        return None
    return LayoutItem(kind=kind, label=label, entries=kept)


def _links(label: str, hrefs: Iterable[str]) -> LayoutItem | None:
    # numbered by position in the full list, blanks included
    links = [
        LinkSpec(label=f"OPEN LINK {i + 1}", href=href.strip())
        for i, href in enumerate(hrefs)
        if href and href.strip()
    ]
    if not links:
        return None
    return LayoutItem(kind="links", label=label, links=links)


def _compact(items: Iterable[LayoutItem | None]) -> list[LayoutItem]:
    return [item for item in items if item is not None]


class BriefLayoutBuilder:
    def __init__(self, *, generator_name: str = GENERATOR_NAME, titles: Sequence[tuple[str, str]] = SECTION_TITLES) -> None:
        self._generator_name = generator_name
        self._titles = tuple(titles)

    def build(self, brief: BriefData, *, today: date | None = None) -> BriefLayout:
        today = today or date.today()
        builders = (
            self._objectives,
            self._platform,
            self._audience,
            self._messaging,
            self._visual,
            self._deliverables,
        )
        sections = [
            LayoutSection(number=number, title=title, items=build(brief))
            for (number, title), build in zip(self._titles, builders)
        ]
        return BriefLayout(
            header=self._header(brief),
            sections=sections,
            footer=FooterBlock(generated_line=f"Generated by {self._generator_name} • {today.year}"),
        )

    def _header(self, brief: BriefData) -> HeaderBlock:
        general = brief.general
        deadline = " ".join(part for part in (general.deadline_date, general.deadline_time) if part.strip())
        meta = _compact(
            (
                _field("REQUESTED BY", general.requested_by),
                _field("DATE", general.date_of_request),
                _field("DEADLINE", deadline),
            )
        )
        return HeaderBlock(
            client_name=general.client_brand.strip(),
            project_name=general.project_name.strip(),
            urgent=general.priority == Priority.urgent,
            meta=meta,
        )

    def _objectives(self, brief: BriefData) -> list[LayoutItem]:
        objective = brief.objective
        return _compact(
            (
                _checkboxes(
                    "GOALS",
                    (
                        ("Awareness", objective.goal_awareness),
                        ("Engagement", objective.goal_engagement),
                        ("Traffic", objective.goal_traffic),
                        ("Conversion", objective.goal_conversion),
                        ("Community", objective.goal_community),
                        ("Event", objective.goal_event),
                    ),
                ),
                _field("Key Objective", objective.key_objective),
            )
        )

    def _platform(self, brief: BriefData) -> list[LayoutItem]:
        platform = brief.platform
        return _compact(
            (
                _entries("tags", "Platforms", platform.platforms),
                _field("Format", platform.format),
                _field("Size", platform.dimensions),
                _field("Count", platform.visuals_count),
            )
        )

    def _audience(self, brief: BriefData) -> list[LayoutItem]:
        audience = brief.audience
        return _compact(
            (
                _field("Age Range", audience.age_range),
                _field("Location", audience.location),
                _field("Profile Persona", audience.profile),
                _field("Key Pain Point", audience.pain_point),
            )
        )

    def _messaging(self, brief: BriefData) -> list[LayoutItem]:
        return _compact(
            (
                _field("Main Message", brief.message.main_message),
                _field("Secondary Message", brief.message.secondary_message),
                _entries("lines", "COPY & TEXT VISUAL", brief.copy.headlines),
                _entries("lines", "SUBTEXT / CTAS", brief.copy.ctas),
                _field("Language", brief.copy.language),
            )
        )

    def _visual(self, brief: BriefData) -> list[LayoutItem]:
        visual = brief.visual
        brand = brief.brand
        return _compact(
            (
                _field("Mood/Tone", visual.mood),
                _field("Style", visual.style),
                _field("Color Palette", visual.colors),
                _field("Visual References", visual.references),
                _field("Fonts", brand.fonts),
                _field("Logo Usage", brand.logo_usage.value),
                _field("Required Elements (Do's)", brand.dos),
                _field("Avoid Elements (Dont's)", brand.donts),
            )
        )

    def _deliverables(self, brief: BriefData) -> list[LayoutItem]:
        assets = brief.assets
        deliverables = brief.deliverables
        return _compact(
            (
                _checkboxes(
                    "PROVIDED ASSETS",
                    (
                        ("Photos", assets.provide_photos),
                        ("Videos", assets.provide_videos),
                        ("Logos", assets.provide_logos),
                        ("Guidelines", assets.provide_guidelines),
                        ("Prev. Designs", assets.provide_previous),
                    ),
                ),
                _field("Final Format", deliverables.final_format),
                _field("Editable?", deliverables.editable_required.value),
                _field("Export Variations", deliverables.export_variations),
                _links("ASSETS LINKS", assets.assets_links),
            )
        )


def build_layout(brief: BriefData, *, today: date | None = None) -> BriefLayout:
    return BriefLayoutBuilder().build(brief, today=today)


def visible_fields(layout: BriefLayout) -> list[tuple[str, str, str]]:
    """Flatten a layout into ``(section, label, value)`` triples that will be printed.

    Header placeholders and section headings are not included, so a brief
    with nothing filled in yields an empty list.
    """
    rows: list[tuple[str, str, str]] = []
    header = layout.header
    if header.client_name:
        rows.append(("HEADER", "CLIENT / BRAND", header.client_name))
    if header.project_name:
        rows.append(("HEADER", "PROJECT", header.project_name))
    if header.urgent:
        rows.append(("HEADER", "PRIORITY", Priority.urgent.value))
    rows.extend(("HEADER", item.label, item.value or "") for item in header.meta)

    for section in layout.sections:
        for item in section.items:
            if item.kind == "field":
                rows.append((section.heading, item.label, item.value or ""))
            elif item.kind == "links":
                rows.extend((section.heading, item.label, link.href) for link in item.links)
            else:
                rows.extend((section.heading, item.label, entry) for entry in item.entries)
    return rows


__all__ = ["BriefLayoutBuilder", "GENERATOR_NAME", "SECTION_TITLES", "build_layout", "visible_fields"]
