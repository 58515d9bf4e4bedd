from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, Field


class LinkSpec(BaseModel):
    label: str
    href: str


class LayoutItem(BaseModel):
    kind: Literal["field", "checkboxes", "tags", "lines", "links"]
    label: str
    value: str | None = None
    entries: Sequence[str] = Field(default_factory=list)
    links: Sequence[LinkSpec] = Field(default_factory=list)


class LayoutSection(BaseModel):
    number: str
    title: str
    items: Sequence[LayoutItem] = Field(default_factory=list)

    @property
    def heading(self) -> str:
        return f"{self.number}. {self.title}"


class HeaderBlock(BaseModel):
    client_name: str
    project_name: str
    urgent: bool = False
    meta: Sequence[LayoutItem] = Field(default_factory=list)


class FooterBlock(BaseModel):
    generated_line: str
    page_label: str = "PAGE 1 OF 1"
    marker: str = "INTERNAL USE ONLY"


class BriefLayout(BaseModel):
    header: HeaderBlock
    sections: Sequence[LayoutSection]
    footer: FooterBlock


__all__ = ["BriefLayout", "FooterBlock", "HeaderBlock", "LayoutItem", "LayoutSection", "LinkSpec"]
