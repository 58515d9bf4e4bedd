from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .brief import BriefData


class SavedBrief(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    client_name: str
    project_name: str
    timestamp: int = Field(description="Creation time in epoch milliseconds")
    data: BriefData


__all__ = ["SavedBrief"]
