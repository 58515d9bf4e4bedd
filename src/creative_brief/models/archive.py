from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArchivedFile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    client: str
    created_at: datetime
    size: int = Field(ge=0, description="Size in bytes")
    path: str = Field(description="Where the archived PDF can be retrieved from")


__all__ = ["ArchivedFile"]
