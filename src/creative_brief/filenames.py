from __future__ import annotations

import re
from datetime import date

from .models.brief import BriefData

_UNSAFE = re.compile(r"[^a-z0-9]")


def sanitize(value: str) -> str:
    """Lower-case ``value`` and replace every character outside ``[a-z0-9]`` with ``_``."""
    return _UNSAFE.sub("_", value.lower())


def artifact_filename(client: str | None, project: str | None, on: date) -> str:
    client_part = sanitize(client or "") or "client"
    project_part = sanitize(project or "") or "project"
    return f"{client_part}_{project_part}_{on.isoformat()}.pdf"


def brief_artifact_filename(brief: BriefData, on: date) -> str:
    return artifact_filename(brief.general.client_brand, brief.general.project_name, on)


def export_filename(brief: BriefData) -> str:
    return f"brief-{brief.general.project_name or 'untitled'}.json"


__all__ = ["artifact_filename", "brief_artifact_filename", "export_filename", "sanitize"]
