from __future__ import annotations

import json

from .filenames import export_filename
from .models.brief import BriefData
from .schema import dump_brief, parse_brief_json


def export_brief(brief: BriefData) -> tuple[str, str]:
    """Return ``(filename, json_text)`` for a brief export file."""
    return export_filename(brief), json.dumps(dump_brief(brief), ensure_ascii=False, indent=2)


def import_brief(text: str | bytes) -> BriefData:
    """Parse an exported brief; raises SchemaValidationError on bad content."""
    return parse_brief_json(text)


__all__ = ["export_brief", "import_brief"]
