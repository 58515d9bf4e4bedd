from datetime import date

import pytest

from creative_brief.errors import SchemaValidationError
from creative_brief.models.brief import BriefData, Priority, YesNo
from creative_brief.schema import ValidationError, default_brief, dump_brief, parse_brief, parse_brief_json
from creative_brief.transfer import export_brief, import_brief


def test_default_brief_has_every_section_and_documented_defaults():
    brief = default_brief()
    data = dump_brief(brief)

    assert list(data) == [
        "general",
        "objective",
        "platform",
        "audience",
        "message",
        "copy",
        "visual",
        "brand",
        "assets",
        "deliverables",
        "validation",
        "context",
        "notes",
    ]
    assert brief.general.priority == Priority.medium
    assert brief.brand.logo_usage == YesNo.yes
    assert brief.deliverables.editable_required == YesNo.no
    assert brief.copy.headlines == [""]
    assert brief.copy.ctas == [""]
    assert brief.assets.assets_links == [""]
    assert brief.platform.platforms == []
    assert data["general"]["clientBrand"] == ""
    assert data["objective"]["goalAwareness"] is False
    assert data["assets"]["providePrevious"] is False


def test_default_brief_returns_independent_instances():
    first = default_brief()
    second = default_brief()
    first.copy.headlines.append("changed")
    assert second.copy.headlines == [""]


def test_parse_brief_fills_missing_optional_fields():
    raw = dump_brief(default_brief())
    raw["general"] = {"clientBrand": "7Ciel"}
    raw["objective"] = {}

    brief = parse_brief(raw)

    assert brief.general.client_brand == "7Ciel"
    assert brief.general.project_name == ""
    assert brief.general.priority == Priority.medium
    assert brief.objective.goal_event is False


def test_parse_brief_coerces_leaf_types():
    raw = dump_brief(default_brief())
    raw["objective"]["goalTraffic"] = "true"
    raw["general"]["deadlineDate"] = date(2026, 3, 1)
    raw["general"]["requestedBy"] = None

    brief = parse_brief(raw)

    assert brief.objective.goal_traffic is True
    assert brief.general.deadline_date == "2026-03-01"
    assert brief.general.requested_by == ""


def test_platforms_keep_first_occurrence_order():
    raw = dump_brief(default_brief())
    raw["platform"]["platforms"] = ["TikTok", "Instagram", "TikTok"]
    assert parse_brief(raw).platform.platforms == ["TikTok", "Instagram"]


def test_parse_brief_reports_each_offending_path():
    raw = dump_brief(default_brief())
    raw["general"]["priority"] = "Whenever"
    raw["copy"]["headlines"] = []
    raw["brand"] = {"fonts": "Poppins"}

    with pytest.raises(ValidationError) as excinfo:
        parse_brief(raw)

    paths = excinfo.value.paths
    assert "general.priority" in paths
    assert "copy.headlines" in paths
    assert "brand.logoUsage" in paths
    assert all(issue.reason for issue in excinfo.value.issues)


def test_unrelated_object_is_rejected():
    with pytest.raises(SchemaValidationError) as excinfo:
        parse_brief({"foo": 1})
    assert "general" in excinfo.value.paths
    assert "notes" in excinfo.value.paths


def test_non_object_input_is_rejected():
    with pytest.raises(SchemaValidationError) as excinfo:
        parse_brief(["not", "a", "brief"])
    assert excinfo.value.paths == ["$"]


def test_invalid_json_text_is_rejected():
    with pytest.raises(SchemaValidationError) as excinfo:
        parse_brief_json("{not json")
    assert excinfo.value.paths == ["$"]


def test_no_cross_field_validation():
    raw = dump_brief(default_brief())
    raw["general"]["deadlineDate"] = "2020-01-01"
    raw["general"]["dateOfRequest"] = "2030-01-01"
    raw["general"]["deadlineTime"] = "not a time"
    brief = parse_brief(raw)
    assert brief.general.deadline_time == "not a time"


def test_export_import_round_trip(ramadan_brief):
    filename, text = export_brief(ramadan_brief)

    assert filename == "brief-Ramadan Special.json"
    assert '"clientBrand": "7Ciel"' in text
    assert import_brief(text) == ramadan_brief


def test_export_filename_falls_back_to_untitled():
    filename, _ = export_brief(default_brief())
    assert filename == "brief-untitled.json"


def test_snake_case_names_are_accepted_on_input(ramadan_brief):
    data = ramadan_brief.model_dump()
    assert "client_brand" in data["general"]
    assert BriefData.model_validate(data) == ramadan_brief
