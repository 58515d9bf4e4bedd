import re
from datetime import date

import pytest

from creative_brief.filenames import artifact_filename, brief_artifact_filename, export_filename, sanitize
from creative_brief.schema import default_brief


@pytest.mark.parametrize("value", ["7Ciel", "Ramadan Special", "Café / Été", "", "a--b__c", "ÜBER 2026!"])
def test_sanitize_is_idempotent_and_safe(value):
    once = sanitize(value)
    assert re.fullmatch(r"[a-z0-9_]*", once)
    assert sanitize(once) == once


def test_sanitize_keeps_one_underscore_per_character():
    assert sanitize("A & B") == "a___b"


def test_artifact_filename_for_filled_brief(ramadan_brief):
    assert brief_artifact_filename(ramadan_brief, date(2026, 2, 11)) == "7ciel_ramadan_special_2026-02-11.pdf"


def test_artifact_filename_falls_back_when_names_are_empty():
    assert artifact_filename("", None, date(2026, 1, 5)) == "client_project_2026-01-05.pdf"
    assert brief_artifact_filename(default_brief(), date(2026, 1, 5)) == "client_project_2026-01-05.pdf"


def test_export_filename_keeps_project_name_verbatim(ramadan_brief):
    assert export_filename(ramadan_brief) == "brief-Ramadan Special.json"
    assert export_filename(default_brief()) == "brief-untitled.json"
