from __future__ import annotations

from pathlib import Path

import pytest

from creative_brief.local_store import LocalSnapshotStore
from creative_brief.models.brief import BriefData

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "briefs"


def load_fixture(name: str) -> BriefData:
    fixture_path = DATA_DIR / f"{name}.json"
    return BriefData.model_validate_json(fixture_path.read_text(encoding="utf-8"))


@pytest.fixture()
def ramadan_brief() -> BriefData:
    return load_fixture("ramadan_special")


@pytest.fixture()
def snapshot_store(tmp_path: Path) -> LocalSnapshotStore:
    return LocalSnapshotStore(path=tmp_path / "brief-store.json")
