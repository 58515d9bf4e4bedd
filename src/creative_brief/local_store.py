from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from .errors import SchemaValidationError
from .models.brief import BriefData
from .schema import default_brief, dump_brief, parse_brief

logger = logging.getLogger(__name__)

BRIEF_STORAGE_KEY = "brief-storage"
SAVED_BRIEFS_KEY = "saved-briefs"


class LocalSnapshotStore:
    """Durable key-value JSON file holding the live brief and saved briefs."""

    def __init__(self, *, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def load_brief(self) -> BriefData:
        raw = self.get(BRIEF_STORAGE_KEY)
        if raw is None:
            return default_brief()
        try:
            return parse_brief(raw)
        except SchemaValidationError as exc:
            logger.warning(
                "Persisted brief no longer matches the schema; starting from defaults",
                extra={"path": str(self._path), "issues": [str(issue) for issue in exc.issues]},
            )
            return default_brief()

    def save_brief(self, brief: BriefData) -> None:
        self.set(BRIEF_STORAGE_KEY, dump_brief(brief))

    def clear_brief(self) -> None:
        self.delete(BRIEF_STORAGE_KEY)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except ValueError:
            logger.warning("Snapshot file is not valid JSON; ignoring it", extra={"path": str(self._path)})
            return {}
        if not isinstance(data, dict):
            logger.warning("Snapshot file does not hold an object; ignoring it", extra={"path": str(self._path)})
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        with tmp_path.open("w", encoding="utf-8") as fp:
            json.dump(data, fp, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self._path)


__all__ = ["BRIEF_STORAGE_KEY", "LocalSnapshotStore", "SAVED_BRIEFS_KEY"]
