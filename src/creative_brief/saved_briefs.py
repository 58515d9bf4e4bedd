from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from .errors import SavedBriefNotFoundError
from .local_store import SAVED_BRIEFS_KEY, LocalSnapshotStore
from .models.brief import BriefData
from .models.saved_brief import SavedBrief
from .schema import parse_brief

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SavedBriefRepository:
    """Saved brief records kept in the local snapshot store."""

    def __init__(self, *, store: LocalSnapshotStore, clock: Callable[[], int] = _now_ms) -> None:
        self._store = store
        self._clock = clock

    def get_all(self) -> list[SavedBrief]:
        briefs: list[SavedBrief] = []
        for entry in self._raw_entries():
            try:
                briefs.append(SavedBrief.model_validate(entry))
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping unreadable saved brief",
                    extra={"brief_id": entry.get("id") if isinstance(entry, dict) else None, "error": str(exc)},
                )
        return briefs

    def save(self, *, client_name: str, project_name: str, data: BriefData | dict[str, Any]) -> SavedBrief:
        brief = SavedBrief(
            id=str(uuid.uuid4()),
            client_name=client_name,
            project_name=project_name,
            timestamp=self._clock(),
            data=parse_brief(data),
        )
        entries = self._raw_entries()
        entries.append(brief.model_dump(mode="json", by_alias=True))
        self._store.set(SAVED_BRIEFS_KEY, entries)
        logger.info("Saved brief", extra={"brief_id": brief.id, "client_name": client_name})
        return brief

    def get_by_client(self, client_name: str) -> list[SavedBrief]:
        wanted = client_name.lower()
        return [brief for brief in self.get_all() if brief.client_name.lower() == wanted]

    def get_by_id(self, brief_id: str) -> SavedBrief | None:
        return next((brief for brief in self.get_all() if brief.id == brief_id), None)

    def require(self, brief_id: str) -> SavedBrief:
        brief = self.get_by_id(brief_id)
        if brief is None:
            raise SavedBriefNotFoundError(brief_id)
        return brief

    def delete(self, brief_id: str) -> bool:
        entries = self._raw_entries()
        # unreadable entries are kept; only an exact id match is removed
        remaining = [entry for entry in entries if not (isinstance(entry, dict) and entry.get("id") == brief_id)]
        if len(remaining) == len(entries):
            return False
        self._store.set(SAVED_BRIEFS_KEY, remaining)
        return True

    def get_clients(self) -> list[str]:
        return sorted({brief.client_name for brief in self.get_all()})

    def group_by_client(self) -> dict[str, list[SavedBrief]]:
        grouped: dict[str, list[SavedBrief]] = {}
        for brief in self.get_all():
            grouped.setdefault(brief.client_name, []).append(brief)
        for briefs in grouped.values():
            briefs.sort(key=lambda item: item.timestamp, reverse=True)
        return grouped

    def _raw_entries(self) -> list[Any]:
        raw = self._store.get(SAVED_BRIEFS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Saved briefs entry is not a list; ignoring it")
            return []
        return list(raw)


__all__ = ["SavedBriefRepository"]
