"""Live brief being edited, plus the closed set of edits allowed on it.

Each operation builds and validates the whole new value before swapping it
in, so a rejected edit never leaves the brief half-updated. Successful edits
are written through to the snapshot store when one is attached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from pydantic import ValidationError as PydanticValidationError

from .errors import FieldIssue, ResetNotConfirmedError, SchemaValidationError
from .models.brief import REQUIRED_LIST_FIELDS, SECTION_MODELS, BriefData, BriefModel, BriefSection
from .schema import default_brief, issues_from_pydantic, parse_brief

logger = logging.getLogger(__name__)


class BriefSnapshotStore(Protocol):
    def load_brief(self) -> BriefData:
        ...

    def save_brief(self, brief: BriefData) -> None:
        ...


@dataclass(frozen=True)
class FieldChange:
    """One user edit: a single leaf, or one entry of a list field when ``index`` is set."""

    section: BriefSection
    field: str
    value: Any
    index: int | None = None


def resolve_field(section: BriefSection, name: str) -> str:
    """Map a field name (snake_case or camelCase) to the section's attribute name."""
    model = SECTION_MODELS[section]
    for attr, info in model.model_fields.items():
        if name == attr or name == info.alias:
            return attr
    raise SchemaValidationError(
        [FieldIssue(path=f"{section.value}.{name}", reason="Unknown field")]
    )


def coerce_section(section: BriefSection | str) -> BriefSection:
    try:
        return BriefSection(section)
    except ValueError as exc:
        raise SchemaValidationError([FieldIssue(path=str(section), reason="Unknown section")]) from exc


def _field_path(section: BriefSection, attr: str) -> str:
    alias = SECTION_MODELS[section].model_fields[attr].alias or attr
    return f"{section.value}.{alias}"


class BriefFormState:
    def __init__(self, *, store: BriefSnapshotStore | None = None, initial: BriefData | None = None) -> None:
        self._store = store
        if initial is not None:
            self._brief = parse_brief(initial)
        elif store is not None:
            self._brief = store.load_brief()
        else:
            self._brief = default_brief()

    @property
    def brief(self) -> BriefData:
        return self._brief.model_copy(deep=True)

    def apply(self, change: FieldChange) -> BriefData:
        section = coerce_section(change.section)
        attr = resolve_field(section, change.field)
        current = getattr(self._brief, section.value)
        value = change.value

        if change.index is not None:
            entries = getattr(current, attr)
            if not isinstance(entries, list):
                raise SchemaValidationError(
                    [FieldIssue(path=_field_path(section, attr), reason="Field is not a list")]
                )
            if not 0 <= change.index < len(entries):
                raise SchemaValidationError(
                    [
                        FieldIssue(
                            path=f"{_field_path(section, attr)}.{change.index}",
                            reason=f"Index out of range (length {len(entries)})",
                        )
                    ]
                )
            entries = list(entries)
            entries[change.index] = value
            value = entries

        updated = self._rebuild_section(section, current, attr, value)
        return self._commit(section, updated, reason="field")

    def observe(self, changes: Iterable[FieldChange]) -> BriefData:
        """Apply a stream of edits in order; stops at the first rejected one."""
        for change in changes:
            self.apply(change)
        return self.brief

    def append_list_item(self, section: BriefSection, field: str) -> BriefData:
        section = coerce_section(section)
        attr = self._list_attr(section, field)
        current = getattr(self._brief, section.value)
        entries = [*getattr(current, attr), ""]
        updated = self._rebuild_section(section, current, attr, entries)
        return self._commit(section, updated, reason="append")

    def remove_list_item(self, section: BriefSection, field: str, index: int) -> bool:
        """Remove one list entry. The last remaining entry is never removed."""
        section = coerce_section(section)
        attr = self._list_attr(section, field)
        current = getattr(self._brief, section.value)
        entries = list(getattr(current, attr))
        if len(entries) <= 1 or not 0 <= index < len(entries):
            logger.debug(
                "Ignored list removal",
                extra={"section": section.value, "field": attr, "index": index, "length": len(entries)},
            )
            return False
        del entries[index]
        updated = self._rebuild_section(section, current, attr, entries)
        self._commit(section, updated, reason="remove")
        return True

    def load_external(self, value: Any) -> BriefData:
        brief = parse_brief(value)
        self._brief = brief
        self._persist()
        logger.info("Loaded brief into form", extra={"project_name": brief.general.project_name})
        return self.brief

    def reset_to_default(self, *, confirm: bool = False) -> BriefData:
        if not confirm:
            raise ResetNotConfirmedError("Reset requires explicit confirmation")
        self._brief = default_brief()
        self._persist()
        logger.info("Form cleared")
        return self.brief

    def _list_attr(self, section: BriefSection, field: str) -> str:
        attr = resolve_field(section, field)
        if (section, attr) not in REQUIRED_LIST_FIELDS:
            raise SchemaValidationError(
                [FieldIssue(path=_field_path(section, attr), reason="Field is not a repeatable list")]
            )
        return attr

    def _rebuild_section(
        self,
        section: BriefSection,
        current: BriefModel,
        attr: str,
        value: Any,
    ) -> BriefModel:
        model = SECTION_MODELS[section]
        data = current.model_dump()
        data[attr] = value
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise SchemaValidationError(issues_from_pydantic(exc, prefix=section.value)) from exc

    def _commit(self, section: BriefSection, updated: BriefModel, *, reason: str) -> BriefData:
        self._brief = self._brief.model_copy(update={section.value: updated})
        self._persist()
        logger.debug("Updated brief", extra={"section": section.value, "operation": reason})
        return self.brief

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save_brief(self._brief)


__all__ = ["BriefFormState", "BriefSnapshotStore", "FieldChange", "coerce_section", "resolve_field"]
