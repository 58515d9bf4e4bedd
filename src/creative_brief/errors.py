from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class BriefError(Exception):
    """Base class for errors raised by the brief generator."""


@dataclass(frozen=True)
class FieldIssue:
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class SchemaValidationError(BriefError):
    """A value does not match the BriefData shape.

    ``issues`` lists every non-conforming field path with a readable reason.
    """

    def __init__(self, issues: Sequence[FieldIssue], message: str | None = None) -> None:
        self.issues = list(issues)
        if message is None:
            details = "; ".join(str(issue) for issue in self.issues) or "invalid brief"
            message = f"Brief does not match the expected shape ({details})"
        super().__init__(message)

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]


class RenderError(BriefError):
    """The PDF could not be produced. No partial artifact exists."""


class ArchiveUnavailableError(BriefError):
    """The archive could not be reached or is not configured."""


class ResetNotConfirmedError(BriefError):
    """A reset was requested without explicit confirmation."""


class SavedBriefNotFoundError(BriefError):
    def __init__(self, brief_id: str) -> None:
        self.brief_id = brief_id
        super().__init__(f"Saved brief not found: {brief_id}")


__all__ = [
    "ArchiveUnavailableError",
    "BriefError",
    "FieldIssue",
    "RenderError",
    "ResetNotConfirmedError",
    "SavedBriefNotFoundError",
    "SchemaValidationError",
]
