from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from .archive import UNCATEGORIZED, ArchiveCollaborator
from .errors import ArchiveUnavailableError, RenderError
from .filenames import artifact_filename, brief_artifact_filename
from .models.archive import ArchivedFile
from .models.brief import BriefData
from .models.saved_brief import SavedBrief
from .pdf_renderer import BriefPdfRenderer

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    filename: str
    content: bytes
    archived: bool = False
    archived_file: ArchivedFile | None = None
    warning: str | None = None

    @property
    def media_type(self) -> str:
        return "application/pdf"


class BriefGenerator:
    """Renders briefs to PDF and hands them to the archive without letting it block."""

    def __init__(
        self,
        *,
        renderer: BriefPdfRenderer | None = None,
        archive: ArchiveCollaborator | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._renderer = renderer or BriefPdfRenderer()
        self._archive = archive
        self._clock = clock

    def generate(self, brief: BriefData) -> GenerationOutcome:
        today = self._clock()
        filename = brief_artifact_filename(brief, today)
        content = self._render(brief, today, filename)
        outcome = GenerationOutcome(filename=filename, content=content)

        if self._archive is None:
            return outcome

        client_name = brief.general.client_brand or UNCATEGORIZED
        try:
            outcome.archived_file = self._archive.upload(content, filename, client_name)
            outcome.archived = True
            logger.info("PDF generated and saved to archive", extra={"artifact": filename, "client_name": client_name})
        except ArchiveUnavailableError as exc:
            outcome.warning = f"Archive Error: {exc}"
            logger.warning("Archive upload failed; document kept local", extra={"artifact": filename, "error": str(exc)})
        except Exception as exc:
            outcome.warning = f"Archive Error: {exc}"
            logger.warning(
                "Archive upload failed unexpectedly; document kept local",
                exc_info=True,
                extra={"artifact": filename, "error": str(exc)},
            )
        return outcome

    def regenerate(self, saved: SavedBrief) -> GenerationOutcome:
        today = self._clock()
        filename = artifact_filename(saved.client_name, saved.project_name, today)
        return GenerationOutcome(filename=filename, content=self._render(saved.data, today, filename))

    def _render(self, brief: BriefData, today: date, filename: str) -> bytes:
        try:
            content = self._renderer.render(brief, today=today)
        except RenderError:
            logger.error("Failed to generate PDF", exc_info=True, extra={"artifact": filename})
            raise
        logger.info("Generated PDF", extra={"artifact": filename, "size": len(content)})
        return content


__all__ = ["BriefGenerator", "GenerationOutcome"]
