from __future__ import annotations

import logging
import os
from pathlib import Path

from creative_brief.api import create_app
from creative_brief.archive import ArchiveCollaborator, GCSArchive, HttpArchiveClient, NullArchive
from creative_brief.errors import ArchiveUnavailableError
from creative_brief.local_store import LocalSnapshotStore
from creative_brief.logging_config import setup_logging
from creative_brief.pdf_renderer import BriefPdfRenderer

# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
BRIEF_STORE_PATH = os.getenv("BRIEF_STORE_PATH", "data/brief-store.json")
ARCHIVE_BUCKET = os.getenv("ARCHIVE_BUCKET")
ARCHIVE_PREFIX = os.getenv("ARCHIVE_PREFIX", "briefs")
ARCHIVE_URL = os.getenv("ARCHIVE_URL")
BRIEF_LOGO_PATH = os.getenv("BRIEF_LOGO_PATH")

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)


def _build_archive() -> ArchiveCollaborator:
    # Bucket in production, remote endpoint when one is configured, otherwise local-only
    if ARCHIVE_BUCKET:
        try:
            return GCSArchive(bucket_name=ARCHIVE_BUCKET, project_id=PROJECT_ID, prefix=ARCHIVE_PREFIX)
        except ArchiveUnavailableError as exc:
            logger.warning("Archive disabled", extra={"error": str(exc)})
            return NullArchive()
    if ARCHIVE_URL:
        return HttpArchiveClient(base_url=ARCHIVE_URL)
    return NullArchive()


store = LocalSnapshotStore(path=Path(BRIEF_STORE_PATH).resolve())
renderer = BriefPdfRenderer(logo_path=BRIEF_LOGO_PATH)

app = create_app(store=store, archive=_build_archive(), renderer=renderer)
