"""Where generated PDFs are archived, grouped by client.

The archive is always best-effort from the generator's point of view: every
failure surfaces as :class:`ArchiveUnavailableError`, never as a render
failure.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

import httpx
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage
from pydantic import ValidationError as PydanticValidationError

from .errors import ArchiveUnavailableError
from .models.archive import ArchivedFile

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class ArchiveCollaborator(Protocol):
    def list(self) -> list[ArchivedFile]:
        ...

    def upload(self, data: bytes, filename: str, client_name: str) -> ArchivedFile:
        ...


def client_folder(client_name: str | None) -> str:
    folder = (client_name or "").strip().replace("/", "-")
    return folder or UNCATEGORIZED


class GCSArchive:
    """Archive backed by a Google Cloud Storage bucket: ``{prefix}/{client}/{filename}``."""

    def __init__(
        self,
        *,
        bucket_name: str | None,
        project_id: str | None = None,
        prefix: str = "briefs",
        client: Any | None = None,
    ) -> None:
        if not bucket_name:
            raise ArchiveUnavailableError("Archive bucket is not configured")
        self._prefix = prefix.strip("/")
        try:
            self._client = client or storage.Client(project=project_id)
        except auth_exceptions.DefaultCredentialsError as exc:
            raise ArchiveUnavailableError(f"Storage credentials are not configured: {exc}") from exc
        self._bucket = self._client.bucket(bucket_name)

    def list(self) -> list[ArchivedFile]:
        try:
            blobs = list(self._client.list_blobs(self._bucket, prefix=f"{self._prefix}/"))
        except google_exceptions.GoogleAPIError as exc:
            logger.warning("Archive listing failed", exc_info=True, extra={"error": str(exc)})
            raise ArchiveUnavailableError(f"Archive listing failed: {exc}") from exc

        files = [self._to_archived_file(blob) for blob in blobs if not blob.name.endswith("/")]
        files.sort(key=lambda item: item.created_at, reverse=True)
        return files

    def upload(self, data: bytes, filename: str, client_name: str) -> ArchivedFile:
        object_name = f"{self._prefix}/{client_folder(client_name)}/{filename}"
        blob = self._bucket.blob(object_name)
        blob.metadata = {"client": client_name or UNCATEGORIZED}
        try:
            blob.upload_from_string(data, content_type="application/pdf")
        except google_exceptions.GoogleAPIError as exc:
            logger.warning("Archive upload failed", exc_info=True, extra={"object": object_name, "error": str(exc)})
            raise ArchiveUnavailableError(f"Archive upload failed: {exc}") from exc

        logger.info("Archived brief", extra={"object": object_name, "size": len(data)})
        return ArchivedFile(
            name=filename,
            client=client_folder(client_name),
            created_at=blob.time_created or datetime.now(timezone.utc),
            size=len(data),
            path=object_name,
        )

    def _to_archived_file(self, blob: Any) -> ArchivedFile:
        parts = blob.name.split("/")
        client = parts[-2] if len(parts) >= 2 and parts[-2] != self._prefix else UNCATEGORIZED
        return ArchivedFile(
            name=parts[-1],
            client=client,
            created_at=blob.time_created or datetime.fromtimestamp(0, timezone.utc),
            size=blob.size or 0,
            path=blob.name,
        )


class HttpArchiveClient:
    """Client for a remote archive exposing ``/api/briefs`` and ``/api/briefs/save``."""

    def __init__(self, *, base_url: str, client: httpx.Client | None = None, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def list(self) -> list[ArchivedFile]:
        try:
            response = self._client.get(f"{self._base_url}/api/briefs")
        except httpx.HTTPError as exc:
            raise ArchiveUnavailableError(f"Archive unreachable: {exc}") from exc
        if response.is_error:
            raise ArchiveUnavailableError(f"Archive listing failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ArchiveUnavailableError("Archive listing returned an unreadable body") from exc

        items = payload.get("files") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise ArchiveUnavailableError("Archive listing returned an unexpected shape")
        try:
            return [ArchivedFile.model_validate(item) for item in items]
        except PydanticValidationError as exc:
            raise ArchiveUnavailableError(f"Archive listing returned invalid entries: {exc}") from exc

    def upload(self, data: bytes, filename: str, client_name: str) -> ArchivedFile:
        client_name = client_name or UNCATEGORIZED
        try:
            response = self._client.post(
                f"{self._base_url}/api/briefs/save",
                files={"file": (filename, data, "application/pdf")},
                data={"filename": filename, "clientName": client_name},
            )
        except httpx.HTTPError as exc:
            raise ArchiveUnavailableError(f"Archive unreachable: {exc}") from exc

        if response.is_error:
            raise ArchiveUnavailableError(self._error_message(response))

        path = f"{client_folder(client_name)}/{filename}"
        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict):
            path = body.get("path") or body.get("key") or path

        return ArchivedFile(
            name=filename,
            client=client_name,
            created_at=datetime.now(timezone.utc),
            size=len(data),
            path=path,
        )

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Server responded with error ({response.status_code})"


class NullArchive:
    """Stand-in when no archive is configured; documents stay local-only."""

    def list(self) -> list[ArchivedFile]:
        raise ArchiveUnavailableError("Archive is not configured")

    def upload(self, data: bytes, filename: str, client_name: str) -> ArchivedFile:
        raise ArchiveUnavailableError("Archive is not configured")


__all__ = [
    "ArchiveCollaborator",
    "GCSArchive",
    "HttpArchiveClient",
    "NullArchive",
    "UNCATEGORIZED",
    "client_folder",
]
