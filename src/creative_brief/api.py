from __future__ import annotations

import asyncio
import logging
import re
import threading
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import quote

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .archive import ArchiveCollaborator, NullArchive
from .errors import (
    ArchiveUnavailableError,
    RenderError,
    ResetNotConfirmedError,
    SavedBriefNotFoundError,
    SchemaValidationError,
)
from .form_state import BriefFormState, FieldChange
from .generation import BriefGenerator, GenerationOutcome
from .local_store import LocalSnapshotStore
from .logging_config import set_trace_id
from .models.archive import ArchivedFile
from .models.brief import BriefSection
from .models.saved_brief import SavedBrief
from .pdf_renderer import BriefPdfRenderer
from .saved_briefs import SavedBriefRepository
from .schema import dump_brief
from .transfer import export_brief

logger = logging.getLogger(__name__)


class FieldChangeRequest(BaseModel):
    section: BriefSection
    field: str
    value: Any = None
    index: int | None = Field(default=None, ge=0)


class ResetRequest(BaseModel):
    confirm: bool = False


class RemoveListItemResponse(BaseModel):
    removed: bool
    brief: dict[str, Any]


class SaveBriefRequest(BaseModel):
    client_name: str | None = Field(default=None, alias="clientName")
    project_name: str | None = Field(default=None, alias="projectName")

    model_config = {"populate_by_name": True}


def _saved(record: SavedBrief) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True)


_HEADER_UNSAFE = re.compile(r'[^\x20-\x7e]|["\\]')


def _attachment(filename: str) -> str:
    """Content-Disposition value with an ASCII fallback and the RFC 5987 UTF-8 name."""
    fallback = _HEADER_UNSAFE.sub("_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _pdf_response(outcome: GenerationOutcome) -> Response:
    headers = {
        "Content-Disposition": _attachment(outcome.filename),
        "X-Archive-Status": "archived" if outcome.archived else "skipped",
    }
    if outcome.warning:
        headers["X-Archive-Warning"] = outcome.warning.encode("ascii", "replace").decode("ascii")
    return Response(content=outcome.content, media_type=outcome.media_type, headers=headers)


def create_app(
    *,
    store: LocalSnapshotStore,
    archive: ArchiveCollaborator | None = None,
    renderer: BriefPdfRenderer | None = None,
    generator: BriefGenerator | None = None,
) -> FastAPI:
    archive = archive or NullArchive()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        close = getattr(archive, "close", None)
        if close is not None:
            close()
            logger.info("Archive client closed")

    app = FastAPI(title="Creative Brief Generator API", version="0.1.0", lifespan=lifespan)

    form = BriefFormState(store=store)
    saved_briefs = SavedBriefRepository(store=store)
    # documents stay local when no archive is configured
    brief_generator = generator or BriefGenerator(
        renderer=renderer, archive=None if isinstance(archive, NullArchive) else archive
    )
    lock = threading.Lock()

    app.state.form = form
    app.state.saved_briefs = saved_briefs
    app.state.archive = archive

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        header = request.headers.get("X-Cloud-Trace-Context", "")
        set_trace_id(header.split("/")[0] or uuid.uuid4().hex)
        return await call_next(request)

    @app.exception_handler(SchemaValidationError)
    async def schema_error(_: Request, exc: SchemaValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "issues": [{"path": issue.path, "reason": issue.reason} for issue in exc.issues],
            },
        )

    @app.exception_handler(RenderError)
    async def render_error(_: Request, exc: RenderError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": "Failed to generate PDF", "error": str(exc)})

    @app.exception_handler(ArchiveUnavailableError)
    async def archive_error(_: Request, exc: ArchiveUnavailableError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": "Archive unavailable", "error": str(exc)})

    @app.exception_handler(ResetNotConfirmedError)
    async def reset_error(_: Request, exc: ResetNotConfirmedError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(SavedBriefNotFoundError)
    async def saved_brief_missing(_: Request, exc: SavedBriefNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Saved brief not found", "id": exc.brief_id})

    @app.get("/v1/brief")
    async def get_brief() -> dict[str, Any]:
        return dump_brief(form.brief)

    @app.patch("/v1/brief/fields")
    async def update_field(request: FieldChangeRequest) -> dict[str, Any]:
        change = FieldChange(section=request.section, field=request.field, value=request.value, index=request.index)
        with lock:
            brief = form.apply(change)
        return dump_brief(brief)

    @app.post("/v1/brief/lists/{section}/{field}")
    async def append_list_item(section: BriefSection, field: str) -> dict[str, Any]:
        with lock:
            brief = form.append_list_item(section, field)
        return dump_brief(brief)

    @app.delete("/v1/brief/lists/{section}/{field}/{index}", response_model=RemoveListItemResponse)
    async def remove_list_item(section: BriefSection, field: str, index: int) -> RemoveListItemResponse:
        with lock:
            removed = form.remove_list_item(section, field, index)
            brief = form.brief
        return RemoveListItemResponse(removed=removed, brief=dump_brief(brief))

    @app.post("/v1/brief:import")
    async def import_brief(payload: Any = Body(...)) -> dict[str, Any]:
        with lock:
            brief = form.load_external(payload)
        return dump_brief(brief)

    @app.get("/v1/brief:export")
    async def export_current_brief() -> Response:
        filename, text = export_brief(form.brief)
        return Response(
            content=text.encode("utf-8"),
            media_type="application/json",
            headers={"Content-Disposition": _attachment(filename)},
        )

    @app.post("/v1/brief:reset")
    async def reset_brief(request: ResetRequest) -> dict[str, Any]:
        with lock:
            brief = form.reset_to_default(confirm=request.confirm)
        return dump_brief(brief)

    @app.post("/v1/brief:generate")
    async def generate_pdf() -> Response:
        outcome = await asyncio.to_thread(brief_generator.generate, form.brief)
        return _pdf_response(outcome)

    @app.get("/v1/saved-briefs")
    async def list_saved_briefs() -> dict[str, list[dict[str, Any]]]:
        grouped = saved_briefs.group_by_client()
        return {client: [_saved(record) for record in records] for client, records in grouped.items()}

    @app.post("/v1/saved-briefs", status_code=201)
    async def save_brief(request: SaveBriefRequest) -> dict[str, Any]:
        brief = form.brief
        record = saved_briefs.save(
            client_name=request.client_name or brief.general.client_brand,
            project_name=request.project_name or brief.general.project_name,
            data=brief,
        )
        return _saved(record)

    @app.get("/v1/saved-briefs/{brief_id}")
    async def get_saved_brief(brief_id: str) -> dict[str, Any]:
        record = saved_briefs.require(brief_id)
        return _saved(record)

    @app.delete("/v1/saved-briefs/{brief_id}", status_code=204)
    async def delete_saved_brief(brief_id: str) -> Response:
        if not saved_briefs.delete(brief_id):
            raise SavedBriefNotFoundError(brief_id)
        return Response(status_code=204)

    @app.post("/v1/saved-briefs/{brief_id}:load")
    async def load_saved_brief(brief_id: str) -> dict[str, Any]:
        record = saved_briefs.require(brief_id)
        with lock:
            brief = form.load_external(record.data)
        return dump_brief(brief)

    @app.post("/v1/saved-briefs/{brief_id}:regenerate")
    async def regenerate_saved_brief(brief_id: str) -> Response:
        record = saved_briefs.require(brief_id)
        with lock:
            form.load_external(record.data)
        outcome = await asyncio.to_thread(brief_generator.regenerate, record)
        return _pdf_response(outcome)

    @app.get("/v1/archive", response_model=list[ArchivedFile], response_model_by_alias=True)
    async def list_archive() -> list[ArchivedFile]:
        return await asyncio.to_thread(archive.list)

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return app


__all__ = ["create_app"]
