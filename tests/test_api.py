from datetime import datetime, timezone
from urllib.parse import quote

import httpx
import pytest
from fastapi.testclient import TestClient

from creative_brief.api import create_app
from creative_brief.archive import HttpArchiveClient
from creative_brief.errors import ArchiveUnavailableError
from creative_brief.models.archive import ArchivedFile
from creative_brief.schema import default_brief, dump_brief


class FakeArchive:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.uploads = []

    def list(self):
        if self.fail:
            raise ArchiveUnavailableError("Archive unreachable")
        return [
            ArchivedFile(
                name=filename,
                client=client,
                created_at=datetime(2026, 2, 11, tzinfo=timezone.utc),
                size=len(data),
                path=f"{client}/{filename}",
            )
            for filename, client, data in self.uploads
        ]

    def upload(self, data, filename, client_name):
        if self.fail:
            raise ArchiveUnavailableError("Disk full")
        self.uploads.append((filename, client_name, data))
        return self.list()[-1]


@pytest.fixture()
def archive():
    return FakeArchive()


@pytest.fixture()
def client(snapshot_store, archive):
    return TestClient(create_app(store=snapshot_store, archive=archive))


def _patch(client, section, field, value, index=None):
    payload = {"section": section, "field": field, "value": value}
    if index is not None:
        payload["index"] = index
    return client.patch("/v1/brief/fields", json=payload)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_initial_brief_is_default(client):
    response = client.get("/v1/brief")
    assert response.status_code == 200
    assert response.json() == dump_brief(default_brief())


def test_field_updates_are_persisted(client, snapshot_store):
    response = _patch(client, "general", "clientBrand", "7Ciel")

    assert response.status_code == 200
    assert response.json()["general"]["clientBrand"] == "7Ciel"
    assert snapshot_store.load_brief().general.client_brand == "7Ciel"


def test_invalid_field_value_is_rejected(client):
    response = _patch(client, "general", "priority", "Someday")

    assert response.status_code == 422
    assert response.json()["issues"][0]["path"].startswith("general.")
    assert client.get("/v1/brief").json()["general"]["priority"] == "Medium"


def test_list_append_and_remove(client):
    assert client.post("/v1/brief/lists/copy/headlines").json()["copy"]["headlines"] == ["", ""]

    response = client.delete("/v1/brief/lists/copy/headlines/0")
    assert response.json()["removed"] is True

    response = client.delete("/v1/brief/lists/copy/headlines/0")
    assert response.json()["removed"] is False
    assert response.json()["brief"]["copy"]["headlines"] == [""]


def test_import_and_export(client, ramadan_brief):
    response = client.post("/v1/brief:import", json=dump_brief(ramadan_brief))
    assert response.status_code == 200

    exported = client.get("/v1/brief:export")
    assert exported.headers["content-disposition"] == (
        "attachment; filename=\"brief-Ramadan Special.json\"; filename*=UTF-8''brief-Ramadan%20Special.json"
    )
    assert exported.json() == dump_brief(ramadan_brief)


def test_import_rejects_unrelated_object(client, ramadan_brief):
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))

    response = client.post("/v1/brief:import", json={"foo": 1})

    assert response.status_code == 422
    assert client.get("/v1/brief").json() == dump_brief(ramadan_brief)


def test_reset_requires_confirmation(client, ramadan_brief):
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))

    assert client.post("/v1/brief:reset", json={}).status_code == 409
    assert client.get("/v1/brief").json()["general"]["clientBrand"] == "7Ciel"

    response = client.post("/v1/brief:reset", json={"confirm": True})
    assert response.status_code == 200
    assert response.json() == dump_brief(default_brief())


def test_generate_returns_pdf_and_archives(client, archive, ramadan_brief):
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))

    response = client.post("/v1/brief:generate")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert response.headers["x-archive-status"] == "archived"
    assert "7ciel_ramadan_special_" in response.headers["content-disposition"]
    assert archive.uploads[0][1] == "7Ciel"


def test_generate_survives_archive_failure(snapshot_store, ramadan_brief):
    client = TestClient(create_app(store=snapshot_store, archive=FakeArchive(fail=True)))
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))

    response = client.post("/v1/brief:generate")

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    assert response.headers["x-archive-status"] == "skipped"
    assert response.headers["x-archive-warning"] == "Archive Error: Disk full"


def test_generate_without_archive_stays_local(snapshot_store):
    client = TestClient(create_app(store=snapshot_store))

    response = client.post("/v1/brief:generate")

    assert response.status_code == 200
    assert response.headers["x-archive-status"] == "skipped"
    assert "x-archive-warning" not in response.headers


def test_render_failure_returns_500(snapshot_store, tmp_path):
    from creative_brief.pdf_renderer import BriefPdfRenderer

    renderer = BriefPdfRenderer(logo_path=tmp_path / "missing.png")
    client = TestClient(create_app(store=snapshot_store, renderer=renderer))

    response = client.post("/v1/brief:generate")
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate PDF"


def test_saved_brief_flow(client, archive, ramadan_brief):
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))

    created = client.post("/v1/saved-briefs", json={})
    assert created.status_code == 201
    record = created.json()
    assert record["clientName"] == "7Ciel"
    assert record["projectName"] == "Ramadan Special"

    grouped = client.get("/v1/saved-briefs").json()
    assert [item["id"] for item in grouped["7Ciel"]] == [record["id"]]
    assert client.get(f"/v1/saved-briefs/{record['id']}").json()["data"] == dump_brief(ramadan_brief)

    client.post("/v1/brief:reset", json={"confirm": True})
    loaded = client.post(f"/v1/saved-briefs/{record['id']}:load")
    assert loaded.json() == dump_brief(ramadan_brief)

    regenerated = client.post(f"/v1/saved-briefs/{record['id']}:regenerate")
    assert regenerated.status_code == 200
    assert regenerated.content.startswith(b"%PDF")
    assert archive.uploads == []

    assert client.delete(f"/v1/saved-briefs/{record['id']}").status_code == 204
    assert client.delete(f"/v1/saved-briefs/{record['id']}").status_code == 404
    assert client.get(f"/v1/saved-briefs/{record['id']}").status_code == 404


def test_save_with_explicit_names(client):
    record = client.post("/v1/saved-briefs", json={"clientName": "Acme", "projectName": "Spring"}).json()
    assert (record["clientName"], record["projectName"]) == ("Acme", "Spring")


def test_archive_listing(client, ramadan_brief):
    client.post("/v1/brief:import", json=dump_brief(ramadan_brief))
    client.post("/v1/brief:generate")

    (item,) = client.get("/v1/archive").json()
    assert item["client"] == "7Ciel"
    assert item["createdAt"].startswith("2026-02-11")


def test_archive_listing_unavailable(snapshot_store):
    client = TestClient(create_app(store=snapshot_store, archive=FakeArchive(fail=True)))

    response = client.get("/v1/archive")
    assert response.status_code == 503
    assert response.json()["detail"] == "Archive unavailable"


@pytest.mark.parametrize(
    ("project_name", "fallback"),
    [
        ("رمضان Special", "brief-_____ Special.json"),
        ('Spring "Sale"', "brief-Spring _Sale_.json"),
    ],
)
def test_export_header_handles_any_project_name(client, project_name, fallback):
    _patch(client, "general", "projectName", project_name)

    exported = client.get("/v1/brief:export")

    assert exported.status_code == 200
    disposition = exported.headers["content-disposition"]
    assert f'filename="{fallback}"' in disposition
    assert disposition.endswith("filename*=UTF-8''" + quote(f"brief-{project_name}.json", safe=""))
    assert exported.json()["general"]["projectName"] == project_name


def test_http_archive_client_is_closed_on_shutdown(snapshot_store):
    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
    archive = HttpArchiveClient(base_url="https://archive.example.com", client=http_client)

    with TestClient(create_app(store=snapshot_store, archive=archive)) as client:
        assert client.get("/v1/archive").json() == []
        assert not http_client.is_closed

    assert http_client.is_closed
