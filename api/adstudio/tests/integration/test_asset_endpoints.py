"""Integration tests for the brand asset library endpoints."""

from pathlib import Path

import pytest

from adstudio.core.config import settings

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload(client, filename="logo.png", content=PNG, **form):
    return client.post(
        "/api/brand-assets",
        files={"file": (filename, content, "image/png")},
        data=form,
    )


@pytest.fixture
def uploaded(client, sqlite_db):
    response = _upload(client, category="logo", name="Main logo", flavor="Original")
    assert response.status_code == 200
    return response.json()["asset"]


class TestUpload:

    def test_stores_file_and_row(self, uploaded):
        assert uploaded["category"] == "logo"
        assert uploaded["name"] == "Main logo"
        assert uploaded["fileName"] == "logo.png"
        assert uploaded["mimeType"] == "image/png"
        assert uploaded["flavor"] == "Original"
        assert uploaded["storagePath"].startswith("logo/")
        assert uploaded["publicUrl"] == f"http://testserver/static/{uploaded['storagePath']}"
        stored = Path(settings.local_storage_dir) / uploaded["storagePath"]
        assert stored.read_bytes() == PNG

    def test_defaults(self, client, sqlite_db):
        asset = _upload(client, filename="My Photo.png").json()["asset"]
        assert asset["category"] == "other"
        assert asset["name"] == "My Photo.png"
        assert asset["fileName"] == "My-Photo.png"

    def test_no_file(self, client, sqlite_db):
        response = client.post("/api/brand-assets", data={"category": "logo"})
        assert response.status_code == 400
        assert response.json()["field"] == "file"

    def test_empty_file(self, client, sqlite_db):
        response = _upload(client, content=b"")
        assert response.status_code == 400

    def test_without_database_nothing_stored(self, client):
        response = _upload(client)
        assert response.status_code == 503
        assert list(Path(settings.local_storage_dir).rglob("*.png")) == []


class TestListAndUpdate:

    def test_list_newest_first(self, client, uploaded):
        second = _upload(client, filename="photo.png", category="product").json()["asset"]
        assets = client.get("/api/brand-assets").json()["assets"]
        assert [a["id"] for a in assets] == [second["id"], uploaded["id"]]

    def test_list_by_category(self, client, uploaded):
        _upload(client, filename="photo.png", category="product")
        assets = client.get("/api/brand-assets", params={"category": "logo"}).json()["assets"]
        assert [a["id"] for a in assets] == [uploaded["id"]]

    def test_list_without_database(self, client):
        assert client.get("/api/brand-assets").status_code == 503

    def test_rename(self, client, uploaded):
        response = client.patch("/api/brand-assets", json={"id": uploaded["id"], "name": "Logo v2"})
        assert response.status_code == 200
        assert response.json()["asset"]["name"] == "Logo v2"
        assert response.json()["asset"]["category"] == "logo"

    def test_update_requires_id(self, client, sqlite_db):
        response = client.patch("/api/brand-assets", json={"name": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "No asset ID provided"

    def test_update_nothing(self, client, uploaded):
        response = client.patch("/api/brand-assets", json={"id": uploaded["id"]})
        assert response.status_code == 400

    def test_update_unknown(self, client, sqlite_db):
        response = client.patch("/api/brand-assets", json={"id": "missing", "name": "x"})
        assert response.status_code == 404


class TestDelete:

    def test_deletes_row_and_file(self, client, uploaded):
        response = client.request("DELETE", "/api/brand-assets", json={"id": uploaded["id"]})

        assert response.json() == {"success": True}
        assert client.get("/api/brand-assets").json()["assets"] == []
        assert not (Path(settings.local_storage_dir) / uploaded["storagePath"]).exists()

    def test_delete_unknown(self, client, sqlite_db):
        response = client.request("DELETE", "/api/brand-assets", json={"id": "missing"})
        assert response.status_code == 404


class TestAssetsInGeneration:

    def test_asset_urls_reach_prompt(self, client, uploaded, use_completion, ad_payload):
        fake = use_completion([ad_payload])
        response = client.post("/api/generate-ad", json={
            "description": "promo",
            "assetIds": [uploaded["id"], "unknown-id"],
        })

        assert response.status_code == 200
        assert f"- Main logo (logo): {uploaded['publicUrl']}" in fake.calls[0]["prompt"]
