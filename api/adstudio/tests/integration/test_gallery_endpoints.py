"""Integration tests for the ad gallery endpoints."""

import base64
from pathlib import Path

import pytest

from adstudio.core.config import settings

PNG = b"\x89PNG\r\n\x1a\n" + b"\x01" * 16


@pytest.fixture
def saved(client, sqlite_db):
    response = client.post("/api/gallery", json={
        "html": "<h1>{{headline}}</h1><p>{{body}}</p><a>{{cta}}</a>",
        "fields": {"headline": "Snack happy", "body": "14g protein", "cta": "Shop now"},
        "adWidth": 1080,
        "adHeight": 1350,
        "accentColor": "#249b96",
        "flavor": "Original",
        "channel": "dtc",
        "imageBase64": "data:image/png;base64," + base64.b64encode(PNG).decode(),
    })
    assert response.status_code == 200
    return response.json()["ad"]


class TestSave:

    def test_derived_columns(self, saved):
        assert saved["name"] == "Snack happy"
        assert saved["adSize"] == "1080x1350"
        assert saved["templateId"] == "ai-generated"
        assert saved["headline"] == "Snack happy"
        assert saved["bodyCopy"] == "14g protein"
        assert saved["ctaText"] == "Shop now"
        assert saved["subheadline"] == ""

    def test_colors_fall_back_to_brand(self, saved):
        assert saved["colors"] == {
            "backgroundColor": "#fffbec",
            "textColor": "#4b1c10",
            "accentColor": "#249b96",
        }

    def test_exported_png_stored(self, saved):
        assert saved["outputStoragePath"].startswith("gallery/")
        assert saved["outputImageUrl"].endswith(saved["outputStoragePath"])
        stored = Path(settings.local_storage_dir) / saved["outputStoragePath"]
        assert stored.read_bytes() == PNG

    def test_untitled_without_fields(self, client, sqlite_db):
        ad = client.post("/api/gallery", json={"html": "<p>static</p>"}).json()["ad"]
        assert ad["name"] == "Untitled Ad"
        assert ad["outputImageUrl"] is None

    def test_name_from_first_value(self, client, sqlite_db):
        ad = client.post("/api/gallery", json={"html": "<p>{{tag}}</p>", "fields": {"tag": "Limited"}}).json()["ad"]
        assert ad["name"] == "Limited"

    def test_invalid_image(self, client, sqlite_db):
        response = client.post("/api/gallery", json={"html": "<p/>", "imageBase64": "not base64!!"})
        assert response.status_code == 400
        assert response.json()["field"] == "imageBase64"

    def test_empty_html(self, client, sqlite_db):
        response = client.post("/api/gallery", json={"html": ""})
        assert response.status_code == 400

    def test_without_database(self, client):
        response = client.post("/api/gallery", json={"html": "<p/>"})
        assert response.status_code == 503


class TestReadUpdateDelete:

    def test_list(self, client, saved):
        ads = client.get("/api/gallery").json()["ads"]
        assert [a["id"] for a in ads] == [saved["id"]]

    def test_list_by_flavor(self, client, saved):
        assert client.get("/api/gallery", params={"flavor": "Dark Chocolate"}).json()["ads"] == []
        assert len(client.get("/api/gallery", params={"flavor": "Original"}).json()["ads"]) == 1

    def test_list_limit_bounds(self, client, sqlite_db):
        assert client.get("/api/gallery", params={"limit": 0}).status_code == 400

    def test_get(self, client, saved):
        ad = client.get(f"/api/gallery/{saved['id']}").json()["ad"]
        assert ad["html"] == saved["html"]
        assert ad["fields"]["cta"] == "Shop now"

    def test_get_missing(self, client, sqlite_db):
        response = client.get("/api/gallery/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "RecordNotFoundException"

    def test_update_fields_refreshes_copy_columns(self, client, saved):
        response = client.patch(f"/api/gallery/{saved['id']}", json={
            "fields": {"headline": "New headline", "cta": "Buy"},
            "textColor": "#000000",
        })

        ad = response.json()["ad"]
        assert ad["headline"] == "New headline"
        assert ad["ctaText"] == "Buy"
        assert ad["bodyCopy"] == ""
        assert ad["name"] == "Snack happy"
        assert ad["colors"]["textColor"] == "#000000"
        assert ad["colors"]["accentColor"] == "#249b96"

    def test_rename(self, client, saved):
        ad = client.patch(f"/api/gallery/{saved['id']}", json={"name": "Keeper"}).json()["ad"]
        assert ad["name"] == "Keeper"
        assert ad["headline"] == "Snack happy"

    def test_update_missing(self, client, sqlite_db):
        assert client.patch("/api/gallery/nope", json={"name": "x"}).status_code == 404

    def test_delete_removes_png(self, client, saved):
        response = client.delete(f"/api/gallery/{saved['id']}")

        assert response.json() == {"success": True}
        assert client.get(f"/api/gallery/{saved['id']}").status_code == 404
        assert not (Path(settings.local_storage_dir) / saved["outputStoragePath"]).exists()

    def test_delete_missing(self, client, sqlite_db):
        assert client.delete("/api/gallery/nope").status_code == 404
