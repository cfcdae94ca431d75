"""Unit tests for local storage and key helpers."""

import re
from pathlib import Path

import pytest

from adstudio.core.config import settings
from adstudio.models.exceptions import StorageException
from adstudio.services import storage_adapter, storage_local


class TestLocalBackend:

    def test_put_delete(self):
        stored = Path(settings.local_storage_dir) / "logo" / "a.png"
        storage_local.put_object("logo/a.png", b"\x89PNG")
        assert stored.read_bytes() == b"\x89PNG"
        assert storage_local.delete_object("logo/a.png") is True
        assert not stored.exists()

    def test_delete_missing(self):
        assert storage_local.delete_object("nothing/here.png") is False

    def test_path_escape_rejected(self):
        with pytest.raises(StorageException) as exc_info:
            storage_local.put_object("../outside.txt", b"x")
        assert exc_info.value.details["backend"] == "local"

    def test_public_url_served_from_static(self):
        assert storage_local.public_url("gallery/ad.png") == "http://testserver/static/gallery/ad.png"


class TestAdapter:

    def test_local_backend_selected(self):
        assert storage_adapter.backend_name() == "local"

    def test_auto_without_r2_credentials_is_local(self, monkeypatch):
        monkeypatch.setattr(settings, "storage_backend", "auto")
        monkeypatch.setattr(settings, "r2_access_key_id", None)
        assert storage_adapter.backend_name() == "local"

    def test_routes_to_backend(self):
        storage_adapter.put_object("other/x.txt", b"hi", "text/plain")
        assert (Path(settings.local_storage_dir) / "other" / "x.txt").read_bytes() == b"hi"
        assert storage_adapter.public_url("other/x.txt").endswith("/static/other/x.txt")


class TestKeys:

    @pytest.mark.parametrize("filename,expected", [
        ("Logo Final (2).png", "Logo-Final-2-.png"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\pic.jpg", "pic.jpg"),
        ("", "upload.bin"),
        (None, "upload.bin"),
        ("...", "upload.bin"),
    ])
    def test_safe_filename(self, filename, expected):
        assert storage_adapter.safe_filename(filename) == expected

    def test_make_key(self):
        key = storage_adapter.make_key("product-photo", "shot 1.png")
        assert re.fullmatch(r"product-photo/\d+-shot-1\.png", key)

    def test_make_key_blank_prefix(self):
        assert storage_adapter.make_key("", "a.png").startswith("other/")
