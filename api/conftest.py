"""Pytest configuration and fixtures for the Ad Studio API."""

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Add the api directory to Python path
api_dir = Path(__file__).parent
sys.path.insert(0, str(api_dir))

# Static files are mounted at import time, so point storage somewhere writable first
os.environ.setdefault("LOCAL_STORAGE_DIR", tempfile.mkdtemp(prefix="adstudio-storage-"))
os.environ.setdefault("STORAGE_BACKEND", "local")

from adstudio.main import app
from adstudio.core.config import settings
from adstudio.core.dependencies import get_completion_client, get_render_client
from adstudio.services import db
from adstudio.services.brand import get_brand_context
from adstudio.services.creatomate import Render


class FakeCompletionClient:
    """Scripted stand-in for CompletionClient; exceptions in the script are raised."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, prompt: str, **kwargs: Any) -> str:
        self.calls.append({"prompt": prompt, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected completion call for task {kwargs.get('task')!r}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return json.dumps(response)
        return response


class FakeRenderClient:
    """Records render calls and answers with canned renders."""

    def __init__(self, renders: Optional[List[Render]] = None, templates: Optional[List[Dict[str, Any]]] = None):
        self.renders = renders if renders is not None else [
            Render(id="r1", status="succeeded", url="https://cdn.example.com/r1.png", width=1080, height=1080)
        ]
        self.templates = templates or []
        self.calls: List[Dict[str, Any]] = []

    async def render_template(self, template_id, modifications=None, output_format="png"):
        self.calls.append({"template_id": template_id, "modifications": modifications, "output_format": output_format})
        return list(self.renders)

    async def render_by_tags(self, tags, modifications=None, output_format="png"):
        self.calls.append({"tags": tags, "modifications": modifications, "output_format": output_format})
        return list(self.renders)

    async def list_templates(self):
        return list(self.templates)


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path):
    """Deterministic settings: local storage, no tracing upload, self-review off unless asked."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    monkeypatch.setattr(settings, "storage_backend", "local")
    monkeypatch.setattr(settings, "local_storage_dir", str(storage_dir))
    monkeypatch.setattr(settings, "service_base_url", "http://testserver")
    monkeypatch.setattr(settings, "langfuse_public_key", None)
    monkeypatch.setattr(settings, "langfuse_secret_key", None)
    monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
    monkeypatch.setattr(settings, "creatomate_api_key", "test-key")
    monkeypatch.setattr(settings, "enable_self_review", False)
    monkeypatch.setattr(settings, "database_url", None)
    db.reset_engine()
    yield
    db.reset_engine()
    app.dependency_overrides.clear()


@pytest.fixture
def brand():
    return get_brand_context()


@pytest.fixture
def fake_completion():
    """Factory for scripted completion clients."""
    return FakeCompletionClient


@pytest.fixture
def fake_renderer():
    return FakeRenderClient


@pytest.fixture
def sqlite_db(monkeypatch, tmp_path):
    """A fresh SQLite database with all tables created."""
    monkeypatch.setattr(settings, "database_url", f"sqlite:///{tmp_path / 'adstudio.db'}")
    db.reset_engine()
    db.create_tables()
    yield db
    db.reset_engine()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def use_completion(fake_completion):
    """Install a scripted completion client for the app; returns the fake."""

    def _install(responses: List[Any]) -> FakeCompletionClient:
        fake = fake_completion(responses)
        app.dependency_overrides[get_completion_client] = lambda: fake
        return fake

    return _install


@pytest.fixture
def use_renderer(fake_renderer):
    def _install(**kwargs: Any) -> FakeRenderClient:
        fake = fake_renderer(**kwargs)
        app.dependency_overrides[get_render_client] = lambda: fake
        return fake

    return _install


@pytest.fixture
def mock_langfuse():
    """Mock Langfuse tracing."""
    mock = MagicMock()
    mock.id = "test-trace-id"
    mock.span.return_value.__enter__ = MagicMock()
    mock.span.return_value.__exit__ = MagicMock(return_value=False)
    return mock


@pytest.fixture
def ad_payload() -> Dict[str, Any]:
    """A contract-valid generation payload."""
    return {
        "html": "<div style=\"background:#fffbec\"><h1>{{headline}}</h1><a>{{cta}}</a></div>",
        "fields": {"headline": "20% off every bar", "cta": "Shop now"},
        "backgroundColor": "#fffbec",
        "textColor": "#4b1c10",
        "accentColor": "#f0615a",
    }
