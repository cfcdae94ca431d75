"""Unit tests for exception to HTTP status mapping."""

import pytest

from adstudio.models.exceptions import (
    AdStudioException,
    CompletionException,
    ContractValidationException,
    EmptyCompletionException,
    NoTemplatesAvailableException,
    RecordNotFoundException,
    RenderException,
    ServiceNotConfiguredException,
    StorageException,
    TemplateNotFoundException,
    UnparseableResponseException,
    UnresolvedPlaceholderException,
    ValidationError,
    exception_to_http,
)


@pytest.mark.parametrize("exc,status", [
    (ValidationError("description", "No description provided"), 400),
    (NoTemplatesAvailableException(), 400),
    (UnresolvedPlaceholderException(["cta"]), 400),
    (CompletionException("Overloaded", status_code=529), 500),
    (EmptyCompletionException(), 500),
    (UnparseableResponseException(["direct: no"]), 500),
    (ContractValidationException("generation.json", ["[]: 'html' is a required property"]), 500),
    (TemplateNotFoundException("y", ["x"]), 500),
    (RenderException("Render failed", render_id="r1"), 500),
    (StorageException("put", key="a.png"), 500),
    (ServiceNotConfiguredException("Database", "DATABASE_URL"), 503),
    (RecordNotFoundException("Ad", "123"), 404),
    (AdStudioException("unknown"), 500),
])
def test_status_mapping(exc, status):
    assert exception_to_http(exc).status_code == status


def test_detail_is_flat():
    http = exception_to_http(ValidationError("imageBase64", "No image provided"))
    assert http.detail == {
        "error": "ValidationError",
        "message": "No image provided",
        "field": "imageBase64",
    }


def test_subclass_keeps_own_name():
    http = exception_to_http(EmptyCompletionException(model="m"))
    assert http.detail["error"] == "EmptyCompletionException"
    assert http.detail["model"] == "m"


def test_template_not_found_lists_candidates():
    detail = exception_to_http(TemplateNotFoundException("y", ["a", "b"])).detail
    assert detail["message"] == "Model chose nonexistent template"
    assert detail["template_id"] == "y"
    assert detail["candidates"] == ["a", "b"]


def test_completion_details():
    exc = CompletionException("Rate limited", status_code=429, model="m")
    assert exc.details == {"upstream_status": 429, "model": "m"}
    assert str(exc) == "Rate limited"
