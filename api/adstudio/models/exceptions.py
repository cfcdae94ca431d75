"""Custom exception classes for the Ad Studio API.

This module defines specific exception types for different error scenarios,
providing better error handling and more informative responses to clients.
Each exception maps to an HTTP status through ``EXCEPTION_HANDLERS``.
"""

from typing import Dict, Any, Optional, List
from fastapi import HTTPException


class AdStudioException(Exception):
    """Base exception for all Ad Studio API errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AdStudioException):
    """Raised when a required business field is missing or invalid."""

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.value = value
        details = {"field": field}
        if value is not None:
            details["value"] = value
        super().__init__(message, details)


class CompletionException(AdStudioException):
    """Raised when the completion service call fails."""

    def __init__(self,
                 message: str,
                 status_code: Optional[int] = None,
                 model: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.model = model
        completion_details = details or {}
        if status_code:
            completion_details["upstream_status"] = status_code
        if model:
            completion_details["model"] = model
        super().__init__(message, completion_details)


class EmptyCompletionException(CompletionException):
    """Raised when the completion has no text segment at all."""

    def __init__(self, model: Optional[str] = None):
        super().__init__("Completion returned no text content", model=model)


class UnparseableResponseException(AdStudioException):
    """Raised when no extraction strategy yields a JSON object."""

    def __init__(self, reasons: Optional[List[str]] = None, preview: Optional[str] = None):
        self.reasons = reasons or []
        details: Dict[str, Any] = {"strategies": self.reasons}
        if preview:
            details["preview"] = preview
        super().__init__("Failed to parse structured response from model", details)


class ContractValidationException(AdStudioException):
    """Raised when a structured response fails its JSON Schema contract."""

    def __init__(self, contract_name: str, errors: List[str]):
        self.contract_name = contract_name
        self.validation_errors = errors
        message = f"Response failed contract {contract_name}"
        details = {"contract": contract_name, "validation_errors": errors}
        super().__init__(message, details)


class NoTemplatesAvailableException(AdStudioException):
    """Raised when the mirrored template catalogue has no active entries."""

    def __init__(self):
        super().__init__("No templates available. Sync templates first.")


class TemplateNotFoundException(AdStudioException):
    """Raised when the model chose a template outside the candidate set."""

    def __init__(self, template_id: str, candidates: Optional[List[str]] = None):
        self.template_id = template_id
        details: Dict[str, Any] = {"template_id": template_id}
        if candidates is not None:
            details["candidates"] = candidates
        super().__init__("Model chose nonexistent template", details)


class UnresolvedPlaceholderException(AdStudioException):
    """Raised by strict rendering when placeholders have no field value."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(
            f"Unresolved placeholders: {', '.join(missing)}",
            {"missing": missing},
        )


class RenderException(AdStudioException):
    """Raised when the rendering service call or a render job fails."""

    def __init__(self,
                 message: str,
                 render_id: Optional[str] = None,
                 status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.render_id = render_id
        self.status_code = status_code
        render_details = details or {}
        if render_id:
            render_details["render_id"] = render_id
        if status_code:
            render_details["upstream_status"] = status_code
        super().__init__(message, render_details)


class StorageException(AdStudioException):
    """Raised when storage operations fail."""

    def __init__(self,
                 operation: str,
                 key: Optional[str] = None,
                 storage_backend: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        self.key = key
        self.storage_backend = storage_backend
        message = f"Storage {operation} failed"
        storage_details = details or {}
        if key:
            storage_details["key"] = key
        if storage_backend:
            storage_details["backend"] = storage_backend
        super().__init__(message, storage_details)


class ServiceNotConfiguredException(AdStudioException):
    """Raised when a required backing service has no credentials."""

    def __init__(self, service: str, setting: Optional[str] = None):
        self.service = service
        details = {"service": service}
        if setting:
            details["setting"] = setting
        super().__init__(f"{service} is not configured", details)


class RecordNotFoundException(AdStudioException):
    """Raised when a persisted record does not exist."""

    def __init__(self, resource: str, record_id: str):
        self.resource = resource
        self.record_id = record_id
        super().__init__(
            f"{resource} {record_id} not found",
            {"resource": resource, "id": record_id},
        )


# HTTP Exception converters for FastAPI
def to_http_exception(exc: AdStudioException, status_code: int = 500) -> HTTPException:
    """Convert custom exception to HTTPException for FastAPI."""
    detail = {
        "error": exc.__class__.__name__,
        "message": exc.message,
        **exc.details
    }
    return HTTPException(status_code=status_code, detail=detail)


def validation_to_http_exception(exc: AdStudioException) -> HTTPException:
    """Convert input validation failures to HTTP 400."""
    return to_http_exception(exc, status_code=400)


def upstream_to_http_exception(exc: AdStudioException) -> HTTPException:
    """Convert upstream and parse failures to HTTP 500."""
    return to_http_exception(exc, status_code=500)


def not_configured_to_http_exception(exc: ServiceNotConfiguredException) -> HTTPException:
    """Convert missing configuration to HTTP 503."""
    return to_http_exception(exc, status_code=503)


def not_found_to_http_exception(exc: RecordNotFoundException) -> HTTPException:
    """Convert missing records to HTTP 404."""
    return to_http_exception(exc, status_code=404)


# Exception handler registry; subclasses first so lookup by MRO stays exact
EXCEPTION_HANDLERS = {
    ValidationError: validation_to_http_exception,
    NoTemplatesAvailableException: validation_to_http_exception,
    UnresolvedPlaceholderException: validation_to_http_exception,
    EmptyCompletionException: upstream_to_http_exception,
    CompletionException: upstream_to_http_exception,
    UnparseableResponseException: upstream_to_http_exception,
    ContractValidationException: upstream_to_http_exception,
    TemplateNotFoundException: upstream_to_http_exception,
    RenderException: upstream_to_http_exception,
    StorageException: upstream_to_http_exception,
    ServiceNotConfiguredException: not_configured_to_http_exception,
    RecordNotFoundException: not_found_to_http_exception,
}


def exception_to_http(exc: AdStudioException) -> HTTPException:
    """Resolve the converter for ``exc`` walking its class hierarchy."""
    for klass in type(exc).__mro__:
        converter = EXCEPTION_HANDLERS.get(klass)
        if converter is not None:
            return converter(exc)
    return to_http_exception(exc)
