"""Structured logging with security sanitization.

This module provides structured logging with JSON output for better
observability and log aggregation in production environments.
Includes security sanitization to prevent API keys leaking into logs.
"""

import logging
import re
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

from .config import settings

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
trace_id_var: ContextVar[Optional[str]] = ContextVar('trace_id', default=None)


class SecuritySanitizer:
    """Sanitize sensitive information from logs."""

    SENSITIVE_PATTERNS = {
        'api_key': re.compile(r'(api[_-]?key["\s:=]+["\']?)([a-zA-Z0-9_-]{20,})', re.IGNORECASE),
        'anthropic_key': re.compile(r'()(sk-ant-[a-zA-Z0-9_-]{10,})'),
        'bearer_token': re.compile(r'(bearer\s+)([a-zA-Z0-9_.-]{20,})', re.IGNORECASE),
        'secret': re.compile(r'(secret["\s:=]+["\']?)([a-zA-Z0-9_.-]{20,})', re.IGNORECASE),
        'authorization': re.compile(r'(authorization["\s:=]+["\']?)([a-zA-Z0-9_.-]{20,})', re.IGNORECASE),
    }
    SENSITIVE_KEYS = ('password', 'secret', 'token', 'api_key', 'auth')

    @classmethod
    def sanitize_string(cls, text: str) -> str:
        """Sanitize a string by redacting sensitive information."""
        if not isinstance(text, str):
            return str(text)

        sanitized = text
        for pattern in cls.SENSITIVE_PATTERNS.values():
            sanitized = pattern.sub(r'\1***REDACTED***', sanitized)
        return sanitized

    @classmethod
    def sanitize_dict(cls, data: Dict[str, Any], max_depth: int = 3) -> Dict[str, Any]:
        """Recursively sanitize a dictionary."""
        if max_depth <= 0:
            return {"...": "max_depth_reached"}

        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(sensitive in key_lower for sensitive in cls.SENSITIVE_KEYS):
                sanitized[key] = "***REDACTED***"
            else:
                sanitized[key] = cls.sanitize_value(value, max_depth - 1)
        return sanitized

    @classmethod
    def sanitize_list(cls, data: List[Any], max_depth: int = 3) -> List[Any]:
        """Sanitize a list by sanitizing its elements."""
        if max_depth <= 0:
            return ["...max_depth_reached"]

        sanitized = [cls.sanitize_value(item, max_depth - 1) for item in data[:10]]
        if len(data) > 10:
            sanitized.append(f"...and {len(data) - 10} more items")
        return sanitized

    @classmethod
    def sanitize_value(cls, value: Any, max_depth: int = 3) -> Any:
        if isinstance(value, dict):
            return cls.sanitize_dict(value, max_depth)
        if isinstance(value, list):
            return cls.sanitize_list(value, max_depth)
        if isinstance(value, str):
            return cls.sanitize_string(value)
        return value


class StructuredFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging."""

    EXCLUDED_KEYS = frozenset([
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'message', 'pathname', 'process', 'processName', 'relativeCreated',
        'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info', 'taskName',
    ])

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to log record with security sanitization."""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['service'] = settings.service_name
        log_record['environment'] = settings.service_env

        if request_id := request_id_var.get():
            log_record['request_id'] = request_id
        if trace_id := trace_id_var.get():
            log_record['trace_id'] = trace_id

        is_production = settings.is_production
        if record.exc_info and record.exc_info[0] is not None:
            exception_info = {
                'type': record.exc_info[0].__name__,
                'message': SecuritySanitizer.sanitize_string(str(record.exc_info[1])),
            }
            # Tracebacks only outside production
            if not is_production:
                exception_info['traceback'] = traceback.format_exception(*record.exc_info)
            log_record['exception'] = exception_info

        for key, value in record.__dict__.items():
            if key in self.EXCLUDED_KEYS:
                continue
            log_record[key] = SecuritySanitizer.sanitize_value(value) if is_production else value

        if is_production and isinstance(log_record.get('message'), str):
            log_record['message'] = SecuritySanitizer.sanitize_string(log_record['message'])


_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Install the JSON handler on the root logger once."""
    global _configured
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter('%(timestamp)s %(level)s %(name)s %(message)s'))
    root.addHandler(handler)

    # Keep client libraries quiet unless debugging
    for noisy in ("httpx", "httpcore", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    _configured = True


def log_external_call(logger: logging.Logger, service: str, operation: str, **kwargs):
    """Log external service call."""
    logger.info(
        f"External call to {service}: {operation}",
        extra={
            "external_service": service,
            "operation": operation,
            "event_type": "external_call",
            **kwargs,
        },
    )


def log_business_event(logger: logging.Logger, event: str, **kwargs):
    """Log business domain event."""
    logger.info(
        f"Business event: {event}",
        extra={"business_event": event, "event_type": "business", **kwargs},
    )
