from __future__ import annotations

import re
import time

from ..core.config import settings

# Lazy import backends

def _backend():
    if settings.storage_backend == "local":
        from . import storage_local as backend
        return backend
    if settings.storage_backend == "s3" or (settings.storage_backend == "auto" and settings.r2_access_key_id):
        from . import storage_r2 as backend
        return backend
    # Prefer local when R2 creds are missing
    from . import storage_local as backend
    return backend


def backend_name() -> str:
    return _backend().__name__.rsplit(".", 1)[-1].replace("storage_", "")


def put_object(key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
    return _backend().put_object(key, data, content_type)


def delete_object(key: str) -> bool:
    return _backend().delete_object(key)


def public_url(key: str) -> str:
    return _backend().public_url(key)


_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str | None, default: str = "upload.bin") -> str:
    name = (filename or "").rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    name = _UNSAFE.sub("-", name).strip("-.")
    return name or default


def make_key(prefix: str, filename: str | None) -> str:
    """``<prefix>/<millis>-<filename>`` with the filename sanitised."""
    return f"{_UNSAFE.sub('-', prefix).strip('-') or 'other'}/{int(time.time() * 1000)}-{safe_filename(filename)}"
