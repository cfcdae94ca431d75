from __future__ import annotations

import pathlib

from ..core.config import settings
from ..models.exceptions import StorageException


def _path(key: str) -> pathlib.Path:
    base = pathlib.Path(settings.local_storage_dir).resolve()
    dest = (base / key).resolve()
    if base not in dest.parents:
        raise StorageException("resolve", key=key, storage_backend="local")
    return dest


def put_object(key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
    dest = _path(key)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(dest, "wb") as f:
            f.write(data)
    except OSError as e:
        raise StorageException("put", key=key, storage_backend="local", details={"reason": str(e)}) from e


def delete_object(key: str) -> bool:
    target = _path(key)
    if not target.exists():
        return False
    target.unlink()
    return True


def public_url(key: str) -> str:
    # Local dev: serve via /static/ route
    return f"{settings.service_base_url}/static/{key}"
