import time
import logging
from typing import Any, Dict

from fastapi import APIRouter
from sqlalchemy import text

from ..core.config import settings
from ..services import db, storage_adapter
from ..services.anthropic import health_check as completion_health

logger = logging.getLogger(__name__)
router = APIRouter()

_start_time = time.time()


def _database_status() -> str:
    if not db.is_configured():
        return "not_configured"
    try:
        with db.db_session() as session:
            session.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return "error"


@router.get("/healthz")
async def health() -> Dict[str, Any]:
    """Configuration and dependency status; never fails the request itself."""
    completion_ok = await completion_health()
    database = _database_status()
    services = {
        "completion": "ok" if completion_ok else "not_configured",
        "rendering": "ok" if settings.creatomate_api_key else "not_configured",
        "database": database,
        "storage": storage_adapter.backend_name(),
    }
    ok = completion_ok and database != "error"
    return {
        "ok": ok,
        "status": "healthy" if ok else "degraded",
        "env": settings.service_env,
        "uptime_seconds": int(time.time() - _start_time),
        "services": services,
    }
