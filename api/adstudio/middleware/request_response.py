"""Request/Response middleware for consistent API behavior.

Assigns every request an id, times it, logs it, and turns anything the
exception handlers did not catch into a JSON 500.
"""

from __future__ import annotations

import time
import logging
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..core.structured_logging import request_id_var

logger = logging.getLogger(__name__)


class RequestResponseMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent request/response handling."""

    def __init__(self, app: ASGIApp, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.time()

        if self.log_requests:
            logger.info(
                f"{request.method} {request.url.path}",
                extra={"method": request.method, "path": request.url.path, "query": str(request.query_params)},
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Unhandled exception in request processing",
                extra={"method": request.method, "path": request.url.path, "error": str(e)},
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content={"error": "InternalServerError", "message": "Internal server error"},
            )
        finally:
            request_id_var.reset(token)

        processing_time_ms = int((time.time() - start_time) * 1000)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time_ms}ms"

        if self.log_requests:
            level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time_ms": processing_time_ms,
                },
            )
        return response
