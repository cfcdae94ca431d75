"""Request size limiting middleware.

Reference images arrive base64-encoded in JSON bodies, so the limit sits well
above a typical API payload.
"""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose Content-Length exceeds ``max_size`` before reading the body."""

    def __init__(self, app: ASGIApp, max_size: int = 20 * 1024 * 1024):
        super().__init__(app)
        self.max_size = max_size
        self.max_size_mb = max_size / (1024 * 1024)

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"error": "InvalidRequest", "message": "Invalid Content-Length header"},
                )
            if size > self.max_size:
                logger.warning(
                    f"Request size {size} bytes exceeds limit {self.max_size} bytes",
                    extra={"content_length": size, "max_size": self.max_size, "path": request.url.path},
                )
                return JSONResponse(
                    status_code=413,
                    content={
                        "error": "PayloadTooLarge",
                        "message": f"Request body too large. Maximum size is {self.max_size_mb:.1f}MB",
                        "max_size_bytes": self.max_size,
                    },
                )
        return await call_next(request)
