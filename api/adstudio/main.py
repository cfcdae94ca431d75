import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.structured_logging import setup_logging
from .middleware.request_response import RequestResponseMiddleware
from .middleware.request_size_limit import RequestSizeLimitMiddleware
from .models.exceptions import AdStudioException, exception_to_http
from .routers import analyze, assets, gallery, generate, health, meta, review, templates
from .services import db

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan handler replacing deprecated on_event hooks."""
    if db.is_configured():
        try:
            db.create_tables()
        except Exception as e:
            logger.error(f"Database initialisation failed: {e}")
    else:
        logger.warning("DATABASE_URL not set; asset, gallery and template endpoints will return 503")
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; generation endpoints will return 503")

    yield

    db.reset_engine()
    logger.info("Shutdown completed")


app = FastAPI(
    title=settings.service_name,
    description="Ad Studio API - brand-aware ad generation, review and rendering",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)

origins = [o.strip() for o in (settings.cors_allow_origins or "").split(",") if o.strip()]
if not origins:
    # Wildcard in dev; restrict in production
    origins = [] if settings.is_production else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

# Added last so it wraps everything and sees every response
app.add_middleware(RequestResponseMiddleware)


@app.exception_handler(AdStudioException)
async def adstudio_exception_handler(request: Request, exc: AdStudioException):
    """Map domain exceptions to their HTTP status."""
    http_exc = exception_to_http(exc)
    log = logger.warning if http_exc.status_code < 500 else logger.error
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={"path": request.url.path, "status_code": http_exc.status_code, "details": exc.details},
    )
    return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing input is a 400, like every other input failure."""
    errors = [
        {"field": ".".join(str(p) for p in e.get("loc", ()) if p != "body"), "message": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "ValidationError", "message": "Invalid request", "errors": errors},
    )


app.include_router(generate.router)
app.include_router(review.router)
app.include_router(analyze.router)
app.include_router(templates.router)
app.include_router(assets.router)
app.include_router(gallery.router)
app.include_router(meta.router)
app.include_router(health.router)

# Static serving for local storage
os.makedirs(settings.local_storage_dir, exist_ok=True)
app.mount("/static", StaticFiles(directory=settings.local_storage_dir), name="static")
