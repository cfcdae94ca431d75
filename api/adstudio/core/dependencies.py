"""FastAPI dependencies shared by the routers.

Tests swap any of these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Request

from ..services.anthropic import CompletionClient
from ..services.brand import BrandContext, get_brand_context
from ..services.creatomate import RenderClient, get_render_client
from ..services.generation import AdPipeline
from ..services.langfuse import Trace
from ..services.templates import TemplateSelector


async def get_trace(request: Request) -> AsyncIterator[Trace]:
    """One trace per request, flushed once the response is produced."""
    trace = Trace(request.url.path.strip("/").replace("/", ".") or "root")
    try:
        yield trace
    finally:
        await trace.flush()


def get_completion_client(trace: Trace = Depends(get_trace)) -> CompletionClient:
    return CompletionClient(trace=trace)


def get_pipeline(
    client: CompletionClient = Depends(get_completion_client),
    brand: BrandContext = Depends(get_brand_context),
    trace: Trace = Depends(get_trace),
) -> AdPipeline:
    return AdPipeline(client, brand, trace)


def get_template_selector(
    client: CompletionClient = Depends(get_completion_client),
    brand: BrandContext = Depends(get_brand_context),
    trace: Trace = Depends(get_trace),
) -> TemplateSelector:
    return TemplateSelector(client, brand, trace)


__all__ = [
    "RenderClient",
    "get_brand_context",
    "get_completion_client",
    "get_pipeline",
    "get_render_client",
    "get_template_selector",
    "get_trace",
]
