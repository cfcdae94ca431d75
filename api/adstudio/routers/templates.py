from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from ..core.dependencies import get_render_client, get_template_selector
from ..models.exceptions import ValidationError
from ..models.schemas import (
    RenderItem,
    RenderMultiRequest,
    RenderMultiResponse,
    RenderRequest,
    RenderResponse,
    SyncError,
    TemplateAdRequest,
    TemplateAdResponse,
    TemplateListResponse,
    TemplateModel,
    TemplateSyncRequest,
    TemplateSyncResponse,
)
from ..services import template_catalog
from ..services.creatomate import RenderClient
from ..services.templates import TemplateSelector, generate_from_template

router = APIRouter(
    prefix="/api",
    tags=["Templates"],
    responses={
        400: {"description": "Missing input or no templates available"},
        500: {"description": "Selection or rendering failed"},
        503: {"description": "Rendering service or database not configured"},
    },
)


@router.post("/generate-template-ad", response_model=TemplateAdResponse)
async def generate_template_ad(
    request: TemplateAdRequest = Body(...),
    selector: TemplateSelector = Depends(get_template_selector),
    renderer: RenderClient = Depends(get_render_client),
):
    """
    Pick a mirrored template for the brief, fill its fields and render it.

    Templates of the requested size are preferred; any active template is a
    candidate when none match.
    """
    if not request.description:
        raise ValidationError("description", "No description provided")
    result = await generate_from_template(
        selector,
        renderer,
        template_catalog.active_templates(),
        request.ad_width,
        request.ad_height,
        request.description,
        flavor=request.flavor,
        channel=request.channel,
        output_format=request.output_format,
    )
    return TemplateAdResponse(
        render_url=result.render.url,
        template_id=result.selection.template_id,
        template_name=result.selection.template_name,
        modifications=result.selection.modifications,
        editable_fields=result.template.editable_fields,
        width=result.render.width or result.template.width,
        height=result.render.height or result.template.height,
        reasoning=result.selection.reasoning,
    )


@router.post("/render", response_model=RenderResponse)
async def render_template(
    request: RenderRequest = Body(...),
    renderer: RenderClient = Depends(get_render_client),
):
    if not request.template_id:
        raise ValidationError("templateId", "No templateId provided")
    renders = await renderer.render_template(request.template_id, request.modifications, request.output_format)
    first = renders[0]
    return RenderResponse(
        render_url=first.url,
        snapshot_url=first.snapshot_url,
        width=first.width,
        height=first.height,
    )


@router.post("/render-multi", response_model=RenderMultiResponse)
async def render_multi(
    request: RenderMultiRequest = Body(...),
    renderer: RenderClient = Depends(get_render_client),
):
    """Render every template tagged with any of ``tags``."""
    if not request.tags:
        raise ValidationError("tags", "Provide a non-empty tags array")
    renders = await renderer.render_by_tags(request.tags, request.modifications, request.output_format)
    if not renders:
        return RenderMultiResponse(renders=[], message="No templates matched the given tags")
    return RenderMultiResponse(
        renders=[
            RenderItem(
                url=r.url,
                width=r.width,
                height=r.height,
                template_id=r.template_id,
                template_name=r.template_name,
            )
            for r in renders
        ]
    )


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    category: Optional[str] = Query(None),
    width: Optional[int] = Query(None, ge=1),
    height: Optional[int] = Query(None, ge=1),
):
    rows = template_catalog.list_templates(category, width, height)
    return TemplateListResponse(templates=[TemplateModel.model_validate(r) for r in rows])


@router.post("/templates/sync", response_model=TemplateSyncResponse)
async def sync_templates(
    request: Optional[TemplateSyncRequest] = Body(None),
    renderer: RenderClient = Depends(get_render_client),
):
    """Mirror the provider's template list into the local catalogue."""
    manual = request.editable_fields if request else {}
    report = await template_catalog.sync_templates(renderer, manual)
    return TemplateSyncResponse(
        synced=report.synced,
        total=report.total,
        errors=[SyncError(template_id=e["templateId"], error=e["error"]) for e in report.errors],
        message=report.message,
    )
