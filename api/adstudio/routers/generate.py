from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Body, Depends

from ..core.dependencies import get_brand_context, get_pipeline
from ..models.results import AdColors, GeneratedAd, Improvement
from ..models.schemas import (
    ApplyFixesRequest,
    EditRequest,
    GeneratedAdResponse,
    GenerationRequest,
    PreviewRequest,
    PreviewResponse,
    RecolorRequest,
    RecolorResponse,
    TokenizeRequest,
)
from ..services.assets import get_assets
from ..services.brand import BrandContext
from ..services.generation import AdPipeline
from ..services.placeholders import find_placeholders, missing_fields, render, replace_color
from ..services.prompt_builder import AssetReference

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api",
    tags=["Generation"],
    responses={
        400: {"description": "Missing required input"},
        500: {"description": "Completion failed or returned an unusable response"},
        503: {"description": "Completion service not configured"},
    },
)


def _assets_for(request: GenerationRequest) -> List[AssetReference]:
    return get_assets(request.asset_ids) if request.asset_ids else []


@router.post("/generate-ad", response_model=GeneratedAdResponse)
async def generate_ad(
    request: GenerationRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    """
    Generate an HTML ad from a free-text description.

    The markup comes back with ``{{placeholder}}`` tokens and the field values
    that fill them; an optional self-review pass may replace it.
    """
    result = await pipeline.generate(request, _assets_for(request))
    return GeneratedAdResponse.from_ad(result.ad, result.report, result.enhanced)


@router.post("/recreate", response_model=GeneratedAdResponse)
async def recreate_ad(
    request: GenerationRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    """Recreate a reference ad image as brand-styled HTML."""
    result = await pipeline.recreate(request, _assets_for(request))
    return GeneratedAdResponse.from_ad(result.ad, result.report, result.enhanced)


@router.post("/edit-ad", response_model=GeneratedAdResponse)
async def edit_ad(
    request: EditRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    ad = await pipeline.edit(request.current_html, request.instruction, request.ad_width, request.ad_height)
    return GeneratedAdResponse.from_ad(ad)


@router.post("/tokenize", response_model=GeneratedAdResponse)
async def tokenize_ad(
    request: TokenizeRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    """Rewrite literal ad text into placeholders plus extracted field values."""
    ad = await pipeline.tokenize(request.html)
    return GeneratedAdResponse.from_ad(ad)


@router.post("/apply-fixes", response_model=GeneratedAdResponse)
async def apply_fixes(
    request: ApplyFixesRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
    brand: BrandContext = Depends(get_brand_context),
):
    defaults = brand.default_colors
    current = GeneratedAd(
        html=request.html,
        fields={k: v or "" for k, v in request.fields.items()},
        colors=AdColors(
            background=request.background_color or defaults.background,
            text=request.text_color or defaults.text,
            accent=request.accent_color or defaults.accent,
        ),
    )
    improvements = [Improvement(i.issue, i.fix, i.priority) for i in request.improvements]
    ad = await pipeline.apply_fixes(current, improvements, request.ad_width, request.ad_height)
    return GeneratedAdResponse.from_ad(ad)


@router.post("/preview", response_model=PreviewResponse)
async def preview_ad(request: PreviewRequest = Body(...)):
    """Substitute field values into markup without calling the model."""
    html = render(request.html, request.fields, request.missing)
    return PreviewResponse(
        html=html,
        placeholders=find_placeholders(request.html),
        missing=missing_fields(request.html, request.fields),
    )


@router.post("/recolor", response_model=RecolorResponse)
async def recolor_ad(request: RecolorRequest = Body(...)):
    replaced = request.html.lower().count(request.old_color.lower())
    return RecolorResponse(
        html=replace_color(request.html, request.old_color, request.new_color),
        replaced=replaced,
    )
