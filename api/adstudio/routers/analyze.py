from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from ..core.dependencies import get_pipeline
from ..models.schemas import (
    AnalysisResponse,
    AnalyzeRequest,
    CopyResponse,
    CopyVariationModel,
    GenerateCopyRequest,
)
from ..services.anthropic import ImageInput
from ..services.generation import AdPipeline

router = APIRouter(prefix="/api", tags=["Creative"])


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_reference(
    request: AnalyzeRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    """Describe a reference ad's layout, palette and text hierarchy."""
    image = ImageInput(request.image_base64, request.media_type) if request.image_base64 else None
    analysis = await pipeline.analyze_reference(image)
    return AnalysisResponse(analysis=analysis.to_dict())


@router.post("/generate-copy", response_model=CopyResponse)
async def generate_copy(
    request: GenerateCopyRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    variations = await pipeline.generate_copy(
        flavor=request.flavor,
        sku=request.sku,
        channel=request.channel,
        tone=request.tone,
        user_prompt=request.user_prompt,
        reference_analysis=request.reference_analysis,
    )
    return CopyResponse(variations=[CopyVariationModel(**v.to_dict()) for v in variations])
