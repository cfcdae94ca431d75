from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from ..core.dependencies import get_pipeline
from ..models.schemas import ReviewAdRequest, ReviewReportModel
from ..services.generation import AdPipeline
from ..services.placeholders import render

router = APIRouter(prefix="/api", tags=["Review"])


@router.post("/review-ad", response_model=ReviewReportModel)
async def review_ad(
    request: ReviewAdRequest = Body(...),
    pipeline: AdPipeline = Depends(get_pipeline),
):
    """
    Score an ad for performance on its channel.

    Unlike the self-review that follows generation, failures here are
    reported to the caller.
    """
    html = render(request.ad_html, request.fields) if request.fields else request.ad_html
    report = await pipeline.review_performance(html, request.channel, request.ad_size)
    return ReviewReportModel.from_report(report)
