from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..services.ad_sizes import AD_SIZES
from ..services.brand import BrandContext, get_brand_context

router = APIRouter(prefix="/api", tags=["Reference data"])


@router.get("/ad-sizes")
async def list_ad_sizes() -> Dict[str, Any]:
    return {"sizes": [size.to_dict() for size in AD_SIZES]}


@router.get("/brand")
async def brand_context(brand: BrandContext = Depends(get_brand_context)) -> Dict[str, Any]:
    """The brand context injected into every prompt."""
    return brand.to_dict()
