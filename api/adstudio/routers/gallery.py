from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from ..models.results import AdColors
from ..models.schemas import (
    GalleryCreateRequest,
    GalleryItemModel,
    GalleryItemResponse,
    GalleryListResponse,
    GalleryUpdateRequest,
    SuccessResponse,
)
from ..services import gallery
from ..services.brand import BrandContext, get_brand_context

router = APIRouter(prefix="/api/gallery", tags=["Gallery"])


@router.get("", response_model=GalleryListResponse)
async def list_gallery(
    limit: int = Query(gallery.DEFAULT_LIMIT, ge=1, le=200),
    flavor: Optional[str] = Query(None),
):
    return GalleryListResponse(ads=[GalleryItemModel.model_validate(r) for r in gallery.list_ads(limit, flavor)])


@router.post("", response_model=GalleryItemResponse)
async def save_to_gallery(
    request: GalleryCreateRequest = Body(...),
    brand: BrandContext = Depends(get_brand_context),
):
    """Save an ad snapshot, with its exported PNG when one is sent."""
    defaults = brand.default_colors
    colors = AdColors(
        background=request.background_color or defaults.background,
        text=request.text_color or defaults.text,
        accent=request.accent_color or defaults.accent,
    )
    record = gallery.save_ad(
        request.html,
        request.fields,
        request.ad_width,
        request.ad_height,
        colors=colors,
        name=request.name,
        flavor=request.flavor,
        channel=request.channel,
        template_id=request.template_id,
        image_png=gallery.decode_png(request.image_base64),
    )
    return GalleryItemResponse(ad=GalleryItemModel.model_validate(record))


@router.get("/{ad_id}", response_model=GalleryItemResponse)
async def get_gallery_item(ad_id: str):
    return GalleryItemResponse(ad=GalleryItemModel.model_validate(gallery.get_ad(ad_id)))


@router.patch("/{ad_id}", response_model=GalleryItemResponse)
async def update_gallery_item(ad_id: str, request: GalleryUpdateRequest = Body(...)):
    colors = {
        key: value
        for key, value in (
            ("backgroundColor", request.background_color),
            ("textColor", request.text_color),
            ("accentColor", request.accent_color),
        )
        if value
    }
    record = gallery.update_ad(ad_id, name=request.name, html=request.html, fields=request.fields, colors=colors)
    return GalleryItemResponse(ad=GalleryItemModel.model_validate(record))


@router.delete("/{ad_id}", response_model=SuccessResponse)
async def delete_gallery_item(ad_id: str):
    gallery.delete_ad(ad_id)
    return SuccessResponse()
