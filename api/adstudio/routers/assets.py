from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, File, Form, Query, UploadFile

from ..models.exceptions import ValidationError
from ..models.schemas import (
    AssetDeleteRequest,
    AssetListResponse,
    AssetModel,
    AssetResponse,
    AssetUpdateRequest,
    SuccessResponse,
)
from ..services import assets

router = APIRouter(prefix="/api", tags=["Brand assets"])

MAX_ASSET_BYTES = 15 * 1024 * 1024


@router.get("/brand-assets", response_model=AssetListResponse)
async def list_brand_assets(category: Optional[str] = Query(None)):
    return AssetListResponse(assets=[AssetModel.model_validate(a) for a in assets.list_assets(category)])


@router.post("/brand-assets", response_model=AssetResponse)
async def upload_brand_asset(
    file: Optional[UploadFile] = File(None),
    category: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    flavor: Optional[str] = Form(None),
    sku: Optional[str] = Form(None),
):
    """Store an uploaded file and register it in the asset library."""
    if file is None:
        raise ValidationError("file", "No file provided")
    content = await file.read()
    if len(content) > MAX_ASSET_BYTES:
        raise ValidationError("file", f"File exceeds {MAX_ASSET_BYTES // (1024 * 1024)}MB limit", len(content))
    asset = assets.upload_asset(
        content,
        file.filename,
        content_type=file.content_type,
        category=category,
        name=name or file.filename,
        flavor=flavor,
        sku=sku,
    )
    return AssetResponse(asset=AssetModel.model_validate(asset))


@router.patch("/brand-assets", response_model=AssetResponse)
async def update_brand_asset(request: AssetUpdateRequest = Body(...)):
    asset = assets.update_asset(request.id, name=request.name, category=request.category)
    return AssetResponse(asset=AssetModel.model_validate(asset))


@router.delete("/brand-assets", response_model=SuccessResponse)
async def delete_brand_asset(request: AssetDeleteRequest = Body(...)):
    assets.delete_asset(request.id)
    return SuccessResponse()
