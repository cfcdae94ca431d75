"""Brand asset library: stored files plus a ``brand_assets`` row each."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import select

from ..core.structured_logging import log_business_event
from ..models.exceptions import RecordNotFoundException, ValidationError
from ..models.tables import BrandAsset
from . import storage_adapter
from .db import db_session, get_engine
from .prompt_builder import AssetReference

logger = logging.getLogger(__name__)


def upload_asset(
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
    category: Optional[str] = None,
    name: Optional[str] = None,
    flavor: Optional[str] = None,
    sku: Optional[str] = None,
) -> BrandAsset:
    if not data:
        raise ValidationError("file", "No file provided")
    # Fail on an unconfigured database before anything is written to storage
    get_engine()

    category = category or "other"
    file_name = storage_adapter.safe_filename(filename)
    key = storage_adapter.make_key(category, file_name)
    storage_adapter.put_object(key, data, content_type or "application/octet-stream")

    asset = BrandAsset(
        category=category,
        name=name or file_name,
        file_name=file_name,
        storage_path=key,
        public_url=storage_adapter.public_url(key),
        mime_type=content_type,
        tags=[],
        sku=sku or None,
        flavor=flavor or None,
    )
    try:
        with db_session() as session:
            session.add(asset)
    except Exception:
        storage_adapter.delete_object(key)
        raise

    log_business_event(logger, "asset_uploaded", asset_id=asset.id, category=category, size=len(data))
    return asset


def list_assets(category: Optional[str] = None) -> List[BrandAsset]:
    """Active assets, newest first."""
    stmt = select(BrandAsset).where(BrandAsset.is_active.is_(True))
    if category:
        stmt = stmt.where(BrandAsset.category == category)
    stmt = stmt.order_by(BrandAsset.created_at.desc())
    with db_session() as session:
        return list(session.scalars(stmt))


def update_asset(asset_id: Optional[str], name: Optional[str] = None, category: Optional[str] = None) -> BrandAsset:
    if not asset_id:
        raise ValidationError("id", "No asset ID provided")
    updates = {k: v for k, v in (("name", name), ("category", category)) if v is not None}
    if not updates:
        raise ValidationError("id", "Nothing to update", asset_id)

    with db_session() as session:
        asset = session.get(BrandAsset, asset_id)
        if asset is None:
            raise RecordNotFoundException("Asset", asset_id)
        for key, value in updates.items():
            setattr(asset, key, value)
    return asset


def delete_asset(asset_id: Optional[str]) -> None:
    """Delete the row and its stored object."""
    if not asset_id:
        raise ValidationError("id", "No asset ID provided")
    with db_session() as session:
        asset = session.get(BrandAsset, asset_id)
        if asset is None:
            raise RecordNotFoundException("Asset", asset_id)
        storage_path = asset.storage_path
        session.delete(asset)

    if storage_path and not storage_adapter.delete_object(storage_path):
        logger.warning(f"Stored object {storage_path} for asset {asset_id} was already gone")
    log_business_event(logger, "asset_deleted", asset_id=asset_id)


def get_assets(asset_ids: Sequence[str]) -> List[AssetReference]:
    """Prompt references for the given ids; unknown ids are skipped."""
    if not asset_ids:
        return []
    stmt = select(BrandAsset).where(BrandAsset.id.in_(list(asset_ids)))
    with db_session() as session:
        found = {a.id: a for a in session.scalars(stmt)}
    missing = [i for i in asset_ids if i not in found]
    if missing:
        logger.warning(f"Ignoring unknown asset ids: {missing}")
    return [
        AssetReference(name=found[i].name, category=found[i].category, url=found[i].public_url)
        for i in asset_ids
        if i in found
    ]
