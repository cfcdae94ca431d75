"""Gallery of saved ad snapshots with an optional exported PNG."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Dict, List, Optional

from sqlalchemy import select

from ..core.structured_logging import log_business_event
from ..models.exceptions import RecordNotFoundException, ValidationError
from ..models.results import AdColors
from ..models.tables import GeneratedAdRecord
from . import storage_adapter
from .db import db_session, get_engine

logger = logging.getLogger(__name__)

GALLERY_PREFIX = "gallery"
DEFAULT_LIMIT = 50


def decode_png(image_base64: Optional[str]) -> Optional[bytes]:
    """Decode an exported image, tolerating a ``data:`` URL prefix."""
    if not image_base64:
        return None
    payload = image_base64.split(",", 1)[1] if image_base64.startswith("data:") else image_base64
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("imageBase64", "Image is not valid base64") from e


def _copy_columns(fields: Dict[str, str]) -> Dict[str, str]:
    return {
        "headline": fields.get("headline") or "",
        "subheadline": fields.get("subheadline") or "",
        "body_copy": fields.get("body") or fields.get("description") or "",
        "cta_text": fields.get("cta") or "",
    }


def _default_name(fields: Dict[str, str]) -> str:
    if fields.get("headline"):
        return fields["headline"]
    first = next((v for v in fields.values() if v), None)
    return first or "Untitled Ad"


def _clean(fields: Optional[Dict[str, Optional[str]]]) -> Dict[str, str]:
    return {k: "" if v is None else str(v) for k, v in (fields or {}).items()}


def save_ad(
    html: str,
    fields: Optional[Dict[str, Optional[str]]],
    width: int,
    height: int,
    colors: Optional[AdColors] = None,
    name: Optional[str] = None,
    flavor: Optional[str] = None,
    channel: Optional[str] = None,
    template_id: str = "ai-generated",
    image_png: Optional[bytes] = None,
) -> GeneratedAdRecord:
    if not html:
        raise ValidationError("html", "No HTML provided")
    get_engine()

    clean = _clean(fields)
    record = GeneratedAdRecord(
        name=name or _default_name(clean),
        ad_size=f"{width}x{height}",
        template_id=template_id,
        html=html,
        fields=clean,
        colors=colors.to_dict() if colors else {},
        flavor=flavor,
        channel=channel,
        **_copy_columns(clean),
    )

    if image_png:
        key = storage_adapter.make_key(GALLERY_PREFIX, f"{record.name[:40]}.png")
        storage_adapter.put_object(key, image_png, "image/png")
        record.output_storage_path = key
        record.output_image_url = storage_adapter.public_url(key)

    try:
        with db_session() as session:
            session.add(record)
    except Exception:
        if record.output_storage_path:
            storage_adapter.delete_object(record.output_storage_path)
        raise

    log_business_event(logger, "ad_saved", ad_id=record.id, ad_size=record.ad_size, exported=bool(image_png))
    return record


def list_ads(limit: int = DEFAULT_LIMIT, flavor: Optional[str] = None) -> List[GeneratedAdRecord]:
    stmt = select(GeneratedAdRecord)
    if flavor:
        stmt = stmt.where(GeneratedAdRecord.flavor == flavor)
    stmt = stmt.order_by(GeneratedAdRecord.created_at.desc()).limit(limit)
    with db_session() as session:
        return list(session.scalars(stmt))


def get_ad(ad_id: str) -> GeneratedAdRecord:
    with db_session() as session:
        record = session.get(GeneratedAdRecord, ad_id)
    if record is None:
        raise RecordNotFoundException("Ad", ad_id)
    return record


def update_ad(
    ad_id: str,
    name: Optional[str] = None,
    html: Optional[str] = None,
    fields: Optional[Dict[str, Optional[str]]] = None,
    colors: Optional[Dict[str, str]] = None,
) -> GeneratedAdRecord:
    with db_session() as session:
        record = session.get(GeneratedAdRecord, ad_id)
        if record is None:
            raise RecordNotFoundException("Ad", ad_id)
        if name is not None:
            record.name = name
        if html is not None:
            record.html = html
        if fields is not None:
            clean = _clean(fields)
            record.fields = clean
            for column, value in _copy_columns(clean).items():
                setattr(record, column, value)
        if colors:
            record.colors = {**(record.colors or {}), **colors}
    return record


def delete_ad(ad_id: str) -> None:
    with db_session() as session:
        record = session.get(GeneratedAdRecord, ad_id)
        if record is None:
            raise RecordNotFoundException("Ad", ad_id)
        storage_path = record.output_storage_path
        session.delete(record)
    if storage_path:
        storage_adapter.delete_object(storage_path)
    log_business_event(logger, "ad_deleted", ad_id=ad_id)
