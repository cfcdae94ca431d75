"""Local mirror of the rendering provider's template catalogue."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from ..core.structured_logging import log_business_event
from ..models.tables import RenderTemplate
from .db import db_session, get_engine
from .templates import TemplateDescriptor, infer_category, infer_editable_fields

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    synced: int = 0
    total: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    message: Optional[str] = None


def _row_values(tmpl: Dict[str, Any], manual_fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": tmpl.get("name") or "Untitled",
        "description": tmpl.get("description"),
        "category": infer_category(tmpl.get("name"), tmpl.get("tags")),
        "width": tmpl.get("width") or 1080,
        "height": tmpl.get("height") or 1080,
        "tags": list(tmpl.get("tags") or []),
        "editable_fields": manual_fields.get(tmpl["id"]) or infer_editable_fields(tmpl.get("source")),
        "preview_url": tmpl.get("preview_url") or tmpl.get("snapshot_url"),
        "is_active": True,
    }


async def sync_templates(client, manual_fields: Optional[Dict[str, Any]] = None) -> SyncReport:
    """Upsert one row per provider template; per-template failures are collected."""
    manual_fields = manual_fields or {}
    get_engine()
    templates = await client.list_templates()
    if not templates:
        return SyncReport(message="No templates found in the rendering account")

    report = SyncReport(total=len(templates))
    for tmpl in templates:
        template_id = str(tmpl.get("id") or "")
        try:
            if not template_id:
                raise ValueError("template has no id")
            values = _row_values({**tmpl, "id": template_id}, manual_fields)
            with db_session() as session:
                row = session.get(RenderTemplate, template_id)
                if row is None:
                    session.add(RenderTemplate(id=template_id, **values))
                else:
                    for key, value in values.items():
                        setattr(row, key, value)
            report.synced += 1
        except Exception as e:
            logger.warning(f"Failed to sync template {template_id}: {e}")
            report.errors.append({"templateId": template_id, "error": str(e)})

    log_business_event(logger, "templates_synced", synced=report.synced, total=report.total)
    return report


def list_templates(
    category: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> List[RenderTemplate]:
    """Active templates ordered by category then name."""
    stmt = select(RenderTemplate).where(RenderTemplate.is_active.is_(True))
    if category:
        stmt = stmt.where(RenderTemplate.category == category)
    if width:
        stmt = stmt.where(RenderTemplate.width == width)
    if height:
        stmt = stmt.where(RenderTemplate.height == height)
    stmt = stmt.order_by(RenderTemplate.category, RenderTemplate.name)
    with db_session() as session:
        return list(session.scalars(stmt))


def active_templates() -> List[TemplateDescriptor]:
    return [TemplateDescriptor.from_row(row) for row in list_templates()]
