"""
Template selection for the catalogue-based ad flow.

The model picks one template from the size-filtered catalogue and fills its
editable fields; the choice is checked against that same filtered set before
anything is sent to the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.structured_logging import log_business_event
from ..models.exceptions import NoTemplatesAvailableException, TemplateNotFoundException, ValidationError
from ..models.results import TemplateSelection
from .brand import BrandContext
from .creatomate import Render
from .extraction import parse_json_response
from .guardrails import validate_contract
from .langfuse import Trace
from .prompt_builder import build_template_selection_prompt

logger = logging.getLogger(__name__)

TEMPLATE_SELECTION_MAX_TOKENS = 2000

# Keyword groups checked in order; first hit wins
CATEGORY_KEYWORDS = (
    ("hero-product", ("hero", "product")),
    ("lifestyle-overlay", ("lifestyle", "overlay")),
    ("split-layout", ("split",)),
    ("bold-typography", ("bold", "typo")),
    ("grid", ("grid",)),
    ("collage", ("collage",)),
    ("promo", ("promo", "sale")),
)


@dataclass(frozen=True)
class TemplateDescriptor:
    id: str
    name: str
    width: int
    height: int
    editable_fields: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    description: Optional[str] = None
    category: str = "other"
    tags: Sequence[str] = ()
    preview_url: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row) -> "TemplateDescriptor":
        return cls(
            id=row.id,
            name=row.name,
            width=row.width,
            height=row.height,
            editable_fields=dict(row.editable_fields or {}),
            description=row.description,
            category=row.category,
            tags=tuple(row.tags or ()),
            preview_url=row.preview_url,
            is_active=row.is_active,
        )


@dataclass(frozen=True)
class TemplateAd:
    selection: TemplateSelection
    template: TemplateDescriptor
    render: Render


def filter_catalog(
    catalog: Iterable[TemplateDescriptor], width: int, height: int
) -> List[TemplateDescriptor]:
    """Exact size matches, else the whole active catalogue."""
    active = [t for t in catalog if t.is_active]
    exact = [t for t in active if t.width == width and t.height == height]
    candidates = exact or active
    if not candidates:
        raise NoTemplatesAvailableException()
    return candidates


def complete_modifications(
    template: TemplateDescriptor, modifications: Dict[str, Any]
) -> Dict[str, Any]:
    """Cover every declared editable field; the model's values win."""
    completed = {name: spec.get("default") for name, spec in template.editable_fields.items()}
    completed.update(modifications)
    return completed


class TemplateSelector:
    def __init__(self, client, brand: BrandContext, trace: Optional[Trace] = None):
        self.client = client
        self.brand = brand
        self.trace = trace or Trace("template_selection")

    async def select(
        self,
        catalog: Sequence[TemplateDescriptor],
        width: int,
        height: int,
        brief: str,
        flavor: Optional[str] = None,
        channel: Optional[str] = None,
    ) -> TemplateSelection:
        if not brief:
            raise ValidationError("description", "No description provided")
        candidates = filter_catalog(catalog, width, height)

        with self.trace.span("template_selection", {"candidates": len(candidates)}):
            text = await self.client.complete(
                build_template_selection_prompt(brief, candidates, self.brand, flavor, channel),
                task="template_selection",
                max_tokens=TEMPLATE_SELECTION_MAX_TOKENS,
            )
            payload = parse_json_response(text)
            validate_contract("template_selection.json", payload)

        by_id = {t.id: t for t in candidates}
        chosen = by_id.get(payload["templateId"])
        if chosen is None:
            logger.warning(f"Model chose template {payload['templateId']} outside the candidate set")
            raise TemplateNotFoundException(payload["templateId"], sorted(by_id))

        return TemplateSelection(
            template_id=chosen.id,
            modifications=complete_modifications(chosen, payload["modifications"]),
            template_name=payload.get("templateName") or chosen.name,
            reasoning=payload.get("reasoning"),
        )


async def generate_from_template(
    selector: TemplateSelector,
    renderer,
    catalog: Sequence[TemplateDescriptor],
    width: int,
    height: int,
    brief: str,
    flavor: Optional[str] = None,
    channel: Optional[str] = None,
    output_format: str = "png",
) -> TemplateAd:
    """Select a template, fill it, and render it."""
    selection = await selector.select(catalog, width, height, brief, flavor, channel)
    renders = await renderer.render_template(selection.template_id, selection.modifications, output_format)
    template = next(t for t in catalog if t.id == selection.template_id)
    log_business_event(logger, "template_ad_rendered", template_id=template.id, renders=len(renders))
    return TemplateAd(selection=selection, template=template, render=renders[0])


def infer_editable_fields(source: Any) -> Dict[str, Dict[str, Any]]:
    """Named text, image and shape elements of a provider element tree."""
    fields: Dict[str, Dict[str, Any]] = {}

    def walk(node: Any) -> None:
        if not isinstance(node, dict):
            return
        name = node.get("name")
        if name:
            kind = node.get("type")
            if kind == "text" or "text" in node:
                fields[name] = {"type": "text", "default": node.get("text") or ""}
            elif kind in ("image", "video") or "source" in node:
                fields[name] = {"type": "image", "default": node.get("source") or None}
            elif kind == "shape" or "fill_color" in node:
                fields[name] = {
                    "type": "color",
                    "property": "fill_color",
                    "default": node.get("fill_color") or None,
                }
        for child in node.get("elements") or ():
            walk(child)

    for root in source if isinstance(source, list) else [source]:
        walk(root)
    return fields


def infer_category(name: Optional[str], tags: Optional[Sequence[str]] = None) -> str:
    combined = f"{(name or '').lower()} {' '.join(tags or ()).lower()}"
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in combined for k in keywords):
            return category
    return "other"
