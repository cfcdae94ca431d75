"""
Prompt construction for every completion pass.

Each builder is a pure function of its inputs and the injected brand
context. User free text is included verbatim; optional inputs that are absent
omit their line entirely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .brand import BrandContext
from .prompts import (
    COPY_GUIDELINES,
    COPY_SHAPE,
    EDIT_RULES,
    HTML_RULES,
    JSON_ONLY,
    PERFORMANCE_CHECKLIST,
    PERFORMANCE_REVIEW_SHAPE,
    REVIEW_DIMENSIONS,
    TEMPLATE_SELECTION_INSTRUCTIONS,
    TEMPLATE_SELECTION_SHAPE,
    TOKENIZE_RULES,
)


@dataclass(frozen=True)
class AssetReference:
    name: str
    category: str
    url: str


def _lines(*parts: Optional[str]) -> str:
    """Join parts with newlines, skipping omitted (None) ones."""
    return "\n".join(p for p in parts if p is not None)


def _result_shape(width: int, height: int) -> str:
    return (
        '{"html": "<div style=\'width:%dpx;height:%dpx;...\'>...</div>", '
        '"fields": {"token": "value"}, '
        '"backgroundColor": "#hex", "textColor": "#hex", "accentColor": "#hex"}' % (width, height)
    )


def _brand_header(brand: BrandContext) -> str:
    return _lines(
        f"BRAND: {brand.name} | {brand.tagline} | {brand.website}",
        f"VOICE: {', '.join(brand.voice_qualities)}" if brand.voice_qualities else None,
        f"BRAND COLORS: {brand.color_list()}",
        f'BRAND FONTS: "{brand.headline_font}" for headlines, "{brand.body_font}" for body.',
        f"IMPORTANT: {brand.positioning_note}" if brand.positioning_note else None,
    )


def _product_line(brand: BrandContext, flavor: Optional[str]) -> Optional[str]:
    product = brand.find_product(flavor=flavor) if flavor else None
    if product is None:
        return None
    return f"PRODUCT: {product.name}, {product.key_benefit} ({product.protein} protein, {product.calories} cal)"


def _channel_line(brand: BrandContext, channel: Optional[str]) -> Optional[str]:
    if not channel:
        return None
    info = brand.channel(channel)
    return f"CHANNEL: {channel} | emphasis: {info.emphasis} | CTA idea: {info.cta}"


def _assets_block(assets: Sequence[AssetReference]) -> Optional[str]:
    if not assets:
        return None
    rows = [f"- {a.name} ({a.category}): {a.url}" for a in assets]
    return "BRAND ASSETS (use these exact URLs in <img> tags where they fit):\n" + "\n".join(rows)


def build_generation_prompt(request, brand: BrandContext, assets: Sequence[AssetReference] = ()) -> str:
    """HTML ad from a free-text description."""
    width, height = request.ad_width, request.ad_height
    return _lines(
        f"You are a top creative director designing a {width}x{height}px HTML ad for {brand.full_name}.",
        "",
        _brand_header(brand),
        _product_line(brand, request.flavor),
        _channel_line(brand, request.channel),
        _assets_block(assets),
        "",
        f'AD BRIEF: "{request.description}"',
        f'User notes: "{request.user_notes}"' if request.user_notes else None,
        "",
        f"Output exactly {width}x{height}px.",
        HTML_RULES,
        "",
        COPY_GUIDELINES,
        "",
        JSON_ONLY,
        _result_shape(width, height),
    )


def build_recreate_prompt(request, brand: BrandContext, assets: Sequence[AssetReference] = ()) -> str:
    """HTML ad recreating an attached reference image in the brand's identity."""
    width, height = request.ad_width, request.ad_height
    flavors = ", ".join(brand.flavors())
    return _lines(
        f"Look at this reference ad. Recreate it as a {brand.name} ad ({brand.tagline}).",
        "",
        "Keep the EXACT same layout, proportions, and structure. Just swap the branding:",
        f"- Brand: {brand.name} | {brand.website}",
        f"- Colors: {brand.color_list()}",
        f'- Fonts: "{brand.headline_font}" for headlines, "{brand.body_font}" for body',
        f"- Flavors: {flavors}" if flavors else None,
        _product_line(brand, request.flavor),
        _channel_line(brand, request.channel),
        _assets_block(assets),
        f'\nUser notes: "{request.user_notes}"' if request.user_notes else None,
        "",
        f"Output exactly {width}x{height}px.",
        HTML_RULES,
        "",
        JSON_ONLY,
        _result_shape(width, height),
    )


def build_edit_prompt(html: str, instruction: str, width: int, height: int, brand: BrandContext) -> str:
    return _lines(
        f"You are editing an HTML ad for {brand.full_name}.",
        "",
        f"BRAND COLORS: {brand.color_list()}",
        f'BRAND FONTS: "{brand.headline_font}" for headlines, "{brand.body_font}" for body.',
        "",
        f"Here is the CURRENT ad HTML ({width}x{height}px):",
        html,
        "",
        "THE USER WANTS THIS CHANGE:",
        f'"{instruction}"',
        "",
        "Apply EXACTLY what the user asked for. Keep everything else the same unless the change "
        "logically requires adjusting other elements for visual consistency.",
        "",
        EDIT_RULES.format(width=width, height=height),
        "",
        JSON_ONLY,
        '{"html": "<the modified HTML with {{token}} placeholders>", '
        '"fields": {"token_name": "text value for each token"}}',
    )


def build_tokenize_prompt(html: str) -> str:
    return _lines(
        "Convert the literal text in this HTML ad into named placeholders.",
        "",
        "HTML:",
        html,
        "",
        TOKENIZE_RULES,
        "",
        JSON_ONLY,
        '{"html": "<the same HTML with {{token}} placeholders>", "fields": {"token_name": "original text"}}',
    )


def build_self_review_prompt(
    html: str,
    width: int,
    height: int,
    dimensions: Iterable[str],
    brand: BrandContext,
) -> str:
    """Score rendered markup on ``dimensions`` and optionally return a fixed version."""
    dims = list(dimensions)
    criteria = [f"- {d}: {REVIEW_DIMENSIONS.get(d, d)}" for d in dims]
    scores_shape = ", ".join(f'"{d}": <1-10>' for d in dims)
    return _lines(
        f"You are a strict design QA lead reviewing a {width}x{height}px HTML ad for {brand.full_name}.",
        "",
        f"BRAND COLORS: {brand.color_list()}",
        "",
        "Here is the rendered ad HTML:",
        html,
        "",
        "Score it 1-10 on each dimension:",
        *criteria,
        "",
        "If any dimension scores below 7, fix the ad: return the corrected HTML with {{token}} placeholders "
        'for all text, the complete "fields" record, and set "fixed" to true. Otherwise set "fixed" to false '
        'and omit "html" and "fields".',
        f"The ad must remain EXACTLY {width}px wide and {height}px tall.",
        "",
        JSON_ONLY,
        "{"
        '"score": <1-10>, "verdict": "<one sentence>", "strengths": ["..."], '
        '"improvements": [{"issue": "...", "fix": "...", "priority": "high" | "medium" | "low"}], '
        f'"scores": {{{scores_shape}}}, '
        '"fixed": true | false, "html": "<fixed html or omit>", "fields": {"token": "value"}, '
        '"backgroundColor": "#hex", "textColor": "#hex", "accentColor": "#hex"'
        "}",
    )


def build_fix_prompt(
    html: str,
    fields: Mapping[str, Any],
    improvements: Sequence[Any],
    width: int,
    height: int,
    brand: BrandContext,
) -> str:
    """Apply reviewer improvements to an existing ad."""
    items = []
    for i, imp in enumerate(improvements, 1):
        priority = getattr(imp, "priority", "medium")
        items.append(f"{i}. [{priority}] {imp.issue} -> {imp.fix}")
    return _lines(
        f"You are improving an HTML ad for {brand.full_name} based on a performance review.",
        "",
        f"BRAND COLORS: {brand.color_list()}",
        f'BRAND FONTS: "{brand.headline_font}" for headlines, "{brand.body_font}" for body.',
        "",
        f"CURRENT ad HTML ({width}x{height}px):",
        html,
        "",
        "CURRENT fields:",
        json.dumps(dict(fields), ensure_ascii=False),
        "",
        "APPLY THESE IMPROVEMENTS:",
        *items,
        "",
        EDIT_RULES.format(width=width, height=height),
        "",
        JSON_ONLY,
        _result_shape(width, height),
    )


def build_performance_review_prompt(
    html: str,
    brand: BrandContext,
    channel: Optional[str] = None,
    ad_size: Optional[str] = None,
) -> str:
    return _lines(
        "You are a senior performance marketing specialist who has managed millions in Meta/Instagram ad spend. "
        f"You're reviewing a {brand.name} ad ({brand.tagline}) for conversion optimization.",
        "",
        "Here is the ad HTML:",
        html,
        "",
        f"CHANNEL: {channel or 'social media'}",
        f"SIZE: {ad_size or '1080x1080'}",
        "",
        PERFORMANCE_CHECKLIST,
        "",
        JSON_ONLY,
        PERFORMANCE_REVIEW_SHAPE,
    )


def format_catalog(catalog: Sequence[Any]) -> str:
    """Numbered text catalogue of templates with their editable fields."""
    if not catalog:
        return "No templates available."
    blocks: List[str] = []
    for i, t in enumerate(catalog, 1):
        fields = ", ".join(f"{name} ({d.get('type', 'text')})" for name, d in (t.editable_fields or {}).items())
        blocks.append(
            f'{i}. "{t.name}" (ID: {t.id}) | {t.description or t.category}\n'
            f"   Size: {t.width}x{t.height} | Category: {t.category}\n"
            f"   Editable fields: {fields or 'none specified'}"
        )
    return "\n\n".join(blocks)


def build_template_selection_prompt(
    brief: str,
    catalog: Sequence[Any],
    brand: BrandContext,
    flavor: Optional[str] = None,
    channel: Optional[str] = None,
) -> str:
    return _lines(
        f"You are a top creative director for {brand.full_name}. Given the ad brief below and the available "
        "templates, pick the BEST template and fill in ALL its editable fields with compelling, on-brand copy.",
        "",
        f"BRAND: {brand.name} | {brand.tagline} | {brand.website}",
        f"VOICE: {', '.join(brand.voice_qualities)}" if brand.voice_qualities else None,
        f"BRAND COLORS: {brand.color_list()}",
        f"KEY SELLING POINTS: {'; '.join(brand.selling_points[:5])}" if brand.selling_points else None,
        _product_line(brand, flavor),
        f"CHANNEL: {channel}" if channel else None,
        f"IMPORTANT: {brand.positioning_note}" if brand.positioning_note else None,
        "",
        "AVAILABLE TEMPLATES:",
        format_catalog(catalog),
        "",
        f'AD BRIEF: "{brief}"',
        "",
        TEMPLATE_SELECTION_INSTRUCTIONS,
        "",
        JSON_ONLY,
        TEMPLATE_SELECTION_SHAPE,
    )


def build_copy_system_prompt(
    brand: BrandContext,
    flavor: Optional[str] = None,
    sku: Optional[str] = None,
    channel: Optional[str] = None,
    tone: Optional[str] = None,
    reference_style: Optional[str] = None,
) -> str:
    product = brand.find_product(flavor=flavor, sku=sku)
    info = brand.channel(channel)
    return _lines(
        f"You are the creative copywriter for {brand.full_name}. You write ad copy that matches the brand voice perfectly.",
        "",
        brand.summary(),
        "",
        f"CHANNEL: {channel or 'social'} | {info.emphasis}",
        f"TONE: {tone or 'playful, warm, energetic'}",
        (
            f"PRODUCT FOCUS: {product.name}, {product.key_benefit} ({product.protein} protein, {product.calories} cal)"
            if product else None
        ),
        f"REFERENCE AD STYLE: {reference_style}" if reference_style else None,
        "",
        COPY_GUIDELINES,
    )


def build_copy_prompt(
    brand: BrandContext,
    flavor: Optional[str] = None,
    sku: Optional[str] = None,
    channel: Optional[str] = None,
    user_prompt: Optional[str] = None,
) -> str:
    product = brand.find_product(flavor=flavor, sku=sku)
    where = channel or "social media"
    if user_prompt:
        ask = f"Generate 3 ad copy variations for a {where} ad. Additional direction: {user_prompt}"
    else:
        featuring = f" featuring {product.name}" if product else ""
        ask = f"Generate 3 ad copy variations for a {where} ad{featuring}."
    return _lines(ask, "", JSON_ONLY, COPY_SHAPE)
