"""
Brand context loading.

The brand context is an immutable value loaded once from JSON and handed to
prompt builders through the ``get_brand_context`` dependency.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..core.config import settings
from ..models.results import AdColors

logger = logging.getLogger(__name__)

_BUNDLED_PATH = Path(__file__).resolve().parent.parent / "data" / "brand_context.json"


@dataclass(frozen=True)
class Product:
    sku: str
    name: str
    flavor: str
    format: str
    protein: str
    calories: str
    key_benefit: str


@dataclass(frozen=True)
class Channel:
    name: str
    emphasis: str
    cta: str


@dataclass(frozen=True)
class AudienceSegment:
    segment: str
    traits: Tuple[str, ...]


@dataclass(frozen=True)
class MicroTrend:
    name: str
    hook: str


@dataclass(frozen=True)
class BrandContext:
    name: str
    full_name: str
    tagline: str
    website: str
    story: str
    positioning_note: str
    voice_description: str
    voice_qualities: Tuple[str, ...]
    voice_guidelines: Tuple[str, ...]
    primary_colors: Tuple[Tuple[str, str], ...]
    pairing_colors: Tuple[Tuple[str, str], ...]
    default_colors: AdColors
    headline_font: str
    body_font: str
    accent_fonts: Tuple[str, ...]
    mascot_name: str
    mascot_description: str
    target_audience: Tuple[AudienceSegment, ...] = ()
    products: Tuple[Product, ...] = ()
    selling_points: Tuple[str, ...] = ()
    micro_trends: Tuple[MicroTrend, ...] = ()
    channels: Tuple[Channel, ...] = ()
    photo_guidelines: Tuple[str, ...] = ()
    mission: str = field(default="")

    def color_list(self) -> str:
        """``name: #hex`` pairs, primary colours first."""
        return ", ".join(f"{n}: {h}" for n, h in self.primary_colors + self.pairing_colors)

    def flavors(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for p in self.products:
            seen.setdefault(p.flavor, None)
        return tuple(seen)

    def find_product(self, flavor: Optional[str] = None, sku: Optional[str] = None) -> Optional[Product]:
        for p in self.products:
            if (sku and p.sku == sku) or (flavor and p.flavor == flavor):
                return p
        return None

    def channel(self, name: Optional[str]) -> Channel:
        by_name = {c.name: c for c in self.channels}
        if name and name in by_name:
            return by_name[name]
        return by_name.get("social") or self.channels[0]

    def summary(self) -> str:
        """Full brand block used by copywriting prompts."""
        lines = [
            f"BRAND: {self.name} | {self.tagline}",
            f"WEBSITE: {self.website}",
            "",
            f"STORY: {self.story}",
            "",
            f"TONE OF VOICE: {self.voice_description}",
            f"Key qualities: {', '.join(self.voice_qualities)}",
            "Guidelines:",
            *[f"- {g}" for g in self.voice_guidelines],
            "",
            "SELLING POINTS:",
            *[f"- {s}" for s in self.selling_points],
            "",
            "PRODUCTS:",
            *[
                f'- {p.name} ({p.format}): {p.protein} protein, {p.calories} cal, "{p.key_benefit}"'
                for p in self.products
            ],
            "",
            "TARGET AUDIENCE:",
            *[f"- {a.segment}: {', '.join(a.traits)}" for a in self.target_audience],
            "",
            f"MASCOT: {self.mascot_name}. {self.mascot_description}",
        ]
        if self.positioning_note:
            lines += ["", f"IMPORTANT: {self.positioning_note}"]
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fullName": self.full_name,
            "tagline": self.tagline,
            "website": self.website,
            "colors": {
                "primary": dict(self.primary_colors),
                "pairings": dict(self.pairing_colors),
                "adDefaults": {
                    "backgroundColor": self.default_colors.background,
                    "textColor": self.default_colors.text,
                    "accentColor": self.default_colors.accent,
                },
            },
            "fonts": {
                "headline": self.headline_font,
                "body": self.body_font,
                "accent": list(self.accent_fonts),
            },
            "flavors": list(self.flavors()),
            "products": [
                {
                    "sku": p.sku,
                    "name": p.name,
                    "flavor": p.flavor,
                    "format": p.format,
                    "protein": p.protein,
                    "calories": p.calories,
                    "keyBenefit": p.key_benefit,
                }
                for p in self.products
            ],
            "channels": {c.name: {"emphasis": c.emphasis, "cta": c.cta} for c in self.channels},
        }


def _from_dict(data: Dict[str, Any]) -> BrandContext:
    brand = data["brand"]
    voice = data.get("voice", {})
    colors = data.get("colors", {})
    fonts = data.get("fonts", {})
    mascot = data.get("mascot", {})
    primary = tuple(colors.get("primary", {}).items())
    defaults = colors.get("ad_defaults") or {}
    primary_hex = [h for _, h in primary]

    return BrandContext(
        name=brand["name"],
        full_name=brand.get("full_name", brand["name"]),
        tagline=brand.get("tagline", ""),
        website=brand.get("website", ""),
        story=brand.get("story", ""),
        mission=brand.get("mission", ""),
        positioning_note=brand.get("positioning_note", ""),
        voice_description=voice.get("description", ""),
        voice_qualities=tuple(voice.get("qualities", [])),
        voice_guidelines=tuple(voice.get("guidelines", [])),
        primary_colors=primary,
        pairing_colors=tuple(colors.get("pairings", {}).items()),
        default_colors=AdColors(
            background=defaults.get("background", "#ffffff"),
            text=defaults.get("text", "#000000"),
            accent=defaults.get("accent", primary_hex[0] if primary_hex else "#000000"),
        ),
        headline_font=fonts.get("headline", "serif"),
        body_font=fonts.get("body", "sans-serif"),
        accent_fonts=tuple(fonts.get("accent", [])),
        mascot_name=mascot.get("name", ""),
        mascot_description=mascot.get("description", ""),
        target_audience=tuple(
            AudienceSegment(segment=a["segment"], traits=tuple(a.get("traits", [])))
            for a in data.get("target_audience", [])
        ),
        products=tuple(Product(**p) for p in data.get("products", [])),
        selling_points=tuple(data.get("selling_points", [])),
        micro_trends=tuple(MicroTrend(**t) for t in data.get("micro_trends", [])),
        channels=tuple(
            Channel(name=name, emphasis=c.get("emphasis", ""), cta=c.get("cta", ""))
            for name, c in data.get("channels", {}).items()
        ),
        photo_guidelines=tuple(data.get("photo_guidelines", [])),
    )


def load_brand_context(path: Optional[str] = None) -> BrandContext:
    """Load a brand context from ``path``, ``BRAND_CONTEXT_PATH`` or the bundled file."""
    source = Path(path or settings.brand_context_path or _BUNDLED_PATH)
    with open(source, "r", encoding="utf-8") as f:
        data = json.load(f)
    brand = _from_dict(data)
    logger.info("Loaded brand context", extra={"brand": brand.name, "source": str(source)})
    return brand


@lru_cache(maxsize=1)
def get_brand_context() -> BrandContext:
    """FastAPI dependency returning the process-wide brand context."""
    return load_brand_context()
