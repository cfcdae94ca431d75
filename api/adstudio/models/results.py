"""Typed results produced by the generation pipeline.

Completion payloads are validated against their guardrail contract first and
only then converted here, so every constructor below can rely on the shape
the contract guarantees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class AdColors:
    background: str
    text: str
    accent: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "backgroundColor": self.background,
            "textColor": self.text,
            "accentColor": self.accent,
        }


def _stringify(fields: Optional[Dict[str, Any]]) -> Dict[str, str]:
    return {k: "" if v is None else str(v) for k, v in (fields or {}).items()}


@dataclass(frozen=True)
class GeneratedAd:
    """Ad markup with ``{{placeholder}}`` tokens plus field values and colours."""

    html: str
    fields: Dict[str, str]
    colors: AdColors
    reasoning: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], fallback: AdColors) -> "GeneratedAd":
        """Build from a contract-valid payload; omitted colours take ``fallback``."""
        return cls(
            html=payload["html"],
            fields=_stringify(payload.get("fields")),
            colors=AdColors(
                background=payload.get("backgroundColor") or fallback.background,
                text=payload.get("textColor") or fallback.text,
                accent=payload.get("accentColor") or fallback.accent,
            ),
            reasoning=payload.get("reasoning"),
        )


@dataclass(frozen=True)
class Improvement:
    issue: str
    fix: str
    priority: str = "medium"

    def to_dict(self) -> Dict[str, str]:
        return {"issue": self.issue, "fix": self.fix, "priority": self.priority}


@dataclass(frozen=True)
class ReviewReport:
    """Score, verdict, strengths, improvements and per-dimension scores."""

    score: Optional[float] = None
    verdict: str = ""
    strengths: Tuple[str, ...] = ()
    improvements: Tuple[Improvement, ...] = ()
    scores: Dict[str, float] = field(default_factory=dict)
    tips: Tuple[str, ...] = ()
    fixed: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ReviewReport":
        scores = dict(payload.get("scores") or {})
        # Performance reviews report sub-scores as flat ``<dimension>Score`` keys
        for key, value in payload.items():
            if key.endswith("Score") and isinstance(value, (int, float)):
                scores[key[: -len("Score")]] = value
        return cls(
            score=payload.get("score"),
            verdict=payload.get("verdict", ""),
            strengths=tuple(payload.get("strengths") or ()),
            improvements=tuple(
                Improvement(
                    issue=i["issue"],
                    fix=i["fix"],
                    priority=i.get("priority", "medium"),
                )
                for i in payload.get("improvements") or ()
            ),
            scores=scores,
            tips=tuple(payload.get("tips") or ()),
            fixed=bool(payload.get("fixed", False)),
        )


@dataclass(frozen=True)
class TemplateSelection:
    template_id: str
    modifications: Dict[str, Any]
    template_name: Optional[str] = None
    reasoning: Optional[str] = None


@dataclass(frozen=True)
class ReferenceAnalysis:
    layout: Dict[str, Any]
    color_palette: Tuple[str, ...]
    style_notes: str
    text_hierarchy: Tuple[Dict[str, Any], ...] = ()
    suggested_template: Optional[str] = None
    design_elements: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ReferenceAnalysis":
        return cls(
            layout=dict(payload["layout"]),
            color_palette=tuple(payload.get("colorPalette") or ()),
            style_notes=payload.get("styleNotes", ""),
            text_hierarchy=tuple(payload.get("textHierarchy") or ()),
            suggested_template=payload.get("suggestedTemplate"),
            design_elements=tuple(payload.get("designElements") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": self.layout,
            "textHierarchy": list(self.text_hierarchy),
            "colorPalette": list(self.color_palette),
            "styleNotes": self.style_notes,
            "suggestedTemplate": self.suggested_template,
            "designElements": list(self.design_elements),
        }


@dataclass(frozen=True)
class CopyVariation:
    headline: str
    cta: str
    subheadline: str = ""
    body: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "headline": self.headline,
            "subheadline": self.subheadline,
            "body": self.body,
            "cta": self.cta,
        }


def copy_variations_from_payload(payload: Dict[str, Any]) -> List[CopyVariation]:
    return [
        CopyVariation(
            headline=v["headline"],
            cta=v["cta"],
            subheadline=v.get("subheadline", ""),
            body=v.get("body", ""),
        )
        for v in payload["variations"]
    ]
