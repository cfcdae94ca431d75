"""
Best-effort self-review of a generated ad.

The reviewer scores the rendered ad and may hand back a replacement. Whatever
goes wrong while reviewing, the caller keeps the ad it already had.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Union

from ..models.results import GeneratedAd, ReviewReport
from .brand import BrandContext
from .extraction import parse_json_response
from .guardrails import validate_contract
from .langfuse import Trace
from .placeholders import render
from .prompt_builder import build_self_review_prompt

logger = logging.getLogger(__name__)

HTML_REVIEW_DIMENSIONS = ("hook", "quality", "readability", "clarity")
RECREATE_REVIEW_DIMENSIONS = ("layout", "quality", "readability")

SELF_REVIEW_MAX_TOKENS = 8000


@dataclass(frozen=True)
class Enhanced:
    """The reviewer fixed the ad; ``ad`` is the replacement."""

    ad: GeneratedAd
    report: ReviewReport


@dataclass(frozen=True)
class Unchanged:
    """The original ad stands, with the report when one was produced."""

    ad: GeneratedAd
    report: Optional[ReviewReport] = None
    error: Optional[str] = None


ReviewOutcome = Union[Enhanced, Unchanged]


def adopt_fix(ad: GeneratedAd, report: ReviewReport, payload: Dict[str, Any]) -> ReviewOutcome:
    """Adopt the reviewer's replacement only when it is flagged and complete."""
    if not (report.fixed and payload.get("html") and payload.get("fields")):
        return Unchanged(ad, report)
    replacement = GeneratedAd.from_payload(
        {
            "html": payload["html"],
            "fields": payload["fields"],
            "backgroundColor": payload.get("backgroundColor"),
            "textColor": payload.get("textColor"),
            "accentColor": payload.get("accentColor"),
        },
        fallback=ad.colors,
    )
    return Enhanced(replacement, report)


class SelfReviewer:
    def __init__(self, client, brand: BrandContext, trace: Optional[Trace] = None):
        self.client = client
        self.brand = brand
        self.trace = trace

    async def review(
        self,
        ad: GeneratedAd,
        width: int,
        height: int,
        dimensions: Iterable[str] = HTML_REVIEW_DIMENSIONS,
    ) -> ReviewOutcome:
        try:
            prompt = build_self_review_prompt(render(ad.html, ad.fields), width, height, dimensions, self.brand)
            text = await self.client.complete(prompt, max_tokens=SELF_REVIEW_MAX_TOKENS, task="self_review")
            payload = parse_json_response(text)
            validate_contract("self_review.json", payload)
            report = ReviewReport.from_payload(payload)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Self-review failed, keeping original ad: {e}", extra={"error_type": type(e).__name__})
            if self.trace is not None:
                self.trace.log(f"self-review discarded: {type(e).__name__}", level="WARNING")
            return Unchanged(ad, None, str(e))

        outcome = adopt_fix(ad, report, payload)
        logger.info(
            "Self-review complete",
            extra={"enhanced": isinstance(outcome, Enhanced), "score": report.score, "fixed": report.fixed},
        )
        return outcome
