"""
Ad generation pipeline.

Every HTML flow runs the same chain: prompt -> completion -> extraction ->
contract -> optional tokenize pass -> optional self-review. Flows differ only
by their :class:`FlowConfig`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..core.config import settings
from ..core.structured_logging import log_business_event
from ..models.exceptions import ValidationError
from ..models.results import (
    AdColors,
    CopyVariation,
    GeneratedAd,
    Improvement,
    ReferenceAnalysis,
    ReviewReport,
    copy_variations_from_payload,
)
from .anthropic import ImageInput
from .brand import BrandContext
from .extraction import parse_json_response
from .guardrails import validate_contract
from .langfuse import Trace
from .placeholders import find_placeholders
from .prompt_builder import (
    AssetReference,
    build_copy_prompt,
    build_copy_system_prompt,
    build_edit_prompt,
    build_fix_prompt,
    build_generation_prompt,
    build_performance_review_prompt,
    build_recreate_prompt,
    build_tokenize_prompt,
)
from .prompts import ANALYZE_REFERENCE_PROMPT
from .review import (
    HTML_REVIEW_DIMENSIONS,
    RECREATE_REVIEW_DIMENSIONS,
    Enhanced,
    SelfReviewer,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowConfig:
    name: str
    build_prompt: Callable[..., str]
    max_tokens: int
    review_dimensions: Sequence[str]
    thinking_budget: Optional[int] = None
    uses_image: bool = False
    tokenize: bool = True


GENERATE_FLOW = FlowConfig(
    name="generate",
    build_prompt=build_generation_prompt,
    max_tokens=8000,
    review_dimensions=HTML_REVIEW_DIMENSIONS,
)

RECREATE_FLOW = FlowConfig(
    name="recreate",
    build_prompt=build_recreate_prompt,
    max_tokens=16000,
    thinking_budget=5000,
    review_dimensions=RECREATE_REVIEW_DIMENSIONS,
    uses_image=True,
)

EDIT_MAX_TOKENS = 4096
TOKENIZE_MAX_TOKENS = 8000
FIX_MAX_TOKENS = 8000
PERFORMANCE_REVIEW_MAX_TOKENS = 1500
ANALYZE_MAX_TOKENS = 2000
COPY_MAX_TOKENS = 1500


@dataclass(frozen=True)
class PipelineResult:
    ad: GeneratedAd
    report: Optional[ReviewReport] = None
    enhanced: bool = False
    review_error: Optional[str] = None


class AdPipeline:
    def __init__(
        self,
        client,
        brand: BrandContext,
        trace: Optional[Trace] = None,
        self_review: Optional[bool] = None,
    ):
        self.client = client
        self.brand = brand
        self.trace = trace or Trace("adstudio")
        self.self_review = settings.enable_self_review if self_review is None else self_review
        self.reviewer = SelfReviewer(client, brand, self.trace)

    async def _structured(self, prompt: str, contract: str, *, task: str, **kwargs: Any) -> Dict[str, Any]:
        with self.trace.span(f"completion:{task}", {"contract": contract}):
            text = await self.client.complete(prompt, task=task, **kwargs)
            payload = parse_json_response(text)
            validate_contract(contract, payload)
        return payload

    async def _html_pass(
        self, prompt: str, *, task: str, fallback: AdColors, **kwargs: Any
    ) -> GeneratedAd:
        payload = await self._structured(prompt, "generation.json", task=task, **kwargs)
        return GeneratedAd.from_payload(payload, fallback)

    async def run(self, flow: FlowConfig, request, assets: Sequence[AssetReference] = ()) -> PipelineResult:
        image = None
        if flow.uses_image:
            if not request.image_base64:
                raise ValidationError("imageBase64", "No image provided")
            image = ImageInput(request.image_base64, request.media_type)
        elif not request.description:
            raise ValidationError("description", "No description provided")

        ad = await self._html_pass(
            flow.build_prompt(request, self.brand, assets),
            task=flow.name,
            fallback=self.brand.default_colors,
            image=image,
            max_tokens=flow.max_tokens,
            thinking_budget=flow.thinking_budget,
        )

        if flow.tokenize and not find_placeholders(ad.html):
            logger.info("Generated markup has no placeholders, running tokenize pass")
            ad = await self.tokenize(ad.html, colors=ad.colors)

        override = getattr(request, "self_review", None)
        review_enabled = self.self_review if override is None else override
        if review_enabled:
            with self.trace.span("self_review", {"dimensions": list(flow.review_dimensions)}):
                outcome = await self.reviewer.review(ad, request.ad_width, request.ad_height, flow.review_dimensions)
            enhanced = isinstance(outcome, Enhanced)
            result = PipelineResult(
                ad=outcome.ad,
                report=outcome.report,
                enhanced=enhanced,
                review_error=None if enhanced else outcome.error,
            )
        else:
            result = PipelineResult(ad)

        log_business_event(
            logger, "ad_generated",
            flow=flow.name,
            reviewed=review_enabled,
            enhanced=result.enhanced,
            placeholders=len(find_placeholders(result.ad.html)),
        )
        return result

    async def generate(self, request, assets: Sequence[AssetReference] = ()) -> PipelineResult:
        return await self.run(GENERATE_FLOW, request, assets)

    async def recreate(self, request, assets: Sequence[AssetReference] = ()) -> PipelineResult:
        return await self.run(RECREATE_FLOW, request, assets)

    async def edit(
        self,
        html: str,
        instruction: str,
        width: int,
        height: int,
        colors: Optional[AdColors] = None,
    ) -> GeneratedAd:
        if not html or not instruction:
            raise ValidationError("currentHtml" if not html else "instruction", "Missing currentHtml or instruction")
        return await self._html_pass(
            build_edit_prompt(html, instruction, width, height, self.brand),
            task="edit",
            fallback=colors or self.brand.default_colors,
            max_tokens=EDIT_MAX_TOKENS,
        )

    async def tokenize(self, html: str, colors: Optional[AdColors] = None) -> GeneratedAd:
        if not html:
            raise ValidationError("html", "No HTML provided")
        return await self._html_pass(
            build_tokenize_prompt(html),
            task="tokenize",
            fallback=colors or self.brand.default_colors,
            max_tokens=TOKENIZE_MAX_TOKENS,
        )

    async def apply_fixes(
        self,
        ad: GeneratedAd,
        improvements: Sequence[Improvement],
        width: int,
        height: int,
    ) -> GeneratedAd:
        if not ad.html:
            raise ValidationError("html", "No HTML provided")
        if not improvements:
            raise ValidationError("improvements", "No improvements provided")
        return await self._html_pass(
            build_fix_prompt(ad.html, ad.fields, improvements, width, height, self.brand),
            task="apply_fixes",
            fallback=ad.colors,
            max_tokens=FIX_MAX_TOKENS,
        )

    async def review_performance(
        self, html: str, channel: Optional[str] = None, ad_size: Optional[str] = None
    ) -> ReviewReport:
        """Standalone review; unlike self-review its failures propagate."""
        if not html:
            raise ValidationError("adHtml", "No ad HTML provided")
        payload = await self._structured(
            build_performance_review_prompt(html, self.brand, channel, ad_size),
            "performance_review.json",
            task="review",
            max_tokens=PERFORMANCE_REVIEW_MAX_TOKENS,
        )
        return ReviewReport.from_payload(payload)

    async def analyze_reference(self, image: Optional[ImageInput]) -> ReferenceAnalysis:
        if image is None or not image.data:
            raise ValidationError("imageBase64", "No image provided")
        payload = await self._structured(
            ANALYZE_REFERENCE_PROMPT,
            "analysis.json",
            task="analyze",
            image=image,
            max_tokens=ANALYZE_MAX_TOKENS,
        )
        return ReferenceAnalysis.from_payload(payload)

    async def generate_copy(
        self,
        flavor: Optional[str] = None,
        sku: Optional[str] = None,
        channel: Optional[str] = None,
        tone: Optional[str] = None,
        user_prompt: Optional[str] = None,
        reference_analysis: Optional[Dict[str, Any]] = None,
    ) -> List[CopyVariation]:
        reference_style = (reference_analysis or {}).get("styleNotes") or None
        payload = await self._structured(
            build_copy_prompt(self.brand, flavor, sku, channel, user_prompt),
            "copy.json",
            task="copy",
            system=build_copy_system_prompt(self.brand, flavor, sku, channel, tone, reference_style),
            max_tokens=COPY_MAX_TOKENS,
        )
        return copy_variations_from_payload(payload)
