"""Pydantic models for API request and response schemas.

This module defines the data models used by the Ad Studio API. Field names are
snake_case in Python and camelCase on the wire; both spellings are accepted
on input.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from ..services.placeholders import MissingPolicy


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# The front end sends "All / General" for "no flavor" or "no channel"
_ANY_SELECTION = "All / General"
_SELECTION_FIELDS = ("flavor", "channel")


def _blank_to_none(v: Optional[str], field_name: Optional[str] = None) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if field_name in _SELECTION_FIELDS and v == _ANY_SELECTION:
        return None
    return v


# ---------------------------------------------------------------- requests

class GenerationRequest(CamelModel):
    """Ephemeral input for one generation: a description or a reference image."""

    description: Optional[str] = Field(None, max_length=4000, examples=["bold promo, 20% off"])
    image_base64: Optional[str] = Field(None, description="Reference image, base64 without data: prefix")
    media_type: str = Field("image/png", pattern=r"^image/(png|jpeg|jpg|gif|webp)$")
    ad_width: int = Field(1080, ge=50, le=4000)
    ad_height: int = Field(1080, ge=50, le=4000)
    flavor: Optional[str] = None
    channel: Optional[str] = None
    user_notes: Optional[str] = Field(None, max_length=4000)
    asset_ids: List[str] = Field(default_factory=list, max_length=12)
    self_review: Optional[bool] = Field(None, description="Override ENABLE_SELF_REVIEW for this request")

    @field_validator("flavor", "channel", "user_notes", "description")
    @classmethod
    def strip_blank(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _blank_to_none(v, info.field_name)


class EditRequest(CamelModel):
    current_html: str
    instruction: str
    ad_width: int = Field(1080, ge=50, le=4000)
    ad_height: int = Field(1080, ge=50, le=4000)


class TokenizeRequest(CamelModel):
    html: str


class ImprovementModel(CamelModel):
    issue: str
    fix: str
    priority: str = "medium"


class ApplyFixesRequest(CamelModel):
    html: str
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    accent_color: Optional[str] = None
    improvements: List[ImprovementModel] = Field(default_factory=list)
    ad_width: int = Field(1080, ge=50, le=4000)
    ad_height: int = Field(1080, ge=50, le=4000)


class PreviewRequest(CamelModel):
    html: str
    fields: Dict[str, Optional[Any]] = Field(default_factory=dict)
    missing: MissingPolicy = MissingPolicy.KEEP


class RecolorRequest(CamelModel):
    html: str
    old_color: str = Field(..., min_length=1)
    new_color: str = Field(..., pattern=r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


class ReviewAdRequest(CamelModel):
    ad_html: str = ""
    fields: Optional[Dict[str, Optional[str]]] = None
    channel: Optional[str] = None
    ad_size: Optional[str] = None


class AnalyzeRequest(CamelModel):
    image_base64: Optional[str] = None
    media_type: str = Field("image/png", pattern=r"^image/(png|jpeg|jpg|gif|webp)$")


class GenerateCopyRequest(CamelModel):
    flavor: Optional[str] = None
    sku: Optional[str] = None
    channel: Optional[str] = None
    tone: Optional[str] = None
    user_prompt: Optional[str] = Field(None, max_length=4000)
    reference_analysis: Optional[Dict[str, Any]] = None

    @field_validator("flavor", "channel", "tone", "user_prompt")
    @classmethod
    def strip_blank(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _blank_to_none(v, info.field_name)


class TemplateAdRequest(CamelModel):
    description: Optional[str] = Field(None, max_length=4000)
    ad_width: int = Field(1080, ge=50, le=4000)
    ad_height: int = Field(1080, ge=50, le=4000)
    flavor: Optional[str] = None
    channel: Optional[str] = None
    output_format: str = "png"

    @field_validator("flavor", "channel", "description")
    @classmethod
    def strip_blank(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _blank_to_none(v, info.field_name)


class RenderRequest(CamelModel):
    template_id: Optional[str] = None
    modifications: Dict[str, Any] = Field(default_factory=dict)
    output_format: str = "png"


class RenderMultiRequest(CamelModel):
    tags: List[str] = Field(default_factory=list)
    modifications: Dict[str, Any] = Field(default_factory=dict)
    output_format: str = "png"


class TemplateSyncRequest(CamelModel):
    editable_fields: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class AssetUpdateRequest(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None


class AssetDeleteRequest(CamelModel):
    id: Optional[str] = None


class GalleryCreateRequest(CamelModel):
    html: str
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)
    name: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    accent_color: Optional[str] = None
    ad_width: int = Field(1080, ge=50, le=4000)
    ad_height: int = Field(1080, ge=50, le=4000)
    flavor: Optional[str] = None
    channel: Optional[str] = None
    template_id: str = "ai-generated"
    image_base64: Optional[str] = Field(None, description="Exported PNG, base64")

    @field_validator("flavor", "channel")
    @classmethod
    def strip_blank(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _blank_to_none(v, info.field_name)


class GalleryUpdateRequest(CamelModel):
    name: Optional[str] = None
    html: Optional[str] = None
    fields: Optional[Dict[str, Optional[str]]] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    accent_color: Optional[str] = None


# ---------------------------------------------------------------- responses

class ReviewReportModel(CamelModel):
    score: Optional[float] = None
    verdict: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[ImprovementModel] = Field(default_factory=list)
    scores: Dict[str, float] = Field(default_factory=dict)
    tips: List[str] = Field(default_factory=list)
    fixed: bool = False
    hook_score: Optional[float] = None
    cta_score: Optional[float] = None
    clarity_score: Optional[float] = None
    visual_score: Optional[float] = None

    @classmethod
    def from_report(cls, report) -> "ReviewReportModel":
        return cls(
            score=report.score,
            verdict=report.verdict,
            strengths=list(report.strengths),
            improvements=[ImprovementModel(**i.to_dict()) for i in report.improvements],
            scores=dict(report.scores),
            tips=list(report.tips),
            fixed=report.fixed,
            hook_score=report.scores.get("hook"),
            cta_score=report.scores.get("cta"),
            clarity_score=report.scores.get("clarity"),
            visual_score=report.scores.get("visual"),
        )


class GeneratedAdResponse(CamelModel):
    html: str
    fields: Dict[str, str]
    background_color: str
    text_color: str
    accent_color: str
    reasoning: Optional[str] = None
    enhanced: bool = False
    review: Optional[ReviewReportModel] = None

    @classmethod
    def from_ad(cls, ad, report=None, enhanced: bool = False) -> "GeneratedAdResponse":
        return cls(
            html=ad.html,
            fields=dict(ad.fields),
            background_color=ad.colors.background,
            text_color=ad.colors.text,
            accent_color=ad.colors.accent,
            reasoning=ad.reasoning,
            enhanced=enhanced,
            review=ReviewReportModel.from_report(report) if report is not None else None,
        )


class PreviewResponse(CamelModel):
    html: str
    placeholders: List[str]
    missing: List[str]


class RecolorResponse(CamelModel):
    html: str
    replaced: int


class CopyVariationModel(CamelModel):
    headline: str
    subheadline: str = ""
    body: str = ""
    cta: str


class CopyResponse(CamelModel):
    variations: List[CopyVariationModel]


class AnalysisResponse(CamelModel):
    analysis: Dict[str, Any]


class TemplateAdResponse(CamelModel):
    render_url: str
    template_id: str
    template_name: Optional[str] = None
    modifications: Dict[str, Any]
    editable_fields: Dict[str, Any]
    width: Optional[int] = None
    height: Optional[int] = None
    reasoning: Optional[str] = None


class RenderResponse(CamelModel):
    render_url: str
    snapshot_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class RenderItem(CamelModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    template_id: Optional[str] = None
    template_name: Optional[str] = None


class RenderMultiResponse(CamelModel):
    renders: List[RenderItem]
    message: Optional[str] = None


class TemplateModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    category: str
    width: int
    height: int
    tags: List[str] = Field(default_factory=list)
    editable_fields: Dict[str, Any] = Field(default_factory=dict)
    preview_url: Optional[str] = None
    is_active: bool = True


class TemplateListResponse(CamelModel):
    templates: List[TemplateModel]


class SyncError(CamelModel):
    template_id: str
    error: str


class TemplateSyncResponse(CamelModel):
    synced: int
    total: int
    errors: List[SyncError] = Field(default_factory=list)
    message: Optional[str] = None


class AssetModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    category: str
    name: str
    file_name: str
    storage_path: str
    public_url: str
    mime_type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    sku: Optional[str] = None
    flavor: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class AssetResponse(CamelModel):
    asset: AssetModel


class AssetListResponse(CamelModel):
    assets: List[AssetModel]


class GalleryItemModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    ad_size: str
    template_id: str
    headline: str = ""
    subheadline: str = ""
    body_copy: str = ""
    cta_text: str = ""
    html: str
    fields: Dict[str, str] = Field(default_factory=dict)
    colors: Dict[str, str] = Field(default_factory=dict)
    flavor: Optional[str] = None
    channel: Optional[str] = None
    output_image_url: Optional[str] = None
    output_storage_path: Optional[str] = None
    created_at: Optional[datetime] = None


class GalleryItemResponse(CamelModel):
    ad: GalleryItemModel


class GalleryListResponse(CamelModel):
    ads: List[GalleryItemModel]


class SuccessResponse(CamelModel):
    success: bool = True
