"""
Audit data model. Everything here is created fresh per request and
serialized with camelCase keys (mainPage, exitPoints, textContent, ...).
"""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuditModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BoundingBox(AuditModel):
    """Rectangle in full-page screenshot pixels, fixed at capture time."""

    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @classmethod
    def from_rect(cls, x, y, width, height) -> "BoundingBox":
        """Build a box from raw DOM numbers, zeroing anything non-finite or negative."""
        def clean(value) -> float:
            try:
                value = float(value)
            except (TypeError, ValueError):
                return 0.0
            if not math.isfinite(value) or value < 0:
                return 0.0
            return value

        return cls(x=clean(x), y=clean(y), width=clean(width), height=clean(height))


# ---------------------------------------------------------------------------
# Page content
# ---------------------------------------------------------------------------

class Metadata(AuditModel):
    title: str | None = None
    description: str | None = None
    keywords: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None


class Heading(AuditModel):
    text: str
    level: int
    location: BoundingBox


class Paragraph(AuditModel):
    text: str
    location: BoundingBox


class ListBlock(AuditModel):
    items: list[str] = []
    type: str = "ul"
    location: BoundingBox


class TextContent(AuditModel):
    headings: list[Heading] = []
    paragraphs: list[Paragraph] = []
    lists: list[ListBlock] = []


class Button(AuditModel):
    text: str
    type: str = "button"
    disabled: bool = False
    location: BoundingBox


class FormInput(AuditModel):
    type: str
    name: str = ""
    placeholder: str = ""
    required: bool = False
    location: BoundingBox


class FormRecord(AuditModel):
    action: str = ""
    method: str = ""
    inputs: list[FormInput] = []
    location: BoundingBox


class InteractiveElements(AuditModel):
    buttons: list[Button] = []
    forms: list[FormRecord] = []


class NavItem(AuditModel):
    text: str
    url: str
    location: BoundingBox


class NavRecord(AuditModel):
    items: list[NavItem] = []
    location: BoundingBox


class FooterRecord(AuditModel):
    text: str = ""
    links: list[NavItem] = []
    location: BoundingBox | None = None


class PageContent(AuditModel):
    metadata: Metadata = Field(default_factory=Metadata)
    text_content: TextContent = Field(default_factory=TextContent)
    interactive_elements: InteractiveElements = Field(default_factory=InteractiveElements)
    navigation: list[NavRecord] = []
    footer_content: FooterRecord = Field(default_factory=FooterRecord)


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class ImageAsset(AuditModel):
    src: str
    alt: str | None = None
    width: float = 0
    height: float = 0
    loading: str = ""
    location: BoundingBox


class StylesheetAsset(AuditModel):
    href: str
    media: str = ""


class ScriptAsset(AuditModel):
    src: str | None = None
    is_async: bool = Field(default=False, alias="async")
    defer: bool = False


class VideoAsset(AuditModel):
    src: str | None = None
    poster: str | None = None
    width: float = 0
    height: float = 0
    autoplay: bool = False
    controls: bool = False
    location: BoundingBox


class FontAsset(AuditModel):
    href: str
    format: str = ""


class Assets(AuditModel):
    images: list[ImageAsset] = []
    stylesheets: list[StylesheetAsset] = []
    scripts: list[ScriptAsset] = []
    videos: list[VideoAsset] = []
    fonts: list[FontAsset] = []


class PageLink(AuditModel):
    url: str
    text: str = ""
    location: BoundingBox


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

class VisualAnalysis(AuditModel):
    exit_points: list[str] = []
    design_issues: list[str] = []
    recommendations: list[str] = []


class AssetsAnalysis(AuditModel):
    performance_issues: list[str] = []
    accessibility_issues: list[str] = []
    seo_issues: list[str] = []
    best_practices: list[str] = []
    recommendations: list[str] = []


class ContentAnalysis(AuditModel):
    structure_issues: list[str] = []
    quality_issues: list[str] = []
    seo_issues: list[str] = []
    ux_issues: list[str] = []
    recommendations: list[str] = []


class AnalysisResult(AuditModel):
    visual: VisualAnalysis = Field(default_factory=VisualAnalysis)
    assets: AssetsAnalysis = Field(default_factory=AssetsAnalysis)
    content: ContentAnalysis = Field(default_factory=ContentAnalysis)


class PageAnalysis(AuditModel):
    url: str
    title: str = ""
    screenshot: str = ""  # data URL of the full-page capture
    content: PageContent = Field(default_factory=PageContent)
    assets: Assets = Field(default_factory=Assets)
    links: list[PageLink] = []
    analysis: AnalysisResult = Field(default_factory=AnalysisResult)


class FullAnalysis(AuditModel):
    main_page: PageAnalysis
    # Sibling-page crawling is not implemented; always empty for now.
    additional_pages: list[PageAnalysis] = []
    all_links: list[str] = []
