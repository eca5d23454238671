"""
Map a reported issue back to a bounding box on the captured screenshot.

Each category has its own priority rule; if that finds nothing the first
element of any kind is used, in a fixed order. Only a page with no located
elements at all yields None.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Iterator

from page_audit.models import AnalysisResult, BoundingBox, PageAnalysis

logger = logging.getLogger(__name__)


class IssueCategory(str, enum.Enum):
    EXIT_POINT = "exit-point"
    DESIGN_ISSUE = "design-issue"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"
    SEO = "seo"
    CONTENT = "content"
    OTHER = "other"


@dataclass(frozen=True)
class IssueRef:
    """Which on-screen issue: its category and position in that category's list."""

    category: IssueCategory
    index: int


# (analysis group, list field) -> resolver category
LIST_CATEGORIES = {
    ("visual", "exit_points"): IssueCategory.EXIT_POINT,
    ("visual", "design_issues"): IssueCategory.DESIGN_ISSUE,
    ("visual", "recommendations"): IssueCategory.OTHER,
    ("assets", "performance_issues"): IssueCategory.PERFORMANCE,
    ("assets", "accessibility_issues"): IssueCategory.ACCESSIBILITY,
    ("assets", "seo_issues"): IssueCategory.SEO,
    ("assets", "best_practices"): IssueCategory.OTHER,
    ("assets", "recommendations"): IssueCategory.OTHER,
    ("content", "structure_issues"): IssueCategory.CONTENT,
    ("content", "quality_issues"): IssueCategory.CONTENT,
    ("content", "seo_issues"): IssueCategory.SEO,
    ("content", "ux_issues"): IssueCategory.CONTENT,
    ("content", "recommendations"): IssueCategory.OTHER,
}


def issue_refs(analysis: AnalysisResult) -> Iterator[tuple[str, IssueRef]]:
    """Every issue in the analysis paired with the reference used to locate it."""
    for (group, field), category in LIST_CATEGORIES.items():
        issues = getattr(getattr(analysis, group), field)
        for index, issue in enumerate(issues):
            yield issue, IssueRef(category=category, index=index)


@dataclass
class _Elements:
    images: list[BoundingBox]
    videos: list[BoundingBox]
    headings: list[BoundingBox]
    paragraphs: list[BoundingBox]
    links: list[BoundingBox]
    forms: list[BoundingBox]
    navigation: list[BoundingBox]

    @classmethod
    def from_page(cls, page: PageAnalysis) -> "_Elements":
        text = page.content.text_content
        return cls(
            images=[img.location for img in page.assets.images],
            videos=[video.location for video in page.assets.videos],
            headings=[h.location for h in text.headings],
            paragraphs=[p.location for p in text.paragraphs],
            links=[link.location for link in page.links],
            forms=[form.location for form in page.content.interactive_elements.forms],
            navigation=[nav.location for nav in page.content.navigation],
        )

    def fallback_order(self):
        return (
            self.images, self.headings, self.paragraphs, self.links,
            self.forms, self.navigation, self.videos,
        )


def _first(boxes: list[BoundingBox]) -> BoundingBox | None:
    return boxes[0] if boxes else None


def _clamped(boxes: list[BoundingBox], index: int) -> BoundingBox | None:
    # Past the end of the list every issue lands on the last element.
    if not boxes:
        return None
    return boxes[min(max(index, 0), len(boxes) - 1)]


def _by_category(issue: str, ref: IssueRef, el: _Elements) -> BoundingBox | None:
    text = issue.lower()
    category = ref.category

    if category == IssueCategory.EXIT_POINT:
        return _clamped(el.links, ref.index)

    if category == IssueCategory.DESIGN_ISSUE:
        return _clamped(el.images, ref.index)

    if category == IssueCategory.PERFORMANCE:
        if "image" in text and el.images:
            return el.images[0]
        if "video" in text and el.videos:
            return el.videos[0]
        return _first(el.images)

    if category == IssueCategory.ACCESSIBILITY:
        if "form" in text and el.forms:
            return el.forms[0]
        if "image" in text and el.images:
            return el.images[0]
        if "navigation" in text and el.navigation:
            return el.navigation[0]
        return _first(el.images)

    if category == IssueCategory.SEO:
        if "heading" in text and el.headings:
            return el.headings[0]
        if "content" in text and el.paragraphs:
            return el.paragraphs[0]
        return _first(el.headings)

    if category == IssueCategory.CONTENT:
        if el.paragraphs:
            return _clamped(el.paragraphs, ref.index)
        return _clamped(el.headings, ref.index)

    if "navigation" in text and el.navigation:
        return el.navigation[0]
    if "image" in text and el.images:
        return el.images[0]
    if "text" in text and el.paragraphs:
        return el.paragraphs[0]
    if "link" in text and el.links:
        return el.links[0]
    return None


def locate_issue(page: PageAnalysis, issue: str, ref: IssueRef) -> BoundingBox | None:
    """Bounding box for the issue, or None when the page has no located elements."""
    elements = _Elements.from_page(page)

    location = _by_category(issue, ref, elements)
    if location is not None:
        return location

    for boxes in elements.fallback_order():
        if boxes:
            logger.debug("No %s match for %r, using first available element", ref.category.value, issue)
            return boxes[0]

    logger.info("No elements to locate %r on %s", issue, page.url)
    return None
