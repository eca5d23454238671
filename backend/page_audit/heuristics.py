"""
Deterministic page analysis computed straight from extracted data.

Used whenever no model credential is configured. Every rule that fires adds
one issue and one companion recommendation.
"""

from page_audit.config import get_settings
from page_audit.models import AnalysisResult, Assets, PageContent


def generate_default_analysis(
    content: PageContent,
    assets: Assets,
    large_image_threshold: int | None = None,
    min_paragraphs: int | None = None,
) -> AnalysisResult:
    settings = get_settings()
    if large_image_threshold is None:
        large_image_threshold = settings.large_image_threshold
    if min_paragraphs is None:
        min_paragraphs = settings.min_paragraphs

    analysis = AnalysisResult()
    asset_findings = analysis.assets
    content_findings = analysis.content

    missing_alt = [img for img in assets.images if not (img.alt or "").strip()]
    if missing_alt:
        asset_findings.accessibility_issues.append(f"{len(missing_alt)} images missing alt text")
        asset_findings.recommendations.append("Add descriptive alt text to all images")

    large = [
        img for img in assets.images
        if img.width > large_image_threshold or img.height > large_image_threshold
    ]
    if large:
        asset_findings.performance_issues.append(f"{len(large)} large images may slow down page load")
        asset_findings.recommendations.append("Optimize and resize large images")

    headings = content.text_content.headings
    if not headings:
        content_findings.structure_issues.append("No headings found on the page")
        content_findings.recommendations.append("Add proper heading structure (H1, H2, etc.)")
    else:
        h1_count = sum(1 for h in headings if h.level == 1)
        if h1_count == 0:
            content_findings.structure_issues.append("No H1 heading found")
            content_findings.recommendations.append("Add a single H1 heading as the main title")
        elif h1_count > 1:
            content_findings.structure_issues.append(f"Multiple H1 headings ({h1_count}) found")
            content_findings.recommendations.append("Use only one H1 heading per page")

    if not (content.metadata.description or "").strip():
        content_findings.seo_issues.append("Missing meta description")
        content_findings.recommendations.append("Add a descriptive meta description")

    if len(content.text_content.paragraphs) < min_paragraphs:
        content_findings.quality_issues.append("Limited text content found")
        content_findings.recommendations.append("Add more descriptive text content")

    return analysis
