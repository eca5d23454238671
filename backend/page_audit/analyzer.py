"""
AI analysis orchestrator. Three independent model requests (visual,
assets, content), each parsed into section lists. A failed request degrades
only its own category. Without a configured client the whole result comes
from the heuristic analyzer instead.
"""

import asyncio
import enum
import logging
import time
from dataclasses import dataclass

from page_audit.config import Settings, get_settings
from page_audit.heuristics import generate_default_analysis
from page_audit.image_utils import screenshot_to_b64
from page_audit.models import (
    AnalysisResult,
    Assets,
    AssetsAnalysis,
    AuditModel,
    ContentAnalysis,
    PageContent,
    VisualAnalysis,
)
from page_audit.narrative import (
    ASSETS_SECTIONS,
    CONTENT_SECTIONS,
    VISUAL_SECTIONS,
    parse_sections,
)

logger = logging.getLogger(__name__)


class RequestState(str, enum.Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    PARSED = "parsed"
    FAILED = "failed"


@dataclass
class CategoryOutcome:
    category: str
    state: RequestState = RequestState.IDLE
    result: AuditModel | None = None
    error: str | None = None


def visual_prompt(title: str, url: str) -> str:
    return (
        f'Analyze this screenshot of the page titled "{title}" (URL: {url}). '
        "Identify potential user exit points, design issues, and provide recommendations "
        "for improvement. Format your response with clear sections: "
        "Exit Points:, Design Issues:, and Recommendations:"
    )


def assets_prompt(assets: Assets, title: str, url: str) -> str:
    return (
        f'Analyze the assets of the page titled "{title}" (URL: {url}).\n\n'
        "Asset Statistics:\n"
        f"- Images: {len(assets.images)} images\n"
        f"- Stylesheets: {len(assets.stylesheets)} CSS files\n"
        f"- Scripts: {len(assets.scripts)} JavaScript files\n"
        f"- Videos: {len(assets.videos)} videos\n"
        f"- Fonts: {len(assets.fonts)} font files\n\n"
        "Please analyze these assets and provide insights in the following sections:\n"
        + "\n".join(f"{label}:" for _, label in ASSETS_SECTIONS)
    )


def content_prompt(content: PageContent, title: str, url: str) -> str:
    text = content.text_content
    interactive = content.interactive_elements
    metadata_lines = "\n".join(
        f"- {key}: {value if value is not None else ''}"
        for key, value in content.metadata.model_dump(by_alias=True).items()
    )
    return (
        f'Analyze the content of the page titled "{title}" (URL: {url}).\n\n'
        "Content Statistics:\n"
        f"- Headings: {len(text.headings)} headings\n"
        f"- Paragraphs: {len(text.paragraphs)} paragraphs\n"
        f"- Lists: {len(text.lists)} lists\n"
        f"- Buttons: {len(interactive.buttons)} buttons\n"
        f"- Forms: {len(interactive.forms)} forms\n"
        f"- Navigation Menus: {len(content.navigation)} menus\n\n"
        f"Metadata:\n{metadata_lines}\n\n"
        "Please analyze this content and provide insights in the following sections:\n"
        + "\n".join(f"{label}:" for _, label in CONTENT_SECTIONS)
    )


async def run_category(
    client,
    category: str,
    prompt: str,
    sections,
    model_cls: type[AuditModel],
    error_field: str,
    timeout: float,
    image_b64: str | None = None,
) -> CategoryOutcome:
    """
    One request through Idle -> Requested -> Parsed | Failed. Never raises;
    on failure the outcome carries a single placeholder entry in error_field.
    """
    outcome = CategoryOutcome(category=category)
    t0 = time.time()
    outcome.state = RequestState.REQUESTED
    try:
        text = await asyncio.wait_for(
            client.complete(prompt, image_b64=image_b64, category=category),
            timeout=timeout,
        )
        if not text or not text.strip():
            raise ValueError("empty response")
        outcome.result = model_cls(**parse_sections(text, sections))
        outcome.state = RequestState.PARSED
        logger.info("AI %s analysis parsed in %.1fs", category, time.time() - t0)
    except Exception as e:
        reason = str(e) or type(e).__name__
        outcome.state = RequestState.FAILED
        outcome.error = reason
        outcome.result = model_cls(**{error_field: [f"Error analyzing {_subject(category)} with AI"]})
        logger.warning("AI %s analysis failed after %.1fs: %s", category, time.time() - t0, reason)
    return outcome


def _subject(category: str) -> str:
    return "page" if category == "visual" else category


async def analyze_with_ai(
    client,
    content: PageContent,
    assets: Assets,
    screenshot: bytes | None,
    title: str,
    url: str,
    settings: Settings | None = None,
) -> dict[str, CategoryOutcome]:
    """Issue all three requests concurrently and wait for every one to resolve."""
    settings = settings or get_settings()
    timeout = settings.ai_request_timeout

    image_b64 = None
    if screenshot:
        try:
            image_b64, _ = screenshot_to_b64(
                screenshot,
                compress=True,
                max_width=settings.ai_image_max_width,
                max_height=settings.ai_image_max_height,
                quality=settings.ai_image_quality,
            )
        except (OSError, ValueError) as e:
            logger.warning("Could not prepare screenshot for the model: %s", e)

    visual, asset_outcome, content_outcome = await asyncio.gather(
        run_category(
            client, "visual", visual_prompt(title, url), VISUAL_SECTIONS,
            VisualAnalysis, "exit_points", timeout, image_b64=image_b64,
        ),
        run_category(
            client, "assets", assets_prompt(assets, title, url), ASSETS_SECTIONS,
            AssetsAnalysis, "performance_issues", timeout,
        ),
        run_category(
            client, "content", content_prompt(content, title, url), CONTENT_SECTIONS,
            ContentAnalysis, "structure_issues", timeout,
        ),
    )
    return {"visual": visual, "assets": asset_outcome, "content": content_outcome}


async def analyze_page(
    client,
    content: PageContent,
    assets: Assets,
    screenshot: bytes | None,
    title: str,
    url: str,
    settings: Settings | None = None,
) -> AnalysisResult:
    """Full AnalysisResult: AI-derived when a client is configured, heuristic otherwise."""
    settings = settings or get_settings()
    if client is None:
        logger.warning("No AI client configured, using default analysis for %s", url)
        return generate_default_analysis(
            content, assets,
            large_image_threshold=settings.large_image_threshold,
            min_paragraphs=settings.min_paragraphs,
        )

    outcomes = await analyze_with_ai(client, content, assets, screenshot, title, url, settings)
    return AnalysisResult(
        visual=outcomes["visual"].result,
        assets=outcomes["assets"].result,
        content=outcomes["content"].result,
    )
