"""
End-to-end audit of one URL: capture -> extract -> analyze.

The browser is released as soon as extraction is done; model requests run
after it has closed.
"""

import logging
import time

from page_audit.analyzer import analyze_page
from page_audit.capture import capture_page
from page_audit.config import Settings, get_settings
from page_audit.extractor import (
    extract_assets,
    extract_content,
    extract_links,
    extract_site_links,
)
from page_audit.image_utils import to_data_url
from page_audit.models import FullAnalysis, PageAnalysis

logger = logging.getLogger(__name__)


async def analyze_website(url: str, client=None, settings: Settings | None = None) -> FullAnalysis:
    settings = settings or get_settings()
    t0 = time.time()
    logger.info("Starting analysis for %s", url)

    async with capture_page(url, settings) as captured:
        query = captured.query
        all_links = await extract_site_links(query, url)
        assets = await extract_assets(query, url)
        content = await extract_content(query)
        links = await extract_links(query, url)
        title = captured.title
        screenshot = captured.screenshot

    analysis = await analyze_page(client, content, assets, screenshot, title, url, settings)

    logger.info("Finished analysis for %s in %.1fs", url, time.time() - t0)
    return FullAnalysis(
        main_page=PageAnalysis(
            url=url,
            title=title,
            screenshot=to_data_url(screenshot),
            content=content,
            assets=assets,
            links=links,
            analysis=analysis,
        ),
        all_links=all_links,
    )
