"""
Page capture: load a URL in headless Chromium, sweep it for lazy content,
and take one full-page screenshot.

The browser is opened per request and closed on every exit path.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from page_audit.config import Settings, get_settings
from page_audit.errors import NavigationFailure
from page_audit.page_query import PageQuery, PlaywrightPageQuery

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# The target height is read once, before the first tick, so pages that keep
# growing while scrolled (infinite feeds) still end the sweep.
AUTO_SCROLL_JS = '''async ({distance, interval}) => {
    await new Promise(resolve => {
        const target = document.body ? document.body.scrollHeight : 0;
        let total = 0;
        const timer = setInterval(() => {
            window.scrollBy(0, distance);
            total += distance;
            if (total >= target) {
                clearInterval(timer);
                resolve();
            }
        }, interval);
    });
}'''


@dataclass
class CapturedPage:
    url: str
    title: str
    screenshot: bytes
    query: PageQuery


async def navigate(page, url: str, timeout_ms: int):
    """Go to url and wait for network idle. Raises NavigationFailure."""
    try:
        response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        raise NavigationFailure(url, f"timed out after {timeout_ms}ms")
    except PlaywrightError as e:
        raise NavigationFailure(url, str(e).splitlines()[0] if str(e) else type(e).__name__)

    if response is None:
        raise NavigationFailure(url, "no response received")
    if not response.ok:
        raise NavigationFailure(
            url, f"{response.status} {response.status_text}".strip(), status=response.status,
        )
    logger.info("Loaded %s (%s)", url, response.status)
    return response


async def auto_scroll(page, step: int, interval_ms: int):
    """Scroll to the bottom in fixed steps to trigger lazy loading, then back to top."""
    await page.evaluate(AUTO_SCROLL_JS, {"distance": step, "interval": interval_ms})
    await page.evaluate("window.scrollTo(0, 0)")


@asynccontextmanager
async def capture_page(url: str, settings: Settings | None = None) -> AsyncIterator[CapturedPage]:
    """
    Navigate, auto-scroll and screenshot url, yielding a CapturedPage whose
    query stays usable until the block exits.
    """
    settings = settings or get_settings()

    async with async_playwright() as p:
        browser = await p.chromium.launch(
            headless=True,
            args=["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"],
        )
        try:
            context = await browser.new_context(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
                device_scale_factor=1,
                user_agent=USER_AGENT,
            )
            page = await context.new_page()

            await navigate(page, url, settings.page_load_timeout)
            await auto_scroll(page, settings.scroll_step, settings.scroll_interval)

            title = await page.title()
            screenshot = await page.screenshot(full_page=True, type="png")
            logger.info("Captured %s (%d bytes)", url, len(screenshot))

            yield CapturedPage(
                url=url,
                title=title,
                screenshot=screenshot,
                query=PlaywrightPageQuery(page),
            )
        finally:
            await browser.close()
