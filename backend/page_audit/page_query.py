"""
In-page DOM querying behind a small capability interface.

The extractor only ever sees QueriedElement records, so it runs the same
against a live Playwright page and against an in-memory DOM fixture.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from playwright.async_api import Error as PlaywrightError

from page_audit.models import BoundingBox

logger = logging.getLogger(__name__)


@dataclass
class QueriedElement:
    """Snapshot of one DOM element at query time."""

    tag: str
    text: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    props: dict[str, Any] = field(default_factory=dict)
    box: BoundingBox = field(default_factory=BoundingBox)
    handle: Any = None

    def get(self, name: str, default=None):
        """Live DOM property if the driver reported one, else the raw attribute."""
        value = self.props.get(name)
        if value is None:
            value = self.attrs.get(name)
        return default if value is None else value

    def flag(self, name: str) -> bool:
        if name in self.props:
            return bool(self.props[name])
        return name in self.attrs


class PageQuery(Protocol):
    async def query_all(
        self, selector: str, within: QueriedElement | None = None
    ) -> list[QueriedElement]:
        ...

    async def title(self) -> str:
        ...


# Properties read off each element. Only primitive values are kept, so a form
# input named "action" cannot shadow form.action.
SNAPSHOT_PROPS = [
    "href", "src", "poster", "alt", "width", "height", "type", "placeholder",
    "required", "disabled", "async", "defer", "autoplay", "controls",
    "loading", "media", "action", "method", "name", "content",
]

SNAPSHOT_JS = '''(el, propNames) => {
    const rect = el.getBoundingClientRect();
    const attrs = {};
    for (const attr of el.attributes) attrs[attr.name] = attr.value;
    const props = {};
    for (const name of propNames) {
        const value = el[name];
        const kind = typeof value;
        if (kind === 'string' || kind === 'number' || kind === 'boolean') props[name] = value;
    }
    return {
        tag: el.tagName.toLowerCase(),
        text: (el.textContent || '').trim(),
        attrs,
        props,
        box: {
            x: rect.left + window.scrollX,
            y: rect.top + window.scrollY,
            width: rect.width,
            height: rect.height
        }
    };
}'''


class PlaywrightPageQuery:
    """PageQuery over a live Playwright page."""

    def __init__(self, page):
        self.page = page

    async def query_all(self, selector, within=None):
        if within is not None:
            # A scoped query never widens to the whole document.
            if within.handle is None:
                return []
            root = within.handle
        else:
            root = self.page

        elements = []
        for handle in await root.query_selector_all(selector):
            # Each record is read off its own handle, so the two cannot drift apart.
            try:
                record = await handle.evaluate(SNAPSHOT_JS, SNAPSHOT_PROPS)
            except PlaywrightError as e:
                logger.debug("Skipping %s element detached during query: %s", selector, e)
                continue
            box = record.get("box") or {}
            elements.append(QueriedElement(
                tag=record.get("tag", ""),
                text=record.get("text", ""),
                attrs=record.get("attrs") or {},
                props=record.get("props") or {},
                box=BoundingBox.from_rect(
                    box.get("x"), box.get("y"), box.get("width"), box.get("height"),
                ),
                handle=handle,
            ))
        return elements

    async def title(self):
        return await self.page.title()
