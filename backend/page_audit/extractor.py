"""
Structured extraction: DOM -> typed content, asset and link records.

Runs against the navigated, scrolled page through a PageQuery. Missing
elements never raise; they come back as empty lists or default records.
"""

import logging
import re
from urllib.parse import urljoin, urlparse

from page_audit.models import (
    Assets,
    Button,
    FontAsset,
    FooterRecord,
    FormInput,
    FormRecord,
    Heading,
    ImageAsset,
    InteractiveElements,
    ListBlock,
    Metadata,
    NavItem,
    NavRecord,
    PageContent,
    PageLink,
    Paragraph,
    ScriptAsset,
    StylesheetAsset,
    TextContent,
    VideoAsset,
)
from page_audit.page_query import PageQuery, QueriedElement

logger = logging.getLogger(__name__)

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6"
BUTTON_SELECTOR = 'button, .btn, [role="button"], a.button'
FORM_INPUT_SELECTOR = "input, textarea, select"
NAV_SELECTOR = 'nav, [role="navigation"]'
FONT_LINK_SELECTOR = 'link[rel="preload"][as="font"], link[rel="stylesheet"]'
FONT_FILE_RE = re.compile(r"\.(woff2?|ttf|otf|eot)$", re.I)


def resolve_url(base_url: str, href: str | None) -> str | None:
    """Absolute form of href against base_url, or None if it cannot be parsed."""
    if href is None:
        return None
    href = href.strip()
    if not href:
        return None
    try:
        absolute = urljoin(base_url, href)
        urlparse(absolute).hostname  # raises on malformed netlocs
    except ValueError:
        return None
    return absolute


def same_domain(url: str, base_url: str) -> bool:
    try:
        host = urlparse(url).hostname
        return host is not None and host == urlparse(base_url).hostname
    except ValueError:
        return False


def _number(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

async def extract_links(query: PageQuery, base_url: str) -> list[PageLink]:
    """Every anchor with a resolvable href, in document order."""
    links = []
    for anchor in await query.query_all("a[href]"):
        url = resolve_url(base_url, anchor.get("href"))
        if url is None:
            continue
        links.append(PageLink(url=url, text=anchor.text, location=anchor.box))
    return links


async def extract_site_links(query: PageQuery, base_url: str) -> list[str]:
    """Deduplicated same-domain link URLs, first occurrence wins."""
    seen = set()
    site_links = []
    for link in await extract_links(query, base_url):
        if link.url in seen or not same_domain(link.url, base_url):
            continue
        seen.add(link.url)
        site_links.append(link.url)
    return site_links


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

async def extract_assets(query: PageQuery, base_url: str) -> Assets:
    images = []
    for img in await query.query_all("img"):
        images.append(ImageAsset(
            src=resolve_url(base_url, img.get("src")) or "",
            # alt attribute absent is distinct from alt=""
            alt=img.attrs.get("alt"),
            width=_number(img.get("width")),
            height=_number(img.get("height")),
            loading=_text(img.get("loading")),
            location=img.box,
        ))

    stylesheets = [
        StylesheetAsset(
            href=resolve_url(base_url, link.get("href")) or "",
            media=_text(link.get("media")),
        )
        for link in await query.query_all('link[rel="stylesheet"]')
    ]

    scripts = [
        ScriptAsset(
            src=resolve_url(base_url, script.get("src")),
            is_async=script.flag("async"),
            defer=script.flag("defer"),
        )
        for script in await query.query_all("script")
    ]

    videos = []
    for video in await query.query_all("video"):
        videos.append(VideoAsset(
            src=resolve_url(base_url, video.get("src")),
            poster=resolve_url(base_url, video.get("poster")),
            width=_number(video.get("width")),
            height=_number(video.get("height")),
            autoplay=video.flag("autoplay"),
            controls=video.flag("controls"),
            location=video.box,
        ))

    fonts = []
    for link in await query.query_all(FONT_LINK_SELECTOR):
        href = resolve_url(base_url, link.get("href"))
        if not href:
            continue
        match = FONT_FILE_RE.search(urlparse(href).path)
        if match:
            fonts.append(FontAsset(href=href, format=match.group(1).lower()))

    logger.info(
        "Assets: %d images, %d stylesheets, %d scripts, %d videos, %d fonts",
        len(images), len(stylesheets), len(scripts), len(videos), len(fonts),
    )
    return Assets(
        images=images,
        stylesheets=stylesheets,
        scripts=scripts,
        videos=videos,
        fonts=fonts,
    )


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

async def _meta_content(query: PageQuery, selector: str) -> str | None:
    tags = await query.query_all(selector)
    if not tags:
        return None
    return tags[0].attrs.get("content")


async def extract_metadata(query: PageQuery) -> Metadata:
    title = await query.title()
    return Metadata(
        title=title or None,
        description=await _meta_content(query, 'meta[name="description"]'),
        keywords=await _meta_content(query, 'meta[name="keywords"]'),
        og_title=await _meta_content(query, 'meta[property="og:title"]'),
        og_description=await _meta_content(query, 'meta[property="og:description"]'),
        og_image=await _meta_content(query, 'meta[property="og:image"]'),
    )


async def _nav_items(query: PageQuery, container: QueriedElement) -> list[NavItem]:
    return [
        NavItem(text=link.text, url=_text(link.get("href")), location=link.box)
        for link in await query.query_all("a", within=container)
    ]


async def extract_text_content(query: PageQuery) -> TextContent:
    headings = []
    for h in await query.query_all(HEADING_SELECTOR):
        try:
            level = int(h.tag[1:])
        except ValueError:
            continue
        headings.append(Heading(text=h.text, level=level, location=h.box))

    paragraphs = [
        Paragraph(text=p.text, location=p.box)
        for p in await query.query_all("p")
    ]

    lists = []
    for block in await query.query_all("ul, ol"):
        items = [li.text for li in await query.query_all("li", within=block)]
        lists.append(ListBlock(items=items, type=block.tag, location=block.box))

    return TextContent(headings=headings, paragraphs=paragraphs, lists=lists)


async def extract_interactive(query: PageQuery) -> InteractiveElements:
    buttons = [
        Button(
            text=btn.text,
            type=_text(btn.get("type")) or "button",
            disabled=btn.flag("disabled"),
            location=btn.box,
        )
        for btn in await query.query_all(BUTTON_SELECTOR)
    ]

    forms = []
    for form in await query.query_all("form"):
        inputs = [
            FormInput(
                type=_text(field.get("type")) or field.tag,
                name=_text(field.get("name")),
                placeholder=_text(field.get("placeholder")),
                required=field.flag("required"),
                location=field.box,
            )
            for field in await query.query_all(FORM_INPUT_SELECTOR, within=form)
        ]
        forms.append(FormRecord(
            action=_text(form.get("action")),
            method=_text(form.get("method")),
            inputs=inputs,
            location=form.box,
        ))

    return InteractiveElements(buttons=buttons, forms=forms)


async def extract_footer(query: PageQuery) -> FooterRecord:
    footers = await query.query_all("footer")
    if not footers:
        return FooterRecord()
    footer = footers[0]
    return FooterRecord(
        text=footer.text,
        links=await _nav_items(query, footer),
        location=footer.box,
    )


async def extract_content(query: PageQuery) -> PageContent:
    """Run every content query sequentially against the settled page."""
    metadata = await extract_metadata(query)
    text_content = await extract_text_content(query)
    interactive = await extract_interactive(query)

    navigation = []
    for nav in await query.query_all(NAV_SELECTOR):
        navigation.append(NavRecord(items=await _nav_items(query, nav), location=nav.box))

    footer = await extract_footer(query)

    logger.info(
        "Content: %d headings, %d paragraphs, %d lists, %d buttons, %d forms, %d nav blocks",
        len(text_content.headings), len(text_content.paragraphs), len(text_content.lists),
        len(interactive.buttons), len(interactive.forms), len(navigation),
    )
    return PageContent(
        metadata=metadata,
        text_content=text_content,
        interactive_elements=interactive,
        navigation=navigation,
        footer_content=footer,
    )
