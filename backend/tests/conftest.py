import io

import pytest
from PIL import Image
from bs4 import BeautifulSoup

from page_audit.errors import AIRequestFailure
from page_audit.models import BoundingBox
from page_audit.page_query import QueriedElement


class HtmlPageQuery:
    """PageQuery over static HTML. Boxes come from data-box="x,y,w,h"."""

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, "html.parser")

    async def query_all(self, selector, within=None):
        root = within.handle if within is not None else self.soup
        return [self._element(node) for node in root.select(selector)]

    async def title(self):
        return self.soup.title.get_text(strip=True) if self.soup.title else ""

    @staticmethod
    def _element(node) -> QueriedElement:
        attrs = {
            name: " ".join(value) if isinstance(value, list) else value
            for name, value in node.attrs.items()
        }
        box = BoundingBox()
        if "data-box" in attrs:
            box = BoundingBox.from_rect(*attrs["data-box"].split(","))
        return QueriedElement(
            tag=node.name,
            text=node.get_text().strip(),
            attrs=attrs,
            box=box,
            handle=node,
        )


class FakeLLM:
    """Scripted stand-in for LLMClient.complete, keyed by request category."""

    def __init__(self, replies=None, failures=()):
        self.replies = replies or {}
        self.failures = set(failures)
        self.calls = []

    async def complete(self, prompt, *, system=None, image_b64=None,
                       media_type="image/jpeg", max_tokens=None, category="request"):
        self.calls.append({
            "category": category,
            "prompt": prompt,
            "system": system,
            "image_b64": image_b64,
        })
        if category in self.failures:
            raise AIRequestFailure(category, "service unavailable")
        reply = self.replies.get(category, "")
        if isinstance(reply, Exception):
            raise reply
        return reply


SAMPLE_PAGE = """
<html>
<head>
  <title>Acme Widgets</title>
  <meta name="description" content="Widgets for every occasion">
  <meta name="keywords" content="widgets, acme">
  <meta property="og:title" content="Acme">
  <link rel="stylesheet" href="/static/site.css" media="screen">
  <link rel="stylesheet" href="https://fonts.example.com/inter.woff2">
  <link rel="preload" as="font" href="/fonts/brand.ttf">
  <link rel="preload" as="script" href="/static/app.js">
  <script src="/static/app.js" defer></script>
  <script>window.inline = true;</script>
</head>
<body>
  <nav data-box="0,0,1920,80">
    <a href="/" data-box="10,10,60,20">Home</a>
    <a href="/pricing" data-box="80,10,60,20">Pricing</a>
  </nav>
  <h1 data-box="100,120,800,60">  Welcome to Acme  </h1>
  <h2 data-box="100,200,600,40">Why widgets</h2>
  <p data-box="100,260,700,40">First paragraph.</p>
  <p data-box="100,320,700,40">Second paragraph.</p>
  <ul data-box="100,380,400,60"><li>Fast</li><li> Cheap </li></ul>
  <img src="/img/hero.png" alt="Hero" width="1600" height="900" data-box="0,500,1600,900">
  <img src="/img/logo.png" width="120" height="40" data-box="20,20,120,40">
  <video src="/media/intro.mp4" poster="/media/intro.jpg" width="640" height="360" controls data-box="100,1500,640,360"></video>
  <button type="submit" data-box="100,1900,120,40">Buy now</button>
  <div role="button" data-box="240,1900,120,40">Learn more</div>
  <form action="/subscribe" method="post" data-box="100,2000,500,120">
    <input type="email" name="email" placeholder="you@example.com" required data-box="110,2010,300,30">
    <textarea name="note" data-box="110,2050,300,60"></textarea>
  </form>
  <a href="https://other.example.org/partner" data-box="100,2200,100,20">Partner</a>
  <a href="/pricing" data-box="200,2200,100,20">Pricing again</a>
  <a href="mailto:hello@acme.test" data-box="300,2200,100,20">Email</a>
  <a href="http://[broken" data-box="400,2200,100,20">Broken</a>
  <footer data-box="0,2300,1920,100">
    Acme Inc.
    <a href="/privacy" data-box="10,2310,80,20">Privacy</a>
  </footer>
</body>
</html>
"""

EMPTY_PAGE = "<html><head></head><body></body></html>"


@pytest.fixture
def html_query():
    return HtmlPageQuery


@pytest.fixture
def sample_query():
    return HtmlPageQuery(SAMPLE_PAGE)


@pytest.fixture
def empty_query():
    return HtmlPageQuery(EMPTY_PAGE)


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def png_bytes():
    """A small full-page style PNG with an alpha channel."""
    buf = io.BytesIO()
    Image.new("RGBA", (1600, 400), (20, 40, 60, 255)).save(buf, format="PNG")
    return buf.getvalue()
