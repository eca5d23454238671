from page_audit.extractor import (
    extract_assets,
    extract_content,
    extract_links,
    extract_site_links,
    resolve_url,
    same_domain,
)
from page_audit.models import BoundingBox, FooterRecord

BASE = "https://acme.test/"


def test_resolve_url():
    assert resolve_url(BASE, "/pricing") == "https://acme.test/pricing"
    assert resolve_url("https://acme.test/blog/post", "next") == "https://acme.test/blog/next"
    assert resolve_url(BASE, "https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"
    assert resolve_url(BASE, "") is None
    assert resolve_url(BASE, "   ") is None
    assert resolve_url(BASE, None) is None
    assert resolve_url(BASE, "http://[broken") is None


def test_same_domain():
    assert same_domain("https://acme.test/a", BASE)
    assert same_domain("http://acme.test/b", BASE)
    assert not same_domain("https://shop.acme.test/", BASE)
    assert not same_domain("mailto:hello@acme.test", BASE)


async def test_links_skip_unresolvable_hrefs(sample_query):
    links = await extract_links(sample_query, BASE)
    urls = [link.url for link in links]

    assert urls == [
        "https://acme.test/",
        "https://acme.test/pricing",
        "https://other.example.org/partner",
        "https://acme.test/pricing",
        "mailto:hello@acme.test",
        "https://acme.test/privacy",
    ]
    assert links[0].text == "Home"
    assert links[0].location == BoundingBox(x=10, y=10, width=60, height=20)


async def test_site_links_deduplicated_in_first_seen_order(sample_query):
    assert await extract_site_links(sample_query, BASE) == [
        "https://acme.test/",
        "https://acme.test/pricing",
        "https://acme.test/privacy",
    ]


async def test_assets(sample_query):
    assets = await extract_assets(sample_query, BASE)

    hero, logo = assets.images
    assert hero.src == "https://acme.test/img/hero.png"
    assert hero.alt == "Hero"
    assert (hero.width, hero.height) == (1600, 900)
    assert hero.location == BoundingBox(x=0, y=500, width=1600, height=900)
    # no alt attribute at all
    assert logo.alt is None

    assert [s.href for s in assets.stylesheets] == [
        "https://acme.test/static/site.css",
        "https://fonts.example.com/inter.woff2",
    ]
    assert assets.stylesheets[0].media == "screen"

    external, inline = assets.scripts
    assert external.src == "https://acme.test/static/app.js"
    assert external.defer and not external.is_async
    assert inline.src is None

    (video,) = assets.videos
    assert video.src == "https://acme.test/media/intro.mp4"
    assert video.poster == "https://acme.test/media/intro.jpg"
    assert video.controls and not video.autoplay

    assert [(f.href, f.format) for f in assets.fonts] == [
        ("https://fonts.example.com/inter.woff2", "woff2"),
        ("https://acme.test/fonts/brand.ttf", "ttf"),
    ]


async def test_font_with_query_string(html_query):
    query = html_query('<link rel="stylesheet" href="/f/icons.woff?v=3">')
    assets = await extract_assets(query, BASE)
    assert [(f.href, f.format) for f in assets.fonts] == [("https://acme.test/f/icons.woff?v=3", "woff")]


async def test_asset_serialization_uses_async_key(sample_query):
    assets = await extract_assets(sample_query, BASE)
    dumped = assets.model_dump(by_alias=True)
    assert dumped["scripts"][0]["async"] is False
    assert dumped["scripts"][0]["defer"] is True


async def test_content(sample_query):
    content = await extract_content(sample_query)

    assert content.metadata.title == "Acme Widgets"
    assert content.metadata.description == "Widgets for every occasion"
    assert content.metadata.keywords == "widgets, acme"
    assert content.metadata.og_title == "Acme"
    assert content.metadata.og_description is None

    text = content.text_content
    assert [(h.text, h.level) for h in text.headings] == [("Welcome to Acme", 1), ("Why widgets", 2)]
    assert [p.text for p in text.paragraphs] == ["First paragraph.", "Second paragraph."]
    (block,) = text.lists
    assert block.type == "ul"
    assert block.items == ["Fast", "Cheap"]

    buttons = content.interactive_elements.buttons
    assert [(b.text, b.type) for b in buttons] == [("Buy now", "submit"), ("Learn more", "button")]

    (form,) = content.interactive_elements.forms
    assert (form.action, form.method) == ("/subscribe", "post")
    email, note = form.inputs
    assert (email.type, email.name, email.placeholder, email.required) == (
        "email", "email", "you@example.com", True,
    )
    assert (note.type, note.required) == ("textarea", False)

    (nav,) = content.navigation
    assert [(item.text, item.url) for item in nav.items] == [("Home", "/"), ("Pricing", "/pricing")]

    footer = content.footer_content
    assert footer.text.startswith("Acme Inc.")
    assert [link.text for link in footer.links] == ["Privacy"]
    assert footer.location == BoundingBox(x=0, y=2300, width=1920, height=100)


async def test_empty_page_gives_empty_records(empty_query):
    content = await extract_content(empty_query)
    assets = await extract_assets(empty_query, BASE)

    assert content.metadata.title is None
    assert content.metadata.description is None
    assert content.text_content.headings == []
    assert content.interactive_elements.forms == []
    assert content.navigation == []
    assert content.footer_content == FooterRecord()
    assert content.footer_content.location is None
    assert assets.images == [] and assets.fonts == []
    assert await extract_links(empty_query, BASE) == []


async def test_boxes_are_never_negative(html_query):
    query = html_query('<h1 data-box="-5,NaN,inf,12">Title</h1><p data-box="1,2,x,-3">Body</p>')
    content = await extract_content(query)

    assert content.text_content.headings[0].location == BoundingBox(x=0, y=0, width=0, height=12)
    assert content.text_content.paragraphs[0].location == BoundingBox(x=1, y=2, width=0, height=0)
