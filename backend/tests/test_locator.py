import pytest

from page_audit.locator import IssueCategory, IssueRef, issue_refs, locate_issue
from page_audit.models import (
    AnalysisResult,
    Assets,
    BoundingBox,
    ContentAnalysis,
    FormRecord,
    Heading,
    ImageAsset,
    InteractiveElements,
    NavRecord,
    PageAnalysis,
    PageContent,
    PageLink,
    Paragraph,
    TextContent,
    VideoAsset,
    VisualAnalysis,
)


def box(n):
    return BoundingBox(x=n, y=n, width=10, height=10)


def make_page(images=(), videos=(), headings=(), paragraphs=(), links=(), forms=(), navs=()):
    return PageAnalysis(
        url="https://acme.test/",
        content=PageContent(
            text_content=TextContent(
                headings=[Heading(text="h", level=1, location=box(n)) for n in headings],
                paragraphs=[Paragraph(text="p", location=box(n)) for n in paragraphs],
            ),
            interactive_elements=InteractiveElements(
                forms=[FormRecord(location=box(n)) for n in forms],
            ),
            navigation=[NavRecord(location=box(n)) for n in navs],
        ),
        assets=Assets(
            images=[ImageAsset(src="i", location=box(n)) for n in images],
            videos=[VideoAsset(location=box(n)) for n in videos],
        ),
        links=[PageLink(url="https://acme.test/x", location=box(n)) for n in links],
    )


FULL_PAGE = make_page(
    images=(1, 2), videos=(3,), headings=(4, 5), paragraphs=(6, 7),
    links=(8, 9, 10), forms=(11,), navs=(12,),
)


def locate(page, issue, category, index=0):
    return locate_issue(page, issue, IssueRef(category=IssueCategory(category), index=index))


@pytest.mark.parametrize("index, expected", [(0, 8), (1, 9), (2, 10), (7, 10)])
def test_exit_points_follow_links_and_clamp(index, expected):
    assert locate(FULL_PAGE, "Leaves site", "exit-point", index) == box(expected)


def test_design_issue_uses_images():
    assert locate(FULL_PAGE, "Busy layout", "design-issue", 1) == box(2)
    assert locate(FULL_PAGE, "Busy layout", "design-issue", 5) == box(2)


@pytest.mark.parametrize("issue, expected", [
    ("Uncompressed image files", 1),
    ("Autoplay video is heavy", 3),
    ("Render-blocking CSS", 1),
])
def test_performance(issue, expected):
    assert locate(FULL_PAGE, issue, "performance") == box(expected)


@pytest.mark.parametrize("issue, expected", [
    ("Form fields lack labels", 11),
    ("Image missing alt", 1),
    ("Navigation not keyboard accessible", 12),
    ("Low contrast", 1),
])
def test_accessibility(issue, expected):
    assert locate(FULL_PAGE, issue, "accessibility") == box(expected)


@pytest.mark.parametrize("issue, expected", [
    ("Heading order skips H2", 4),
    ("Thin content", 6),
    ("Missing meta description", 4),
])
def test_seo(issue, expected):
    assert locate(FULL_PAGE, issue, "seo") == box(expected)


def test_content_prefers_paragraphs_then_headings():
    assert locate(FULL_PAGE, "Wordy", "content", 1) == box(7)
    assert locate(FULL_PAGE, "Wordy", "content", 9) == box(7)

    headings_only = make_page(headings=(4, 5))
    assert locate(headings_only, "Wordy", "content", 1) == box(5)


@pytest.mark.parametrize("issue, expected", [
    ("Simplify the navigation", 12),
    ("Use a smaller hero image", 1),
    ("Shorten the text", 6),
    ("Underline each link", 8),
])
def test_other_sniffs_keywords(issue, expected):
    assert locate(FULL_PAGE, issue, "other") == box(expected)


def test_falls_back_to_first_available_element():
    # No images for a design issue: next in line are headings.
    page = make_page(headings=(4,), links=(8,))
    assert locate(page, "Busy layout", "design-issue") == box(4)

    page = make_page(videos=(3,))
    assert locate(page, "Something vague", "other") == box(3)


def test_page_without_elements_locates_nothing():
    for category in IssueCategory:
        assert locate(make_page(), "Anything", category.value) is None


def test_issue_refs_index_within_each_list():
    analysis = AnalysisResult(
        visual=VisualAnalysis(exit_points=["a", "b"], recommendations=["r"]),
        content=ContentAnalysis(seo_issues=["c"]),
    )
    refs = list(issue_refs(analysis))

    assert refs == [
        ("a", IssueRef(IssueCategory.EXIT_POINT, 0)),
        ("b", IssueRef(IssueCategory.EXIT_POINT, 1)),
        ("r", IssueRef(IssueCategory.OTHER, 0)),
        ("c", IssueRef(IssueCategory.SEO, 0)),
    ]
