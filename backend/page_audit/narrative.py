"""
Split a free-text model reply into per-section issue lists.

The model is asked to answer under fixed labels ("Exit Points:", ...). Each
section runs from its label to the next known label or the end of the text.
A label the model left out yields an empty list.
"""

import re
from typing import Sequence

# (field name, label) pairs in the order the prompts request them.
VISUAL_SECTIONS = (
    ("exit_points", "Exit Points"),
    ("design_issues", "Design Issues"),
    ("recommendations", "Recommendations"),
)

ASSETS_SECTIONS = (
    ("performance_issues", "Performance Issues"),
    ("accessibility_issues", "Accessibility Issues"),
    ("seo_issues", "SEO Issues"),
    ("best_practices", "Best Practices"),
    ("recommendations", "Recommendations"),
)

CONTENT_SECTIONS = (
    ("structure_issues", "Content Structure Issues"),
    ("quality_issues", "Content Quality Issues"),
    ("seo_issues", "SEO Content Issues"),
    ("ux_issues", "UX/UI Issues"),
    ("recommendations", "Recommendations"),
)

BULLET_ONLY_RE = re.compile(r"^[-•*]+$")
BULLET_PREFIX_RE = re.compile(r"^[-•*]\s+")
ORDINAL_RE = re.compile(r"^[0-9]+\.\s*")


def _section_pattern(label: str, labels: Sequence[str]) -> re.Pattern:
    stops = "|".join(re.escape(other) + ":" for other in labels)
    return re.compile(re.escape(label) + r":(.*?)(?=" + stops + r"|\Z)", re.S)


def split_points(body: str) -> list[str]:
    """One entry per non-empty line, bullets and "N. " ordinals removed."""
    points = []
    for line in body.splitlines():
        line = line.strip()
        if not line or BULLET_ONLY_RE.match(line):
            continue
        line = BULLET_PREFIX_RE.sub("", line)
        line = ORDINAL_RE.sub("", line).strip()
        if line:
            points.append(line)
    return points


def parse_sections(text: str, sections: Sequence[tuple[str, str]]) -> dict[str, list[str]]:
    """
    Map every field in sections to the points listed under its label.

    Pure and total: any input string produces a dict with every field present.
    """
    labels = [label for _, label in sections]
    parsed = {}
    for name, label in sections:
        match = _section_pattern(label, labels).search(text or "")
        parsed[name] = split_points(match.group(1)) if match else []
    return parsed
