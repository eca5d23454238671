"""
Fix suggestions for a single reported issue.

generate_solution() always returns text: a model answer when a client is
configured and the request succeeds, otherwise a static remedy picked by
keyword.
"""

import logging

from page_audit.config import get_settings

logger = logging.getLogger(__name__)

# First match wins, so order matters ("image alt" is accessibility, not content).
CATEGORY_KEYWORDS = [
    ("contrast", ("contrast", "color", "readability")),
    ("responsive", ("responsive", "mobile", "screen size")),
    ("performance", ("load", "performance", "speed")),
    ("seo", ("seo", "meta", "search engine")),
    ("typography", ("font", "typography", "text")),
    ("navigation", ("navigation", "menu", "link")),
    ("content", ("content", "writing", "copy")),
    ("security", ("security", "privacy", "data")),
    ("forms", ("form", "input", "validation")),
]

SYSTEM_PROMPTS = {
    "accessibility": "You are an accessibility expert specializing in web development. Provide specific, actionable solutions to fix website accessibility issues. Include code examples, WCAG guidelines references, and best practices. Focus on creating inclusive experiences for users with disabilities.",
    "contrast": "You are a UI/UX designer specializing in color theory and visual accessibility. Provide specific solutions for contrast and color issues on websites. Include color ratio recommendations, tools for checking contrast, and code examples using accessible color combinations.",
    "responsive": "You are a responsive design expert. Provide detailed solutions for making websites work well on all device sizes. Include CSS media query examples, responsive design patterns, and testing methodologies. Focus on mobile-first approaches and fluid layouts.",
    "performance": "You are a web performance optimization specialist. Provide technical solutions for improving website loading speed and performance. Include specific code optimizations, caching strategies, and resource loading techniques. Mention relevant tools for measuring and monitoring performance.",
    "seo": "You are an SEO specialist. Provide detailed solutions for improving website search engine optimization. Include specific meta tag recommendations, structured data examples, and content optimization techniques. Focus on both technical SEO and content-related improvements.",
    "typography": "You are a typography and web design expert. Provide solutions for improving text readability and visual hierarchy. Include CSS examples, font pairing recommendations, and best practices for line height, spacing, and font sizes. Focus on both aesthetics and readability.",
    "navigation": "You are a UX designer specializing in website navigation and information architecture. Provide solutions for improving site navigation, menu structures, and user flows. Include accessibility considerations, mobile navigation patterns, and best practices for link design.",
    "content": "You are a content strategist and UX writer. Provide solutions for improving website content quality, structure, and effectiveness. Include writing guidelines, content organization strategies, and techniques for improving readability and engagement.",
    "security": "You are a web security expert. Provide solutions for improving website security and data protection. Include specific code examples, security headers, form validation techniques, and best practices for protecting user data.",
    "forms": "You are a UX designer specializing in form design and validation. Provide solutions for improving form usability, accessibility, and conversion rates. Include validation techniques, error handling best practices, and code examples for creating user-friendly forms.",
    "general": "You are a helpful web development and design expert. Provide specific, actionable solutions to fix website issues. Format your response with clear steps, examples, and best practices. Keep your response concise but comprehensive.",
}

GENERIC_SOLUTION = """To fix this issue, consider the following steps:

1. Analyze the specific problem mentioned
2. Research best practices for this particular area
3. Implement changes incrementally and test results
4. Get feedback from users or colleagues
5. Continue to monitor and refine your solution

For more specific guidance, consider consulting with a specialist in this area or researching industry standards."""

ALT_TEXT_FIX = 'Add descriptive alt text to all images to improve accessibility.\n\nExample:\n<img src="image.jpg" alt="Descriptive text about the image content" />\n\nGood alt text should:\n- Be concise but descriptive\n- Convey the purpose of the image\n- Not start with "image of" or "picture of"'
CONTRAST_FIX = "Improve color contrast between text and background to meet WCAG standards (minimum 4.5:1 for normal text, 3:1 for large text).\n\nSteps to fix:\n1. Use a contrast checker tool like WebAIM\n2. Adjust text or background colors\n3. Consider adding a semi-transparent background behind text on images"
RESPONSIVE_FIX = "Make your design responsive for all device sizes:\n\n1. Use responsive units (%, em, rem) instead of fixed pixels\n2. Implement media queries for different breakpoints\n3. Test on various devices and screen sizes\n4. Consider a mobile-first approach to design"
PERFORMANCE_FIX = "Improve page load performance:\n\n1. Optimize and compress images\n2. Minify CSS and JavaScript\n3. Implement lazy loading for images and videos\n4. Use a Content Delivery Network (CDN)\n5. Enable browser caching\n6. Reduce third-party scripts"
SEO_FIX = "Improve SEO with these steps:\n\n1. Add descriptive title tags (50-60 characters)\n2. Write compelling meta descriptions (150-160 characters)\n3. Use proper heading structure (H1, H2, etc.)\n4. Add structured data/schema markup\n5. Ensure mobile-friendliness\n6. Improve page load speed"
TYPOGRAPHY_FIX = "Improve typography:\n\n1. Limit font families to 2-3 per page\n2. Ensure proper font sizes (min 16px for body text)\n3. Maintain adequate line height (1.5-2x font size)\n4. Use web-safe fonts or properly implement web fonts\n5. Ensure consistent styling throughout the site"
NAVIGATION_FIX = "Improve navigation:\n\n1. Keep navigation consistent across all pages\n2. Highlight the current page/section\n3. Ensure clickable areas are large enough (min 44x44px)\n4. Add breadcrumbs for complex sites\n5. Make sure navigation is keyboard accessible\n6. Consider adding a search function"
CONTENT_FIX = "Improve content quality:\n\n1. Use clear, concise language\n2. Break text into short paragraphs\n3. Use bullet points for lists\n4. Include subheadings to organize content\n5. Proofread for spelling and grammar\n6. Ensure content is relevant and valuable to users"

# Checked in order after the image-alt case; any keyword selects the remedy.
STATIC_SOLUTIONS = [
    (("contrast",), CONTRAST_FIX),
    (("responsive", "mobile"), RESPONSIVE_FIX),
    (("load", "performance"), PERFORMANCE_FIX),
    (("seo", "meta"), SEO_FIX),
    (("font", "typography"), TYPOGRAPHY_FIX),
    (("navigation", "menu"), NAVIGATION_FIX),
    (("content", "text"), CONTENT_FIX),
]


def categorize_issue(issue: str) -> str:
    lowered = issue.lower()
    if "image" in lowered and ("alt" in lowered or "accessibility" in lowered):
        return "accessibility"
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def system_prompt_for(category: str) -> str:
    return SYSTEM_PROMPTS.get(category, SYSTEM_PROMPTS["general"])


def fallback_solution(issue: str) -> str:
    """Static remedy matched on keywords, else the generic checklist."""
    lowered = (issue or "").lower()
    if "image" in lowered and "alt" in lowered:
        return ALT_TEXT_FIX
    for keywords, solution in STATIC_SOLUTIONS:
        if any(keyword in lowered for keyword in keywords):
            return solution
    return GENERIC_SOLUTION


async def generate_solution(issue: str, client=None) -> str:
    if client is None:
        logger.warning("No AI client configured, using fallback solution generator")
        return fallback_solution(issue)

    category = categorize_issue(issue)
    try:
        solution = await client.complete(
            f'Provide a personalized solution for this website issue: "{issue}". '
            "Include specific code examples and best practices. "
            "Format your response with markdown for code blocks.",
            system=system_prompt_for(category),
            max_tokens=get_settings().solution_max_tokens,
            category="solution",
        )
    except Exception as e:
        logger.warning("AI solution failed for %r: %s, using fallback", issue[:50], e)
        return fallback_solution(issue)

    solution = (solution or "").strip()
    if not solution:
        return fallback_solution(issue)
    logger.info("Generated %s solution for issue: %r", category, issue[:50])
    return solution
