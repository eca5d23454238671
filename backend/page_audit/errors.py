"""Failures that abort or degrade an audit."""


class PageAuditError(Exception):
    """Base class for audit pipeline failures."""


class NavigationFailure(PageAuditError):
    """The page could not be loaded: bad URL, non-2xx response or timeout."""

    def __init__(self, url: str, reason: str, status: int | None = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Failed to load page {url}: {reason}")


class AIRequestFailure(PageAuditError):
    """A single model request failed. Local to one analysis category."""

    def __init__(self, category: str, reason: str):
        self.category = category
        self.reason = reason
        super().__init__(f"AI request for {category} failed: {reason}")
