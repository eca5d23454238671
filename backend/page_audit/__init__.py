"""Website UX/SEO/performance auditing service."""

__version__ = "0.1.0"
