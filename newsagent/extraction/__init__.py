"""
Article body extraction.

Static HTTP fetch first, headless-browser rendering as the fallback, and a
prioritized content locator shared by both paths.
"""

from .browser import RenderFetcher, SharedBrowser
from .fetchers import StaticFetcher
from .locator import ContentLocator, LocatorStrategy, DEFAULT_STRATEGIES
from .service import ExtractionService

__all__ = [
    "ContentLocator",
    "DEFAULT_STRATEGIES",
    "ExtractionService",
    "LocatorStrategy",
    "RenderFetcher",
    "SharedBrowser",
    "StaticFetcher",
]
