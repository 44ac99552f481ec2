"""ExtractionService - fetch-or-render orchestration for article bodies."""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from ..core.text import clean_article_text
from ..models import ExtractedBody, FailureKind, FetchResult, FetchSource
from .browser import RenderFetcher
from .fetchers import StaticFetcher
from .locator import ContentLocator

logger = logging.getLogger(__name__)


class ExtractionStage(str, Enum):
    FETCH_STATIC = "fetch_static"
    LOCATE_STATIC = "locate_static"
    FETCH_RENDERED = "fetch_rendered"
    LOCATE_RENDERED = "locate_rendered"


ALL_SOURCES_FAILED = "all sources failed"
RENDERED_UNUSABLE = "rendered HTML had no usable content"


class ExtractionService:
    """Extracts readable article body text from a URL.

    Tries a static fetch first. A failed fetch, or a successful fetch whose
    HTML has no usable body, falls back to browser rendering. Failures of the
    rendering path are terminal for the request. A URL the static fetcher
    rejects as malformed fails at once without rendering.
    """

    def __init__(
        self,
        static_fetcher: StaticFetcher,
        render_fetcher: Optional[RenderFetcher] = None,
        locator: Optional[ContentLocator] = None,
    ):
        self.static_fetcher = static_fetcher
        self.render_fetcher = render_fetcher
        self.locator = locator or ContentLocator()

    async def extract_article_body(self, url: str) -> ExtractedBody:
        attempts: List[str] = []

        static = await self.static_fetcher.fetch(url)
        if static.success:
            body = self._locate(static)
            if body:
                attempts.append(f"{FetchSource.STATIC.value}: ok")
                logger.info("Extracted article body", extra={"url": url, "source": "static"})
                return ExtractedBody.found(url, body, FetchSource.STATIC, attempts)
            attempts.append(f"{FetchSource.STATIC.value}: no usable content")
            self._log_transition(url, ExtractionStage.LOCATE_STATIC, "no usable content")
        elif static.fatal:
            attempts.append(f"{FetchSource.STATIC.value}: {static.error}")
            logger.warning("Article extraction failed", extra={"url": url, "reason": static.error})
            return ExtractedBody.not_found(url, static.error, FailureKind.FETCH_FAILURE, attempts)
        else:
            attempts.append(f"{FetchSource.STATIC.value}: {static.error}")
            self._log_transition(url, ExtractionStage.FETCH_STATIC, static.error)

        if self.render_fetcher is None:
            attempts.append(f"{FetchSource.RENDERED.value}: disabled")
            return self._all_sources_failed(url, attempts)

        rendered = await self.render_fetcher.render(url)
        if not rendered.success:
            attempts.append(f"{FetchSource.RENDERED.value}: {rendered.error}")
            return self._all_sources_failed(url, attempts)

        body = self._locate(rendered)
        if not body:
            attempts.append(f"{FetchSource.RENDERED.value}: no usable content")
            logger.warning(
                "Rendered page had no usable content",
                extra={"url": url, "attempts": attempts},
            )
            return ExtractedBody.not_found(
                url, RENDERED_UNUSABLE, FailureKind.EXTRACTION_FAILURE, attempts
            )

        attempts.append(f"{FetchSource.RENDERED.value}: ok")
        logger.info("Extracted article body", extra={"url": url, "source": "rendered"})
        return ExtractedBody.found(url, body, FetchSource.RENDERED, attempts)

    def _locate(self, fetched: FetchResult) -> str:
        """Return cleaned body text, or an empty string when nothing usable was found."""
        paragraphs = self.locator.extract_paragraphs(fetched.html)
        if not paragraphs:
            return ""
        return clean_article_text("\n".join(paragraphs))

    def _all_sources_failed(self, url: str, attempts: List[str]) -> ExtractedBody:
        reason = f"{ALL_SOURCES_FAILED} ({'; '.join(attempts)})"
        logger.warning("Article extraction failed", extra={"url": url, "reason": reason})
        return ExtractedBody.not_found(url, reason, FailureKind.FETCH_FAILURE, attempts)

    @staticmethod
    def _log_transition(url: str, stage: ExtractionStage, detail: Optional[str]) -> None:
        logger.info(
            "Static path failed; falling back to browser rendering",
            extra={"url": url, "stage": stage.value, "detail": detail},
        )
