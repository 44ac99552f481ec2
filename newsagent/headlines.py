"""Top-headlines listing client."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from .core.config import NewsApiSettings
from .models import FailureKind, Headline, HeadlinesResult

logger = logging.getLogger(__name__)

TOP_HEADLINES_PATH = "/v2/top-headlines"
CLIENT_USER_AGENT = "newsagent/0.1"


def _parse_published_at(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def headline_from_json(item: dict) -> Headline:
    source = item.get("source")
    return Headline(
        title=_as_text(item.get("title")),
        author=_as_text(item.get("author")),
        source=_as_text(source.get("name")) if isinstance(source, dict) else None,
        published_at=_parse_published_at(item.get("publishedAt")),
        description=_as_text(item.get("description")),
        url=_as_text(item.get("url")),
    )


class NewsApiClient:
    """Fetches a single page of top headlines."""

    def __init__(self, client: httpx.AsyncClient, settings: NewsApiSettings, timeout: float = 15.0):
        self.client = client
        self.settings = settings
        self.timeout = timeout

    async def fetch_top_headlines(
        self, country: Optional[str] = None, page_size: Optional[int] = None
    ) -> HeadlinesResult:
        if self.settings.api_key is None:
            return HeadlinesResult(
                success=False,
                error="news API key is not configured",
                failure=FailureKind.PERMANENT_BACKEND_FAILURE,
            )

        params = {
            "country": country or self.settings.country,
            "pageSize": page_size or self.settings.page_size,
        }
        url = self.settings.base_url.rstrip("/") + TOP_HEADLINES_PATH
        headers = {
            "X-Api-Key": self.settings.api_key.get_secret_value(),
            "User-Agent": CLIENT_USER_AGENT,
        }

        logger.info("Fetching top headlines", extra={"params": params})
        try:
            response = await self.client.get(url, params=params, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error("Headline request failed", extra={"error": str(exc)})
            return HeadlinesResult(
                success=False,
                error=f"failed to fetch headlines: {exc.__class__.__name__}",
                failure=FailureKind.FETCH_FAILURE,
            )

        if not response.is_success:
            logger.error("Headline request rejected", extra={"status_code": response.status_code})
            return HeadlinesResult(
                success=False,
                error=f"headline request failed: HTTP {response.status_code}",
                failure=FailureKind.FETCH_FAILURE,
            )

        try:
            data = response.json()
            articles = data["articles"]
            if not isinstance(articles, list):
                raise TypeError("articles is not a list")
            if not all(isinstance(item, dict) for item in articles):
                raise TypeError("articles contains a non-object entry")
            headlines = [headline_from_json(item) for item in articles]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed headline response", extra={"error": str(exc)})
            return HeadlinesResult(
                success=False,
                error="malformed headline response",
                failure=FailureKind.MALFORMED_RESPONSE,
            )

        return HeadlinesResult(success=True, headlines=headlines)
