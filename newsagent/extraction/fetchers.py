from __future__ import annotations

import logging

import httpx

from ..models import FetchResult, FetchSource

logger = logging.getLogger(__name__)


class StaticFetcher:
    """Plain HTTP GET with browser-like headers. No JavaScript execution.

    The ``httpx.AsyncClient`` is owned by the caller so it can be shared
    across requests and closed once at shutdown.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        headers: dict[str, str] | None = None,
        timeout: float = 15.0,
    ):
        self.client = client
        self.headers = dict(headers or {})
        self.timeout = timeout

    async def fetch(self, url: str) -> FetchResult:
        try:
            response = await self.client.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Static fetch timed out", extra={"url": url, "error": str(exc)})
            return FetchResult.failed(f"timed out after {self.timeout:g}s", FetchSource.STATIC)
        except httpx.HTTPError as exc:
            logger.warning("Static fetch failed", extra={"url": url, "error": str(exc)})
            return FetchResult.failed(
                f"network error: {exc.__class__.__name__}", FetchSource.STATIC
            )
        except (httpx.InvalidURL, ValueError) as exc:
            # Raised while building the request, before anything is sent
            logger.warning("Static fetch rejected URL", extra={"url": url, "error": str(exc)})
            return FetchResult.failed(f"invalid URL: {exc}", FetchSource.STATIC, fatal=True)

        if not response.is_success:
            logger.info(
                "Static fetch returned non-success status",
                extra={"url": url, "status_code": response.status_code},
            )
            return FetchResult.failed(
                f"HTTP {response.status_code}",
                FetchSource.STATIC,
                status_code=response.status_code,
            )

        return FetchResult.ok(response.text, FetchSource.STATIC, status_code=response.status_code)
