"""Process-wide headless browser handle and the render fetcher built on it."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import RenderSettings
from ..models import FetchResult, FetchSource

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
    "--disable-extensions",
    "--no-first-run",
    "--no-default-browser-check",
    "--mute-audio",
]


class SharedBrowser:
    """One Chromium process shared by every render request.

    Launch is lazy and happens at most once (double-checked under a lock).
    ``close()`` tears the process down exactly once; later calls are no-ops
    and later ``get()`` calls fail. Use as an async context manager to bind
    the lifetime to a scope.
    """

    def __init__(
        self,
        settings: RenderSettings,
        driver_factory: Callable[[], Any] = async_playwright,
    ):
        self.settings = settings
        self._driver_factory = driver_factory
        self._lock = asyncio.Lock()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._closed = False

    @property
    def is_started(self) -> bool:
        return self._browser is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def get(self) -> Browser:
        browser = self._browser
        if browser is not None and browser.is_connected():
            return browser

        async with self._lock:
            if self._closed:
                raise RuntimeError("shared browser has been shut down")
            if self._browser is not None and not self._browser.is_connected():
                logger.warning("Shared browser disconnected; relaunching")
                await self._release()
            if self._browser is None:
                self._browser = await self._launch()
            return self._browser

    async def _launch(self) -> Browser:
        playwright = await self._driver_factory().start()
        try:
            browser = await playwright.chromium.launch(
                headless=self.settings.headless,
                timeout=self.settings.launch_timeout_ms,
                args=CHROMIUM_ARGS,
            )
        except BaseException:
            # Don't leak the driver process when the browser fails to start
            await playwright.stop()
            raise
        self._playwright = playwright
        logger.info("Launched shared headless browser")
        return browser

    async def _release(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        except Exception:
            logger.warning("Error closing shared browser", exc_info=True)
        finally:
            if playwright is not None:
                await playwright.stop()

    async def close(self) -> None:
        async with self._lock:
            if self._closed:
                return
            self._closed = True
            started = self._browser is not None
            await self._release()
        if started:
            logger.info("Shared headless browser closed")

    async def __aenter__(self) -> "SharedBrowser":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class RenderFetcher:
    """Loads a page in an isolated browser context and returns rendered HTML.

    Slow path: only used when the static fetch yields nothing usable.
    Never raises for navigation or renderer errors; those become a failed
    ``FetchResult``.
    """

    def __init__(
        self,
        browser: SharedBrowser,
        settings: RenderSettings,
        user_agent: str,
        headers: Optional[dict[str, str]] = None,
    ):
        self.browser = browser
        self.settings = settings
        self.user_agent = user_agent
        self.headers = dict(headers or {})
        self._slots = asyncio.Semaphore(settings.max_concurrency)

    async def render(self, url: str) -> FetchResult:
        async with self._slots:
            try:
                browser = await self.browser.get()
            except Exception as exc:
                logger.error("Renderer unavailable", extra={"url": url, "error": str(exc)})
                return FetchResult.failed(f"renderer unavailable: {exc}", FetchSource.RENDERED)

            context = None
            try:
                context = await browser.new_context(
                    user_agent=self.user_agent,
                    locale=self.settings.locale,
                    extra_http_headers=self.headers,
                )
                page = await context.new_page()
                response = await page.goto(
                    url,
                    wait_until="load",
                    timeout=self.settings.navigation_timeout_ms,
                )
                if response is not None:
                    logger.debug(
                        "Rendered navigation finished",
                        extra={"url": url, "status_code": response.status},
                    )
                await page.wait_for_timeout(self.settings.settle_ms)
                html = await page.content()
            except PlaywrightTimeoutError as exc:
                logger.warning("Render navigation timed out", extra={"url": url, "error": str(exc)})
                return FetchResult.failed(
                    f"navigation timed out after {self.settings.navigation_timeout_ms}ms",
                    FetchSource.RENDERED,
                )
            except Exception as exc:
                logger.error("Render failed", extra={"url": url, "error": str(exc)})
                return FetchResult.failed(f"renderer error: {exc}", FetchSource.RENDERED)
            finally:
                if context is not None:
                    try:
                        await context.close()
                    except Exception:
                        logger.debug("Error closing browser context", exc_info=True)

        if not html or not html.strip():
            return FetchResult.failed("rendered page was empty", FetchSource.RENDERED)
        return FetchResult.ok(html, FetchSource.RENDERED)
