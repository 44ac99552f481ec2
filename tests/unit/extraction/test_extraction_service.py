"""
Tests for ExtractionService fetch-or-render orchestration.

Static fetches go through httpx.MockTransport; the render path uses
StubRenderFetcher or a RenderFetcher over FakePlaywrightDriver.
"""

import httpx
import pytest

from newsagent.extraction import ExtractionService, RenderFetcher, SharedBrowser, StaticFetcher
from newsagent.extraction.service import ALL_SOURCES_FAILED, RENDERED_UNUSABLE
from newsagent.models import FailureKind, FetchResult, FetchSource
from tests.fakes import StubRenderFetcher
from tests.utils import article_page, page

URL = "https://example.com/story"


def static_serving(status: int = 200, html: str = "") -> StaticFetcher:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(status, text=html))
    )
    return StaticFetcher(client)


class TestStaticPath:
    @pytest.mark.asyncio
    async def test_static_success_skips_rendering(self):
        renderer = StubRenderFetcher.serving(article_page("never used"))
        service = ExtractionService(
            static_serving(html=article_page("First paragraph.", "Second paragraph.")),
            renderer,
        )

        body = await service.extract_article_body(URL)

        assert body.success
        assert body.source is FetchSource.STATIC
        assert body.text == "First paragraph.\n\nSecond paragraph."
        assert renderer.calls == []

    @pytest.mark.asyncio
    async def test_body_text_is_cleaned(self):
        html = article_page(
            "Officials said &ldquo;no comment&rdquo;.",
            "ADVERTISEMENT",
            "Sign up for our newsletter today.",
            "The vote is on Friday.",
        )
        body = await ExtractionService(static_serving(html=html)).extract_article_body(URL)

        assert body.text == 'Officials said "no comment".\n\nThe vote is on Friday.'


class TestRenderFallback:
    @pytest.mark.asyncio
    async def test_static_error_falls_back_to_render(self):
        renderer = StubRenderFetcher.serving(article_page("Rendered paragraph."))
        service = ExtractionService(static_serving(status=403), renderer)

        body = await service.extract_article_body(URL)

        assert body.success
        assert body.source is FetchSource.RENDERED
        assert body.text == "Rendered paragraph."
        assert renderer.calls == [URL]
        assert body.attempts == ["static: HTTP 403", "rendered: ok"]

    @pytest.mark.asyncio
    async def test_static_page_without_content_falls_back(self):
        renderer = StubRenderFetcher.serving(article_page("Loaded by script."))
        service = ExtractionService(
            static_serving(html=page('<div id="root"></div>')), renderer
        )

        body = await service.extract_article_body(URL)

        assert body.success
        assert body.source is FetchSource.RENDERED
        assert body.attempts[0] == "static: no usable content"

    @pytest.mark.asyncio
    async def test_both_paths_failing_reports_both_reasons(self):
        renderer = StubRenderFetcher(
            FetchResult.failed("navigation timed out after 20000ms", FetchSource.RENDERED)
        )
        service = ExtractionService(static_serving(status=403), renderer)

        body = await service.extract_article_body(URL)

        assert not body.success
        assert body.failure is FailureKind.FETCH_FAILURE
        assert body.error.startswith(ALL_SOURCES_FAILED)
        assert "HTTP 403" in body.error
        assert "navigation timed out" in body.error
        assert body.text == ""

    @pytest.mark.asyncio
    async def test_rendered_page_without_content(self):
        renderer = StubRenderFetcher.serving(page("<h1>Subscribe to read</h1>"))
        service = ExtractionService(static_serving(status=500), renderer)

        body = await service.extract_article_body(URL)

        assert not body.success
        assert body.error == RENDERED_UNUSABLE
        assert body.failure is FailureKind.EXTRACTION_FAILURE

    @pytest.mark.asyncio
    async def test_rendering_disabled(self):
        service = ExtractionService(static_serving(status=404), render_fetcher=None)

        body = await service.extract_article_body(URL)

        assert not body.success
        assert body.attempts == ["static: HTTP 404", "rendered: disabled"]
        assert body.failure is FailureKind.FETCH_FAILURE

    @pytest.mark.asyncio
    async def test_through_fake_browser(self, render_settings, fake_driver):
        fake_driver.browser.html = article_page("From the headless browser.")
        async with SharedBrowser(render_settings, driver_factory=fake_driver) as browser:
            renderer = RenderFetcher(browser, render_settings, user_agent="TestAgent/1.0")
            service = ExtractionService(static_serving(status=403), renderer)

            body = await service.extract_article_body(URL)

        assert body.success
        assert body.text == "From the headless browser."
        assert fake_driver.browser.contexts[0].closed
        assert fake_driver.browser.close_calls == 1


class TestMalformedUrl:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["http://[::1/a", "http://exa\x00mple.com/a"])
    async def test_fails_without_rendering(self, url):
        renderer = StubRenderFetcher.serving(article_page("never used"))
        service = ExtractionService(static_serving(html=article_page("unused")), renderer)

        body = await service.extract_article_body(url)

        assert not body.success
        assert body.failure is FailureKind.FETCH_FAILURE
        assert body.error.startswith("invalid URL: ")
        assert len(body.attempts) == 1
        assert renderer.calls == []
