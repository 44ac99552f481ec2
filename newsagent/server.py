from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from .api import router as api_router
from .core.config import AppSettings, get_settings
from .core.logging import setup_logging
from .extraction import ExtractionService, RenderFetcher, SharedBrowser, StaticFetcher
from .headlines import NewsApiClient
from .summarization import ArticleChunker, SummarizationClient, SummaryService, TokenBudgeter

logger = logging.getLogger(__name__)


def build_extraction_service(
    settings: AppSettings,
    http_client: httpx.AsyncClient,
    browser: Optional[SharedBrowser],
) -> ExtractionService:
    static_fetcher = StaticFetcher(
        http_client,
        headers=settings.http.static_headers(),
        timeout=settings.http.timeout,
    )
    render_fetcher = None
    if browser is not None:
        render_fetcher = RenderFetcher(
            browser,
            settings.render,
            user_agent=settings.http.user_agent,
            headers=settings.http.headers,
        )
    return ExtractionService(static_fetcher, render_fetcher)


def build_summary_service(settings: AppSettings, http_client: httpx.AsyncClient) -> SummaryService:
    budgeter = TokenBudgeter(settings.summarization)
    client = SummarizationClient(http_client, settings.summarization, budgeter)
    return SummaryService(
        client,
        budgeter,
        ArticleChunker(),
        chunk_concurrency=settings.summarization.chunk_concurrency,
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with AsyncExitStack() as stack:
            http_client = await stack.enter_async_context(httpx.AsyncClient())
            browser = None
            if settings.render.enabled:
                # Launched lazily on the first render; closed once on shutdown
                browser = await stack.enter_async_context(SharedBrowser(settings.render))
            else:
                logger.info("Browser rendering disabled; static fetch only")

            app.state.extraction = build_extraction_service(settings, http_client, browser)
            app.state.summaries = build_summary_service(settings, http_client)
            app.state.headlines = NewsApiClient(
                http_client, settings.newsapi, timeout=settings.http.timeout
            )
            logger.info(
                "newsagent ready",
                extra={
                    "render_enabled": settings.render.enabled,
                    "summarization_url": settings.summarization.api_url,
                },
            )
            yield

    app = FastAPI(title="newsagent", lifespan=lifespan)
    app.include_router(api_router)
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
