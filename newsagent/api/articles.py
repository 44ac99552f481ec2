from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..extraction import ExtractionService
from ..headlines import NewsApiClient
from ..models import FetchSource, Headline, SummaryStrategy
from ..summarization import SummaryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])

ERROR_TYPE_BASE = "https://newsagent.local/errors"


class ArticleBody(BaseModel):
    url: str
    text: str
    source: Optional[FetchSource] = None


class ArticleSummary(BaseModel):
    url: str
    summary: str
    strategy: Optional[SummaryStrategy] = None
    chunk_count: Optional[int] = None


def problem(request: Request, slug: str, title: str, detail: str, status: int = 400) -> JSONResponse:
    """RFC 7807 problem-detail response."""
    return JSONResponse(
        status_code=status,
        media_type="application/problem+json",
        content={
            "type": f"{ERROR_TYPE_BASE}/{slug}",
            "title": title,
            "detail": detail,
            "status": status,
            "instance": request.url.path,
        },
    )


def _missing_url(request: Request) -> JSONResponse:
    return problem(request, "url-missing", "URL is required", "The 'url' must be provided.")


@router.get("/top-headlines", response_model=List[Headline])
async def top_headlines(
    request: Request,
    country: str = Query(default="us"),
    page_size: int = Query(default=5, alias="pageSize", ge=1, le=100),
):
    client: NewsApiClient = request.app.state.headlines
    result = await client.fetch_top_headlines(country, page_size)
    if not result.success:
        logger.warning("Failed to fetch top headlines: %s", result.error)
        return problem(
            request,
            "top-headlines-fetch-failed",
            "Failed to fetch news headlines",
            result.error or "unknown error",
        )
    return result.headlines


@router.get("/body", response_model=ArticleBody)
async def article_body(request: Request, url: Optional[str] = Query(default=None)):
    if not url or not url.strip():
        logger.warning("Body requested with empty URL")
        return _missing_url(request)

    extraction: ExtractionService = request.app.state.extraction
    body = await extraction.extract_article_body(url.strip())
    if not body.success:
        logger.warning("Failed to extract article body: %s", body.error)
        return problem(
            request,
            "body-extraction-failed",
            "Article body extraction failed",
            body.error or "unknown error",
        )
    return ArticleBody(url=body.url, text=body.text, source=body.source)


@router.get("/summarize", response_model=ArticleSummary)
async def summarize_article(request: Request, url: Optional[str] = Query(default=None)):
    if not url or not url.strip():
        logger.warning("Summary requested with empty URL")
        return _missing_url(request)

    extraction: ExtractionService = request.app.state.extraction
    summaries: SummaryService = request.app.state.summaries

    body = await extraction.extract_article_body(url.strip())
    if not body.success:
        logger.warning("Body extraction failed during summarization: %s", body.error)
        return problem(
            request,
            "body-extraction-failed",
            "Article body extraction failed",
            body.error or "unknown error",
        )

    outcome = await summaries.summarize(body.text)
    if not outcome.ok:
        logger.warning("Summarization failed: %s", outcome.detail)
        return problem(
            request,
            "summarization-failed",
            "Article summarization failed",
            outcome.detail or "unknown error",
        )

    return ArticleSummary(
        url=body.url,
        summary=outcome.text,
        strategy=outcome.plan.strategy if outcome.plan else None,
        chunk_count=outcome.plan.chunk_count if outcome.plan else None,
    )
