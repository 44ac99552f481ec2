"""Result and value types passed between pipeline stages."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why a stage failed."""

    FETCH_FAILURE = "fetch_failure"
    EXTRACTION_FAILURE = "extraction_failure"
    TRANSIENT_BACKEND_FAILURE = "transient_backend_failure"
    PERMANENT_BACKEND_FAILURE = "permanent_backend_failure"
    MALFORMED_RESPONSE = "malformed_response"


class FetchSource(str, Enum):
    STATIC = "static"
    RENDERED = "rendered"


class FetchResult(BaseModel):
    html: str = ""
    success: bool
    source: FetchSource
    status_code: Optional[int] = None
    error: Optional[str] = None
    # Set when no other fetch path can succeed either (e.g. a malformed URL)
    fatal: bool = False

    @classmethod
    def ok(cls, html: str, source: FetchSource, status_code: Optional[int] = None) -> "FetchResult":
        return cls(html=html, success=True, source=source, status_code=status_code)

    @classmethod
    def failed(
        cls,
        reason: str,
        source: FetchSource,
        status_code: Optional[int] = None,
        fatal: bool = False,
    ) -> "FetchResult":
        return cls(
            success=False, source=source, status_code=status_code, error=reason, fatal=fatal
        )


class ExtractedBody(BaseModel):
    """Article body text, or the reason none could be found.

    When ``success`` is true ``text`` holds at least one paragraph.
    """

    url: str
    text: str = ""
    success: bool
    source: Optional[FetchSource] = None
    error: Optional[str] = None
    failure: Optional[FailureKind] = None
    attempts: List[str] = Field(default_factory=list)

    @classmethod
    def found(cls, url: str, text: str, source: FetchSource, attempts: List[str]) -> "ExtractedBody":
        return cls(url=url, text=text, success=True, source=source, attempts=attempts)

    @classmethod
    def not_found(
        cls, url: str, reason: str, failure: FailureKind, attempts: List[str]
    ) -> "ExtractedBody":
        return cls(url=url, success=False, error=reason, failure=failure, attempts=attempts)


class SummaryStrategy(str, Enum):
    VERBATIM = "verbatim"
    SINGLE_PASS = "single_pass"
    MAP_REDUCE = "map_reduce"


class ChunkPlan(BaseModel):
    strategy: SummaryStrategy
    estimated_tokens: int = Field(ge=0)
    chunk_count: int = Field(ge=1)
    chars_per_chunk: int = Field(gt=0)
    token_budget_per_chunk: int = Field(gt=0)


class ChunkSummary(BaseModel):
    index: int = Field(ge=1)
    source_chunk: str
    summary_text: str


class OutcomeStatus(str, Enum):
    OK = "ok"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"


class SummaryOutcome(BaseModel):
    """Result of one backend call, or of the whole summarization pipeline."""

    status: OutcomeStatus
    text: str = ""
    detail: Optional[str] = None
    failure: Optional[FailureKind] = None
    status_code: Optional[int] = None
    attempts: int = 0
    plan: Optional[ChunkPlan] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @classmethod
    def success(cls, text: str, **kwargs) -> "SummaryOutcome":
        return cls(status=OutcomeStatus.OK, text=text, **kwargs)

    @classmethod
    def transient(
        cls,
        detail: str,
        failure: FailureKind = FailureKind.TRANSIENT_BACKEND_FAILURE,
        **kwargs,
    ) -> "SummaryOutcome":
        return cls(status=OutcomeStatus.TRANSIENT_ERROR, detail=detail, failure=failure, **kwargs)

    @classmethod
    def permanent(cls, detail: str, **kwargs) -> "SummaryOutcome":
        return cls(
            status=OutcomeStatus.PERMANENT_ERROR,
            detail=detail,
            failure=FailureKind.PERMANENT_BACKEND_FAILURE,
            **kwargs,
        )


class Headline(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    source: Optional[str] = None
    published_at: Optional[datetime] = None
    description: Optional[str] = None
    url: Optional[str] = None


class HeadlinesResult(BaseModel):
    success: bool
    headlines: List[Headline] = Field(default_factory=list)
    error: Optional[str] = None
    failure: Optional[FailureKind] = None
