"""
Fake implementations for testing.

This package contains fake (test double) implementations of the pipeline's
external collaborators, following the "fakes over mocks" philosophy. Fakes
are simplified working implementations that behave like the real thing but
avoid network access and browser processes.

Key fakes:
- ScriptedBackend: summarization backend on httpx.MockTransport
- RecordingSleep: records backoff delays instead of sleeping
- FakePlaywrightDriver: in-memory stand-in for async_playwright
- StubRenderFetcher, FakeExtractionService, FakeSummaryService,
  FakeHeadlinesClient: service doubles for orchestration and route tests
"""

from tests.fakes.backend import RecordingSleep, ScriptedBackend, summary_response
from tests.fakes.browser import FakeBrowser, FakePlaywrightDriver
from tests.fakes.services import (
    FakeExtractionService,
    FakeHeadlinesClient,
    FakeSummaryService,
    StubRenderFetcher,
)

__all__ = [
    "FakeBrowser",
    "FakeExtractionService",
    "FakeHeadlinesClient",
    "FakePlaywrightDriver",
    "FakeSummaryService",
    "RecordingSleep",
    "ScriptedBackend",
    "StubRenderFetcher",
    "summary_response",
]
