from __future__ import annotations

from pathlib import Path

import pytest

from newsagent.core.config import (
    AppSettings,
    HttpSettings,
    NewsApiSettings,
    RenderSettings,
    SummarizationSettings,
    get_settings,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep a developer's .env out of the tests and reset the settings cache."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def summarization_settings() -> SummarizationSettings:
    return SummarizationSettings(
        api_url="https://inference.test/models/bart",
        api_key="hf_test_token",
        max_attempts=3,
        base_delay=1.0,
        max_jitter=0.5,
    )


@pytest.fixture
def render_settings() -> RenderSettings:
    return RenderSettings(
        enabled=True,
        navigation_timeout_ms=20_000,
        settle_ms=2_000,
        locale="en-US",
        max_concurrency=2,
    )


@pytest.fixture
def app_settings(summarization_settings, render_settings) -> AppSettings:
    return AppSettings(
        http=HttpSettings(),
        render=render_settings,
        summarization=summarization_settings,
        newsapi=NewsApiSettings(api_key="news_test_key", base_url="https://newsapi.test"),
    )


@pytest.fixture
def recording_sleep():
    """
    Provide a RecordingSleep to inject into SummarizationClient.

    Example:
        def test_backoff(recording_sleep, summarization_settings):
            client = SummarizationClient(http, summarization_settings, sleep=recording_sleep)
            ...
            assert recording_sleep.delays == [1.25, 2.25]
    """
    from tests.fakes import RecordingSleep
    return RecordingSleep()


@pytest.fixture
def fake_driver():
    """
    Provide a FakePlaywrightDriver serving an empty page.

    Set ``fake_driver.browser.html`` to control the rendered document.
    """
    from tests.fakes import FakePlaywrightDriver
    return FakePlaywrightDriver()
