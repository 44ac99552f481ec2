"""Test configuration settings classes."""

import pytest
from pydantic import ValidationError

from newsagent.core.config import (
    AppSettings,
    HttpSettings,
    NewsApiSettings,
    RenderSettings,
    SummarizationSettings,
    get_settings,
)
from newsagent.summarization import SummarizationClient


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Clear environment variables the settings read."""
    env_vars_to_clear = [
        "LOG_LEVEL", "HOST", "PORT",
        "HTTP_USER_AGENT", "HTTP_HEADERS", "HTTP_TIMEOUT", "HTTP__TIMEOUT",
        "USE_BROWSER_RENDER", "RENDER__ENABLED", "RENDER_MAX_CONCURRENCY",
        "RENDER_NAVIGATION_TIMEOUT_MS", "RENDER__SETTLE_MS",
        "SUMMARIZATION_API_URL", "SUMMARIZATION_API_KEY", "HUGGINGFACE_API_KEY",
        "SUMMARIZATION__API_KEY", "SUMMARY_MAX_ATTEMPTS", "SUMMARIZATION__MAX_ATTEMPTS",
        "SUMMARY_CHUNK_SIZE", "SUMMARY_MAX_CONCURRENCY", "SUMMARY_BASE_DELAY", "SUMMARY_MAX_JITTER",
        "NEWS_API_KEY", "NEWSAPI__API_KEY", "NEWS_API_COUNTRY",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


class TestHttpSettings:
    def test_default_values(self):
        http = HttpSettings()
        assert http.user_agent.startswith("Mozilla/5.0")
        assert http.timeout == 15.0
        assert http.headers["Accept-Language"] == "en-US,en;q=0.9"

    def test_static_headers_include_user_agent(self):
        headers = HttpSettings(user_agent="TestAgent/1.0").static_headers()
        assert headers["User-Agent"] == "TestAgent/1.0"
        assert headers["Referer"] == "https://www.google.com/"

    def test_headers_from_json_env(self, monkeypatch):
        monkeypatch.setenv("HTTP_HEADERS", '{"Accept-Language": "de-DE"}')
        assert HttpSettings().headers == {"Accept-Language": "de-DE"}


class TestRenderSettings:
    def test_default_values(self):
        render = RenderSettings()
        assert render.enabled is True
        assert render.headless is True
        assert render.navigation_timeout_ms == 20_000
        assert render.settle_ms == 2_000
        assert render.max_concurrency == 2

    def test_flat_and_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("USE_BROWSER_RENDER", "false")
        monkeypatch.setenv("RENDER__SETTLE_MS", "500")

        settings = AppSettings()
        assert settings.render.enabled is False
        assert settings.render.settle_ms == 500

    def test_concurrency_is_at_least_one(self, monkeypatch):
        monkeypatch.setenv("RENDER_MAX_CONCURRENCY", "0")
        assert RenderSettings().max_concurrency == 1


class TestSummarizationSettings:
    def test_default_values(self):
        s = SummarizationSettings()
        assert s.api_url.endswith("facebook/bart-large-cnn")
        assert s.api_key is None
        assert s.max_attempts == 3
        assert s.chars_per_token == 4
        assert s.max_tokens_per_chunk == 900
        assert s.min_tokens_to_summarize == 50
        assert s.final_token_budget == 300
        assert s.chunk_concurrency == 1

    def test_api_key_aliases(self, monkeypatch):
        monkeypatch.setenv("HUGGINGFACE_API_KEY", "hf_from_env")
        settings = AppSettings()
        assert settings.summarization.api_key.get_secret_value() == "hf_from_env"

    @pytest.mark.parametrize("value", ["", "   ", "-"])
    def test_blank_api_key_is_none(self, value):
        assert SummarizationSettings(api_key=value).api_key is None

    def test_api_key_not_in_repr(self):
        settings = SummarizationSettings(api_key="hf_secret")
        assert "hf_secret" not in repr(settings)

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("SUMMARIZATION__MAX_ATTEMPTS", "5")
        monkeypatch.setenv("SUMMARY_CHUNK_SIZE", "500")

        settings = AppSettings()
        assert settings.summarization.max_attempts == 5
        assert settings.summarization.max_tokens_per_chunk == 500

    def test_jitter_is_kept_below_base_delay(self, monkeypatch):
        monkeypatch.setenv("SUMMARY_BASE_DELAY", "1")
        monkeypatch.setenv("SUMMARY_MAX_JITTER", "3")

        settings = SummarizationSettings()
        assert settings.max_jitter == 0.5

        # Worst case: full jitter on the first retry, none on the second
        client = SummarizationClient(None, settings, jitter=iter([settings.max_jitter, 0.0]).__next__)
        first, second = client.backoff_delay(1), client.backoff_delay(2)
        assert second > first

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_base_delay_must_be_positive(self, monkeypatch, value):
        monkeypatch.setenv("SUMMARY_BASE_DELAY", value)
        with pytest.raises(ValidationError):
            SummarizationSettings()

    def test_negative_jitter_rejected(self):
        with pytest.raises(ValidationError):
            SummarizationSettings(max_jitter=-0.1)

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("SUMMARIZATION_TIMEOUT", "soon")
        with pytest.raises(ValidationError):
            SummarizationSettings()


class TestNewsApiSettings:
    def test_defaults(self):
        news = NewsApiSettings()
        assert news.api_key is None
        assert news.base_url == "https://newsapi.org"
        assert news.country == "us"
        assert news.page_size == 5

    def test_env(self, monkeypatch):
        monkeypatch.setenv("NEWS_API_KEY", "key123")
        monkeypatch.setenv("NEWS_API_COUNTRY", "gb")
        news = AppSettings().newsapi
        assert news.api_key.get_secret_value() == "key123"
        assert news.country == "gb"


class TestAppSettings:
    def test_reads_dotenv(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\nSUMMARY_MAX_ATTEMPTS=4\n")

        settings = AppSettings()
        assert settings.log_level == "DEBUG"
        assert settings.summarization.max_attempts == 4

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
