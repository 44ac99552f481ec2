from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Setting groups read their own env vars so both the flat name and the
# GROUP__FIELD name in each AliasChoices resolve.
_GROUP_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=False,
    extra="ignore",
    populate_by_name=True,
)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/125.0.0.0 Safari/537.36"
)


def _default_browser_headers() -> dict[str, str]:
    return {
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": "https://www.google.com/",
        "Upgrade-Insecure-Requests": "1",
        "DNT": "1",
    }


class HttpSettings(BaseSettings):
    model_config = _GROUP_CONFIG

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices("HTTP_USER_AGENT", "HTTP__USER_AGENT"),
    )
    headers: dict[str, str] = Field(
        default_factory=_default_browser_headers,
        validation_alias=AliasChoices("HTTP_HEADERS", "HTTP__HEADERS"),
    )
    timeout: float = Field(
        default=15.0,
        validation_alias=AliasChoices("HTTP_TIMEOUT", "HTTP__TIMEOUT"),
    )

    def static_headers(self) -> dict[str, str]:
        """Headers for the plain HTTP client (User-Agent included)."""
        return {"User-Agent": self.user_agent, **self.headers}


class RenderSettings(BaseSettings):
    model_config = _GROUP_CONFIG

    enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("USE_BROWSER_RENDER", "RENDER__ENABLED"),
    )
    headless: bool = Field(
        default=True,
        validation_alias=AliasChoices("RENDER_HEADLESS", "RENDER__HEADLESS"),
    )
    launch_timeout_ms: int = Field(
        default=10_000,
        validation_alias=AliasChoices("RENDER_LAUNCH_TIMEOUT_MS", "RENDER__LAUNCH_TIMEOUT_MS"),
    )
    navigation_timeout_ms: int = Field(
        default=20_000,
        validation_alias=AliasChoices(
            "RENDER_NAVIGATION_TIMEOUT_MS",
            "RENDER__NAVIGATION_TIMEOUT_MS",
        ),
    )
    settle_ms: int = Field(
        default=2_000,
        validation_alias=AliasChoices("RENDER_SETTLE_MS", "RENDER__SETTLE_MS"),
    )
    locale: str = Field(
        default="en-US",
        validation_alias=AliasChoices("RENDER_LOCALE", "RENDER__LOCALE"),
    )
    max_concurrency: int = Field(
        default=2,
        validation_alias=AliasChoices("RENDER_MAX_CONCURRENCY", "RENDER__MAX_CONCURRENCY"),
    )

    @field_validator("max_concurrency", mode="before")
    @classmethod
    def _at_least_one(cls, value):
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return 1


class SummarizationSettings(BaseSettings):
    """Summarization backend and length-budget heuristics.

    The budget numbers are heuristics tuned for English prose against a
    BART-style model with a ~1024 token input window.
    """

    model_config = _GROUP_CONFIG

    api_url: str = Field(
        default="https://api-inference.huggingface.co/models/facebook/bart-large-cnn",
        validation_alias=AliasChoices("SUMMARIZATION_API_URL", "SUMMARIZATION__API_URL"),
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUMMARIZATION_API_KEY",
            "HUGGINGFACE_API_KEY",
            "SUMMARIZATION__API_KEY",
        ),
    )
    timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices("SUMMARIZATION_TIMEOUT", "SUMMARIZATION__TIMEOUT"),
    )

    # Retry policy
    max_attempts: int = Field(
        default=3,
        validation_alias=AliasChoices("SUMMARY_MAX_ATTEMPTS", "SUMMARIZATION__MAX_ATTEMPTS"),
    )
    base_delay: float = Field(
        default=1.0,
        gt=0,
        validation_alias=AliasChoices("SUMMARY_BASE_DELAY", "SUMMARIZATION__BASE_DELAY"),
    )
    max_jitter: float = Field(
        default=0.5,
        ge=0,
        validation_alias=AliasChoices("SUMMARY_MAX_JITTER", "SUMMARIZATION__MAX_JITTER"),
    )

    # Token budgeting
    chars_per_token: int = Field(
        default=4,
        validation_alias=AliasChoices("SUMMARY_CHARS_PER_TOKEN", "SUMMARIZATION__CHARS_PER_TOKEN"),
    )
    max_tokens_per_chunk: int = Field(
        default=900,
        validation_alias=AliasChoices("SUMMARY_CHUNK_SIZE", "SUMMARIZATION__MAX_TOKENS_PER_CHUNK"),
    )
    min_tokens_to_summarize: int = Field(
        default=50,
        validation_alias=AliasChoices(
            "SUMMARY_MIN_TOKENS",
            "SUMMARIZATION__MIN_TOKENS_TO_SUMMARIZE",
        ),
    )
    final_token_budget: int = Field(
        default=300,
        validation_alias=AliasChoices("SUMMARY_FINAL_BUDGET", "SUMMARIZATION__FINAL_TOKEN_BUDGET"),
    )
    max_quick_budget: int = Field(
        default=200,
        validation_alias=AliasChoices("SUMMARY_MAX_QUICK_BUDGET", "SUMMARIZATION__MAX_QUICK_BUDGET"),
    )
    min_quick_budget: int = Field(
        default=50,
        validation_alias=AliasChoices("SUMMARY_MIN_QUICK_BUDGET", "SUMMARIZATION__MIN_QUICK_BUDGET"),
    )
    quick_budget_ratio: float = Field(
        default=0.25,
        validation_alias=AliasChoices(
            "SUMMARY_QUICK_BUDGET_RATIO",
            "SUMMARIZATION__QUICK_BUDGET_RATIO",
        ),
    )
    min_length_fraction: float = Field(
        default=0.8,
        validation_alias=AliasChoices(
            "SUMMARY_MIN_LENGTH_FRACTION",
            "SUMMARIZATION__MIN_LENGTH_FRACTION",
        ),
    )
    min_length_floor: int = Field(
        default=50,
        validation_alias=AliasChoices("SUMMARY_MIN_LENGTH", "SUMMARIZATION__MIN_LENGTH_FLOOR"),
    )

    # Generation parameters forwarded to the backend
    length_penalty: float = Field(
        default=0.8,
        validation_alias=AliasChoices("SUMMARY_LENGTH_PENALTY", "SUMMARIZATION__LENGTH_PENALTY"),
    )
    early_stopping: bool = Field(
        default=False,
        validation_alias=AliasChoices("SUMMARY_EARLY_STOPPING", "SUMMARIZATION__EARLY_STOPPING"),
    )
    no_repeat_ngram_size: int = Field(
        default=3,
        validation_alias=AliasChoices(
            "SUMMARY_NO_REPEAT_NGRAM_SIZE",
            "SUMMARIZATION__NO_REPEAT_NGRAM_SIZE",
        ),
    )

    chunk_concurrency: int = Field(
        default=1,
        validation_alias=AliasChoices("SUMMARY_MAX_CONCURRENCY", "SUMMARIZATION__CHUNK_CONCURRENCY"),
    )

    @field_validator(
        "max_attempts",
        "chars_per_token",
        "max_tokens_per_chunk",
        "chunk_concurrency",
        mode="before",
    )
    @classmethod
    def _positive_int(cls, value):
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return 1

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value):
        if value is None:
            return None
        if isinstance(value, str) and value.strip() in ("", "-"):
            return None
        return value

    @model_validator(mode="after")
    def _jitter_below_base_delay(self):
        # Backoff delays only increase strictly while jitter stays under the base delay
        if self.max_jitter >= self.base_delay:
            self.max_jitter = self.base_delay / 2
        return self


class NewsApiSettings(BaseSettings):
    model_config = _GROUP_CONFIG

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("NEWS_API_KEY", "NEWSAPI__API_KEY"),
    )
    base_url: str = Field(
        default="https://newsapi.org",
        validation_alias=AliasChoices("NEWS_API_BASE", "NEWSAPI__BASE_URL"),
    )
    country: str = Field(
        default="us",
        validation_alias=AliasChoices("NEWS_API_COUNTRY", "NEWSAPI__COUNTRY"),
    )
    page_size: int = Field(
        default=5,
        validation_alias=AliasChoices("NEWS_API_PAGE_SIZE", "NEWSAPI__PAGE_SIZE"),
    )


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables.

    Uses pydantic-settings to support .env and environment overrides.
    """

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("HOST"))
    port: int = Field(default=8000, validation_alias=AliasChoices("PORT"))
    http: HttpSettings = Field(default_factory=HttpSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    summarization: SummarizationSettings = Field(default_factory=SummarizationSettings)
    newsapi: NewsApiSettings = Field(default_factory=NewsApiSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
