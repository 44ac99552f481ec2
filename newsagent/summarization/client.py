"""HTTP client for the summarization backend, with retry and backoff."""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ..core.config import SummarizationSettings
from ..core.text import normalize_for_summary
from ..models import FailureKind, OutcomeStatus, SummaryOutcome
from .budget import TokenBudgeter

logger = logging.getLogger(__name__)

_ERROR_BODY_PREVIEW = 300


@dataclass
class RetryState:
    """Attempt bookkeeping for a single ``summarize`` call."""

    max_attempts: int
    attempt: int = 0
    last_error: Optional[SummaryOutcome] = None

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


class SummarizationClient:
    """Summarizes one text span via the hosted inference API.

    Response classification:
    - 2xx with a non-empty ``summary_text`` in the first list element: ok
    - 429 and 5xx, timeouts, connection errors, unparsable or empty 2xx
      bodies: transient, retried with exponential backoff plus jitter
    - any other non-2xx: permanent, returned immediately
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: SummarizationSettings,
        budgeter: Optional[TokenBudgeter] = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Optional[Callable[[], float]] = None,
    ):
        self.client = client
        self.settings = settings
        self.budgeter = budgeter or TokenBudgeter(settings)
        self._sleep = sleep
        self._jitter = jitter or (lambda: random.uniform(0.0, settings.max_jitter))

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key is not None:
            headers["Authorization"] = f"Bearer {self.settings.api_key.get_secret_value()}"
        return headers

    def build_payload(self, text: str, max_length: int, min_length: int) -> Dict[str, Any]:
        return {
            "inputs": text,
            "parameters": {
                "min_length": min_length,
                "max_length": max_length,
                "length_penalty": self.settings.length_penalty,
                "early_stopping": self.settings.early_stopping,
                "no_repeat_ngram_size": self.settings.no_repeat_ngram_size,
            },
        }

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        return self.settings.base_delay * (2 ** (attempt - 1)) + self._jitter()

    async def summarize(
        self,
        text: str,
        max_tokens: int,
        min_length_fraction: Optional[float] = None,
    ) -> SummaryOutcome:
        cleaned = normalize_for_summary(text)
        if not cleaned:
            return SummaryOutcome.permanent("nothing to summarize: input text is empty")

        max_length = max(1, max_tokens)
        min_length = self.budgeter.min_length(max_length, min_length_fraction)
        payload = self.build_payload(cleaned, max_length, min_length)
        logger.debug(
            "Prepared summarization payload",
            extra={
                "input_chars": len(cleaned),
                "estimated_tokens": self.budgeter.estimate_tokens(cleaned),
                "max_length": max_length,
                "min_length": min_length,
            },
        )

        state = RetryState(max_attempts=self.settings.max_attempts)
        while not state.exhausted:
            state.attempt += 1
            outcome = await self._attempt(payload, state.attempt)

            if outcome.status is not OutcomeStatus.TRANSIENT_ERROR:
                return outcome.model_copy(update={"attempts": state.attempt})

            state.last_error = outcome
            if state.exhausted:
                break

            delay = self.backoff_delay(state.attempt)
            logger.warning(
                f"Summarization attempt {state.attempt} failed; retrying in {delay:.2f}s",
                extra={"attempt": state.attempt, "delay": delay, "detail": outcome.detail},
            )
            await self._sleep(delay)

        last = state.last_error
        logger.error(
            "Summarization failed after retries",
            extra={"attempts": state.attempt, "detail": last.detail if last else None},
        )
        return SummaryOutcome.transient(
            f"gave up after {state.attempt} attempts: {last.detail if last else 'unknown error'}",
            failure=last.failure if last else FailureKind.TRANSIENT_BACKEND_FAILURE,
            status_code=last.status_code if last else None,
            attempts=state.attempt,
        )

    async def _attempt(self, payload: Dict[str, Any], attempt: int) -> SummaryOutcome:
        logger.info(
            "Waiting for summarization response",
            extra={"attempt": attempt, "timeout": self.settings.timeout},
        )
        try:
            response = await self.client.post(
                self.settings.api_url,
                json=payload,
                headers=self.headers,
                timeout=self.settings.timeout,
            )
        except httpx.TimeoutException:
            return SummaryOutcome.transient(
                f"request timed out after {self.settings.timeout:g}s"
            )
        except httpx.HTTPError as exc:
            return SummaryOutcome.transient(f"network error: {exc.__class__.__name__}: {exc}")

        return self._classify(response)

    def _classify(self, response: httpx.Response) -> SummaryOutcome:
        code = response.status_code
        if code == 429 or code >= 500:
            return SummaryOutcome.transient(
                f"HTTP {code}: {response.text[:_ERROR_BODY_PREVIEW]}", status_code=code
            )
        if not response.is_success:
            logger.error(
                "Summarization backend rejected request",
                extra={"status_code": code, "body": response.text[:_ERROR_BODY_PREVIEW]},
            )
            return SummaryOutcome.permanent(
                f"HTTP {code}: {response.text[:_ERROR_BODY_PREVIEW]}", status_code=code
            )

        try:
            data = response.json()
        except ValueError:
            return SummaryOutcome.transient(
                "response body was not valid JSON",
                failure=FailureKind.MALFORMED_RESPONSE,
                status_code=code,
            )

        summary = self._summary_text(data)
        if not summary:
            return SummaryOutcome.transient(
                "response had no summary_text",
                failure=FailureKind.MALFORMED_RESPONSE,
                status_code=code,
            )

        logger.info(
            "Summary received",
            extra={"summary_tokens": self.budgeter.estimate_tokens(summary)},
        )
        return SummaryOutcome.success(summary, status_code=code)

    @staticmethod
    def _summary_text(data: Any) -> str:
        if not isinstance(data, list) or not data:
            return ""
        first = data[0]
        if not isinstance(first, dict):
            return ""
        value = first.get("summary_text")
        if not isinstance(value, str):
            return ""
        return value.strip()
