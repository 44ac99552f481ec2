"""SummaryService - Orchestrator for summary generation."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from ..core.text import normalize_for_summary
from ..models import ChunkPlan, ChunkSummary, SummaryOutcome, SummaryStrategy
from .budget import TokenBudgeter
from .chunker import ArticleChunker
from .client import SummarizationClient

logger = logging.getLogger(__name__)


class SummaryService:
    """Two-level map-reduce summarization of article text.

    Short inputs are returned verbatim, inputs that fit one chunk get a
    single backend call, and longer inputs are chunked, summarized per chunk
    and reduced with exactly one more call. The first failed call aborts the
    run; a partial summary is never returned.
    """

    def __init__(
        self,
        client: SummarizationClient,
        budgeter: TokenBudgeter,
        chunker: Optional[ArticleChunker] = None,
        chunk_concurrency: int = 1,
    ):
        """Initialize summary service.

        Args:
            client: Backend client (handles retries per call)
            budgeter: Token estimation and length budgets
            chunker: Splits long text into chunks
            chunk_concurrency: Chunks summarized at once (1 = sequential)
        """
        self.client = client
        self.budgeter = budgeter
        self.chunker = chunker or ArticleChunker()
        self.chunk_concurrency = max(1, chunk_concurrency)

    async def summarize(self, article_text: str) -> SummaryOutcome:
        cleaned = normalize_for_summary(article_text)
        plan = self.budgeter.plan(cleaned)
        fraction = self.budgeter.settings.min_length_fraction

        if plan.strategy is SummaryStrategy.VERBATIM:
            logger.info(
                "Article very short, returning cleaned text without summarization",
                extra={"estimated_tokens": plan.estimated_tokens},
            )
            return SummaryOutcome.success(cleaned, plan=plan)

        if plan.strategy is SummaryStrategy.SINGLE_PASS:
            logger.info(
                "Article fits within a single chunk, skipping chunking",
                extra={
                    "estimated_tokens": plan.estimated_tokens,
                    "token_budget": plan.token_budget_per_chunk,
                },
            )
            outcome = await self.client.summarize(cleaned, plan.token_budget_per_chunk, fraction)
            return self._finish(outcome, plan)

        chunks = self.chunker.chunk(cleaned, plan.chunk_count)
        logger.info(
            "Prepared article text",
            extra={
                "chunk_count": len(chunks),
                "chars_per_chunk": plan.chars_per_chunk,
                "token_budget": plan.token_budget_per_chunk,
            },
        )

        chunk_summaries, failure = await self._summarize_chunks(chunks, plan)
        if failure is not None:
            return self._finish(failure, plan)

        combined = " ".join(item.summary_text for item in chunk_summaries)
        logger.info(
            "Combining chunk summaries into final summary",
            extra={"combined_chars": len(combined), "token_budget": self.budgeter.final_budget},
        )
        outcome = await self.client.summarize(combined, self.budgeter.final_budget, fraction)
        if not outcome.ok:
            outcome = outcome.model_copy(update={"detail": f"final reduction: {outcome.detail}"})
        return self._finish(outcome, plan)

    async def _summarize_chunks(
        self, chunks: Sequence[str], plan: ChunkPlan
    ) -> Tuple[List[ChunkSummary], Optional[SummaryOutcome]]:
        """Summarize every chunk, preserving source order.

        Returns:
            Tuple of (chunk summaries, first failure in source order or None)
        """
        total = len(chunks)

        if self.chunk_concurrency == 1:
            summaries: List[ChunkSummary] = []
            for index, chunk in enumerate(chunks, start=1):
                outcome = await self._summarize_chunk(index, total, chunk, plan)
                if not outcome.ok:
                    return summaries, self._chunk_failure(index, total, outcome)
                summaries.append(ChunkSummary(index=index, source_chunk=chunk, summary_text=outcome.text))
            return summaries, None

        slots = asyncio.Semaphore(self.chunk_concurrency)
        abort = asyncio.Event()

        async def run(index: int, chunk: str) -> Optional[SummaryOutcome]:
            async with slots:
                if abort.is_set():
                    return None
                outcome = await self._summarize_chunk(index, total, chunk, plan)
                if not outcome.ok:
                    abort.set()
                return outcome

        outcomes = await asyncio.gather(
            *(run(index, chunk) for index, chunk in enumerate(chunks, start=1))
        )

        summaries = []
        for index, (chunk, outcome) in enumerate(zip(chunks, outcomes), start=1):
            if outcome is None:
                continue
            if not outcome.ok:
                return summaries, self._chunk_failure(index, total, outcome)
            summaries.append(ChunkSummary(index=index, source_chunk=chunk, summary_text=outcome.text))
        return summaries, None

    async def _summarize_chunk(
        self, index: int, total: int, chunk: str, plan: ChunkPlan
    ) -> SummaryOutcome:
        logger.info(
            f"Summarizing chunk #{index}/{total}",
            extra={
                "chunk_index": index,
                "chunk_chars": len(chunk),
                "chunk_tokens": self.budgeter.estimate_tokens(chunk),
                "token_budget": plan.token_budget_per_chunk,
            },
        )
        outcome = await self.client.summarize(
            chunk,
            plan.token_budget_per_chunk,
            self.budgeter.settings.min_length_fraction,
        )
        if outcome.ok:
            logger.debug(f"Chunk #{index} summary: {outcome.text}")
        return outcome

    @staticmethod
    def _chunk_failure(index: int, total: int, outcome: SummaryOutcome) -> SummaryOutcome:
        logger.error(
            "Aborting summarization: chunk failed",
            extra={"chunk_index": index, "detail": outcome.detail},
        )
        return outcome.model_copy(update={"detail": f"chunk {index}/{total}: {outcome.detail}"})

    def _finish(self, outcome: SummaryOutcome, plan: ChunkPlan) -> SummaryOutcome:
        if outcome.ok:
            logger.info(
                "Final summary ready",
                extra={
                    "strategy": plan.strategy.value,
                    "summary_tokens": self.budgeter.estimate_tokens(outcome.text),
                },
            )
        return outcome.model_copy(update={"plan": plan})
