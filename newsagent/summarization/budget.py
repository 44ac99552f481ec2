"""Token estimation and length budgets for summarization calls."""
from __future__ import annotations

import math

from ..core.config import SummarizationSettings
from ..models import ChunkPlan, SummaryStrategy


class TokenBudgeter:
    """Derives a ``ChunkPlan`` and per-call length budgets from text length.

    Token counts are estimated as ``len(text) // chars_per_token``; there is
    no real tokenizer. ``max_tokens_per_chunk`` sits below the backend's true
    input limit to absorb the estimation error.
    """

    def __init__(self, settings: SummarizationSettings):
        self.settings = settings

    def estimate_tokens(self, text: str) -> int:
        return len(text) // self.settings.chars_per_token

    def plan(self, text: str) -> ChunkPlan:
        s = self.settings
        total_chars = len(text)
        estimated = self.estimate_tokens(text)

        if estimated < s.min_tokens_to_summarize:
            return ChunkPlan(
                strategy=SummaryStrategy.VERBATIM,
                estimated_tokens=estimated,
                chunk_count=1,
                chars_per_chunk=max(1, total_chars),
                token_budget_per_chunk=max(1, estimated),
            )

        chunk_count = math.ceil(estimated / s.max_tokens_per_chunk)
        if chunk_count <= 1:
            return ChunkPlan(
                strategy=SummaryStrategy.SINGLE_PASS,
                estimated_tokens=estimated,
                chunk_count=1,
                chars_per_chunk=total_chars,
                token_budget_per_chunk=self.quick_budget(estimated),
            )

        return ChunkPlan(
            strategy=SummaryStrategy.MAP_REDUCE,
            estimated_tokens=estimated,
            chunk_count=chunk_count,
            chars_per_chunk=math.ceil(total_chars / chunk_count),
            # Keeps the concatenated chunk summaries within one backend input
            token_budget_per_chunk=max(1, s.max_tokens_per_chunk // chunk_count),
        )

    def quick_budget(self, estimated_tokens: int) -> int:
        """Single-pass budget: a fraction of the input, clamped."""
        s = self.settings
        scaled = int(estimated_tokens * s.quick_budget_ratio)
        return min(s.max_quick_budget, max(s.min_quick_budget, scaled))

    @property
    def final_budget(self) -> int:
        return self.settings.final_token_budget

    def min_length(self, max_length: int, fraction: float | None = None) -> int:
        """Minimum output length for a call, never above ``max_length``."""
        if fraction is None:
            fraction = self.settings.min_length_fraction
        floor = self.settings.min_length_floor
        return min(max_length, max(floor, int(max_length * fraction)))
