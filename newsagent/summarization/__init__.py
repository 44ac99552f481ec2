"""
Hierarchical summarization of article text.

Provides token budgeting, chunking, the retrying backend client and the
map-reduce orchestrator.
"""

from .budget import TokenBudgeter
from .chunker import ArticleChunker
from .client import RetryState, SummarizationClient
from .service import SummaryService

__all__ = [
    "ArticleChunker",
    "RetryState",
    "SummarizationClient",
    "SummaryService",
    "TokenBudgeter",
]
