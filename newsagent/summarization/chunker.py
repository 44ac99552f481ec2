"""Article chunking for summary generation."""
from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)


class ArticleChunker:
    """Splits normalized text into contiguous, near-equal character spans.

    The spans partition the input exactly: joining them gives back the
    original text. Sizes differ by at most one character, so none exceeds
    ``ceil(len(text) / chunk_count)``.
    """

    def chunk(self, text: str, chunk_count: int) -> List[str]:
        """Split ``text`` into ``chunk_count`` pieces.

        Args:
            text: Text to split
            chunk_count: Desired number of chunks (values below 1 mean 1)

        Returns:
            List of chunks in source order (empty for empty text)
        """
        if not text:
            return []

        chunk_count = max(1, min(chunk_count, len(text)))
        base, extra = divmod(len(text), chunk_count)

        chunks: List[str] = []
        start = 0
        for index in range(chunk_count):
            size = base + (1 if index < extra else 0)
            chunks.append(text[start:start + size])
            start += size

        logger.debug("Segmented article", extra={"chunk_count": len(chunks)})
        return chunks
