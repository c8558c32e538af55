"""Overlapping chunker that prefers sentence boundaries.

A sentence boundary is ``.``, ``!`` or ``?`` followed by whitespace and a
capital letter. The cut lands just before the capital letter, so the
whitespace stays with the preceding chunk. When a window holds no usable
boundary the chunk is cut hard at ``max_size``.

Consecutive chunks share exactly ``overlap`` characters: dropping the first
``overlap`` characters of every chunk after the first and concatenating the
rest gives back the input text.
"""

from __future__ import annotations

import logging
import re

from manual_rag.chunking.base import BaseChunker

logger = logging.getLogger(__name__)

MAX_SIZE = 2000
OVERLAP = 200

_SENTENCE_BOUNDARY = re.compile(r"[.!?]\s+(?=[A-Z])")


class SentenceChunker(BaseChunker):
    """Character-bounded chunker with sentence-boundary cuts."""

    def __init__(self, max_size: int = MAX_SIZE, overlap: int = OVERLAP):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        if not 0 <= overlap < max_size:
            raise ValueError(
                f"overlap must be in [0, max_size), got overlap={overlap} max_size={max_size}"
            )
        self.max_size = max_size
        self.overlap = overlap

    def spans(self, text: str) -> list[tuple[int, int]]:
        spans: list[tuple[int, int]] = []
        start = 0
        length = len(text)

        while start < length:
            if length - start <= self.max_size:
                spans.append((start, length))
                break
            end = self._find_cut(text, start)
            spans.append((start, end))
            start = end - self.overlap

        logger.debug(
            "SentenceChunker produced %d chunks from %d chars (max_size=%d, overlap=%d)",
            len(spans), length, self.max_size, self.overlap,
        )
        return spans

    def _find_cut(self, text: str, start: int) -> int:
        """Return the end offset of the chunk starting at ``start``.

        Uses the last boundary in the window that still leaves a chunk longer
        than the overlap; otherwise cuts at ``max_size``.
        """
        limit = start + self.max_size
        cut = limit
        # endpos is exclusive and bounds the lookahead, so a capital letter
        # sitting exactly at ``limit`` is still visible.
        for match in _SENTENCE_BOUNDARY.finditer(text, start, limit + 1):
            if match.end() - start > self.overlap:
                cut = match.end()
        return cut
