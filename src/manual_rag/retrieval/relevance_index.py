"""In-memory lexical relevance index.

Scores chunks by term frequency weighted by query coverage, plus a small
bonus when the preceding chunk also mentions the query terms. This is a
deterministic keyword scorer, not semantic search.
"""

from __future__ import annotations

import logging

from manual_rag.retrieval.schemas import IndexedChunk, SearchHit

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
MIN_TOKEN_LENGTH = 3
CONTEXT_BONUS = 0.5


def tokenize_query(query: str) -> list[str]:
    """Lower-case, split on whitespace, drop tokens of two chars or fewer.

    Repeated tokens are kept once, in first-seen order.
    """
    tokens = [t for t in query.lower().split() if len(t) >= MIN_TOKEN_LENGTH]
    return list(dict.fromkeys(tokens))


def score_chunk(terms: list[str], text: str, previous_text: str | None = None) -> float:
    """Score one lower-cased chunk against the query terms.

    ``occurrences * coverage + CONTEXT_BONUS * terms_in_previous_chunk``.
    A chunk that matches none of the terms itself scores 0 regardless of its
    neighbour.
    """
    if not terms:
        return 0.0

    occurrences = sum(text.count(term) for term in terms)
    if occurrences == 0:
        return 0.0

    found = sum(1 for term in terms if term in text)
    score = occurrences * (found / len(terms))

    if previous_text is not None:
        score += CONTEXT_BONUS * sum(1 for term in terms if term in previous_text)
    return score


class RelevanceIndex:
    """Ordered store of page-tagged chunks with keyword search."""

    def __init__(self) -> None:
        self._chunks: list[IndexedChunk] = []
        self._lowered: list[str] = []
        self.total_chunks = 0

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> list[IndexedChunk]:
        return list(self._chunks)

    @property
    def pages(self) -> list[int]:
        """Distinct pages held, in arrival order."""
        return list(dict.fromkeys(c.page for c in self._chunks))

    def add(self, chunk: IndexedChunk) -> None:
        self._chunks.append(chunk)
        self._lowered.append(chunk.text.lower())
        self.total_chunks += 1

    def clear(self) -> None:
        self._chunks = []
        self._lowered = []
        self.total_chunks = 0
        logger.info("Relevance index cleared")

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> list[SearchHit]:
        """Return up to ``top_k`` chunks ranked by descending score.

        Ties keep arrival order. Chunks scoring 0 are never returned.
        """
        terms = tokenize_query(query)
        if not terms or top_k <= 0 or not self._chunks:
            return []

        hits: list[SearchHit] = []
        for i, (chunk, text) in enumerate(zip(self._chunks, self._lowered, strict=True)):
            previous = self._lowered[i - 1] if i > 0 else None
            score = score_chunk(terms, text, previous)
            if score > 0:
                hits.append(SearchHit(text=chunk.text, page=chunk.page, score=score))

        # list.sort is stable, so equal scores stay in arrival order
        hits.sort(key=lambda h: h.score, reverse=True)

        logger.info(
            "Search matched %d of %d chunks for %d terms (top_k=%d)",
            len(hits), len(self._chunks), len(terms), top_k,
        )
        return hits[:top_k]
