"""Query service — question → relevance search → grounded answer.

No remote call is made when no document is loaded or when the search finds
nothing.
"""

from __future__ import annotations

import logging

from manual_rag.extraction.client import ExtractionClient
from manual_rag.extraction.prompts import build_grounding_prompt
from manual_rag.pipeline.schemas import QueryAnswer, QueryMetadata
from manual_rag.pipeline.session import DocumentSession
from manual_rag.retrieval.relevance_index import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

NO_MATCH_ANSWER = (
    "I couldn't find any relevant information about that in the manual. "
    "Please try rephrasing your question or using different keywords."
)


class QueryService:
    """Answers questions against the session's active document."""

    def __init__(
        self,
        session: DocumentSession,
        client: ExtractionClient,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.session = session
        self.client = client
        self.top_k = top_k

    def answer(self, question: str) -> QueryAnswer:
        """Answer ``question`` from the top-ranked sections of the manual.

        Raises:
            ValueError: the question is blank.
            NoDocumentLoaded: nothing has been indexed.
            TransportError, RateLimitedError: the model call failed. The
                session is not affected and the query can be retried.
        """
        if not question or not question.strip():
            raise ValueError("No search query provided")

        snapshot = self.session.require()
        hits = snapshot.index.search(question, top_k=self.top_k)
        metadata = QueryMetadata(
            total_pages=snapshot.page_count,
            pages_searched=list(dict.fromkeys(h.page for h in hits)),
            file_name=snapshot.file_name,
        )

        if not hits:
            logger.info("No relevant sections for query; skipping model call")
            return QueryAnswer(
                question=question,
                answer=NO_MATCH_ANSWER,
                metadata=metadata,
                confidence=0.0,
            )

        prompt = build_grounding_prompt(question, hits)
        answer = self.client.answer(prompt)

        logger.info(
            "Query answered from %d sections on pages %s", len(hits), metadata.pages_searched
        )
        return QueryAnswer(
            question=question,
            answer=answer.strip(),
            relevant_sections=hits,
            metadata=metadata,
            confidence=hits[0].score,
            model=self.client.model,
        )
