"""Ingestion service — pages → chunks → {extract → merge | relevance index}.

Two paths share the chunker:

* ``summarize`` sends every chunk through the batch orchestrator and merges
  the extractions into one ``AggregateDocument``. Short chunks are kept.
* ``index`` splits each page on its own, drops chunks shorter than the
  minimum useful length, and publishes a fresh ``RelevanceIndex`` to the
  session in one swap.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from manual_rag.chunking.base import BaseChunker
from manual_rag.chunking.sentence_chunker import SentenceChunker
from manual_rag.config import Settings
from manual_rag.documents.loader import DocumentLoader
from manual_rag.documents.sanitize import normalize_whitespace, sanitize_document_text
from manual_rag.errors import EmptyDocumentText
from manual_rag.extraction.client import ExtractionClient
from manual_rag.pipeline.merge import merge
from manual_rag.pipeline.orchestrator import BatchOrchestrator
from manual_rag.pipeline.schemas import AggregateDocument, IngestAck
from manual_rag.pipeline.session import DocumentSession, DocumentSnapshot
from manual_rag.retrieval.relevance_index import RelevanceIndex
from manual_rag.retrieval.schemas import IndexedChunk

logger = logging.getLogger(__name__)

MIN_INDEX_CHUNK_LENGTH = 50
INDEX_MAX_SIZE = 500
INDEX_OVERLAP = 0


class IngestionService:
    """Orchestrates document ingestion for both summary and search modes."""

    def __init__(
        self,
        session: DocumentSession,
        orchestrator: BatchOrchestrator | None = None,
        chunker: BaseChunker | None = None,
        index_chunker: BaseChunker | None = None,
        loader: DocumentLoader | None = None,
        min_index_length: int = MIN_INDEX_CHUNK_LENGTH,
    ):
        self.session = session
        self.orchestrator = orchestrator
        self.chunker = chunker or SentenceChunker()
        self.index_chunker = index_chunker or SentenceChunker(INDEX_MAX_SIZE, INDEX_OVERLAP)
        self.loader = loader or DocumentLoader()
        self.min_index_length = min_index_length

    @classmethod
    def from_settings(
        cls,
        client: ExtractionClient,
        session: DocumentSession,
        settings: Settings,
        **kwargs,
    ) -> IngestionService:
        chunking = settings.chunking
        kwargs.setdefault("loader", DocumentLoader.from_settings(settings.ingestion))
        return cls(
            session=session,
            orchestrator=BatchOrchestrator.from_settings(client, settings.batch),
            chunker=SentenceChunker(chunking.max_size, chunking.overlap),
            index_chunker=SentenceChunker(chunking.index_max_size, chunking.index_overlap),
            min_index_length=chunking.min_index_length,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Summary path
    # ------------------------------------------------------------------

    def summarize(
        self, pages: Sequence[str], load_warnings: Sequence[str] = ()
    ) -> AggregateDocument:
        """Extract and merge the whole document.

        ``load_warnings`` from the loader become the error details when the
        document holds no text.

        Raises:
            EmptyDocumentText: no page holds any text.
            RetryBudgetExhausted: a chunk could not be extracted.
        """
        if self.orchestrator is None:
            raise RuntimeError("summarize needs a BatchOrchestrator")
        _require_text(pages, load_warnings)

        clean_pages = [sanitize_document_text(p) for p in pages]
        chunks = self.chunker.chunk_pages(clean_pages)
        logger.info("Split document into %d chunks", len(chunks))

        results = self.orchestrator.process(chunks)
        return merge(results)

    def summarize_file(self, path: str | Path) -> AggregateDocument:
        result = self.loader.load_file(path)
        return self.summarize(result.page_texts, result.warnings)

    def summarize_bytes(self, data: bytes, filename: str) -> AggregateDocument:
        result = self.loader.load_bytes(data, filename)
        return self.summarize(result.page_texts, result.warnings)

    # ------------------------------------------------------------------
    # Search path
    # ------------------------------------------------------------------

    def index(
        self, file_name: str, pages: Sequence[str], load_warnings: Sequence[str] = ()
    ) -> IngestAck:
        """Index the document page by page and make it the active document.

        The previous document stays visible to queries until the new index
        is complete. On failure the session is left untouched. Loader
        warnings are carried into the ack.

        Raises:
            EmptyDocumentText: no page holds any text.
        """
        _require_text(pages, load_warnings)

        index = RelevanceIndex()
        for page_number, page in enumerate(pages, start=1):
            text = normalize_whitespace(sanitize_document_text(page))
            for piece in self.index_chunker.split(text):
                piece = piece.strip()
                if len(piece) >= self.min_index_length:
                    index.add(IndexedChunk(text=piece, page=page_number))

        warnings = list(load_warnings)
        if len(index) == 0:
            warnings.append(
                f"No chunk reached the minimum length of {self.min_index_length} characters"
            )

        self.session.replace(
            DocumentSnapshot(file_name=file_name, page_count=len(pages), index=index)
        )
        logger.info(
            "Processed %s: %d chunks stored from %d pages", file_name, len(index), len(pages)
        )
        return IngestAck(
            file_name=file_name,
            page_count=len(pages),
            total_chunks=len(index),
            warnings=warnings,
        )

    def index_file(self, path: str | Path) -> IngestAck:
        path = Path(path)
        result = self.loader.load_file(path)
        return self.index(path.name, result.page_texts, result.warnings)

    def index_bytes(self, data: bytes, filename: str) -> IngestAck:
        result = self.loader.load_bytes(data, filename)
        return self.index(filename, result.page_texts, result.warnings)


def _require_text(pages: Sequence[str], load_warnings: Sequence[str] = ()) -> None:
    if any(page.strip() for page in pages):
        return
    if load_warnings:
        raise EmptyDocumentText("; ".join(load_warnings))
    raise EmptyDocumentText()
