"""Process-wide holder of the single active document.

Uploads build a complete ``DocumentSnapshot`` off to the side and publish it
with one reference swap under a lock, so readers see either the previous
document, the new one, or nothing, never a half-built index.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from manual_rag.errors import NoDocumentLoaded
from manual_rag.retrieval.relevance_index import RelevanceIndex
from manual_rag.retrieval.schemas import IndexedChunk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    """One loaded document. The index is not modified after publishing."""

    file_name: str
    page_count: int
    index: RelevanceIndex

    @property
    def total_chunks(self) -> int:
        return len(self.index)

    @property
    def chunks(self) -> list[IndexedChunk]:
        return self.index.chunks


class DocumentSession:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: DocumentSnapshot | None = None

    @property
    def is_loaded(self) -> bool:
        snapshot = self.snapshot()
        return snapshot is not None and snapshot.total_chunks > 0

    def snapshot(self) -> DocumentSnapshot | None:
        with self._lock:
            return self._snapshot

    def require(self) -> DocumentSnapshot:
        """Return the active snapshot or raise ``NoDocumentLoaded``."""
        snapshot = self.snapshot()
        if snapshot is None or snapshot.total_chunks == 0:
            raise NoDocumentLoaded()
        return snapshot

    def replace(self, snapshot: DocumentSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "Active document is now %s (%d pages, %d chunks)",
            snapshot.file_name, snapshot.page_count, snapshot.total_chunks,
        )

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
        logger.info("Document session cleared")
