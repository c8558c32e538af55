"""Abstract base class for chunkers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Sequence

from manual_rag.chunking.schemas import Chunk

PAGE_SEPARATOR = "\n"


class BaseChunker(ABC):
    """Interface for document chunking strategies."""

    @abstractmethod
    def spans(self, text: str) -> list[tuple[int, int]]:
        """Return ``(start, end)`` offsets of each chunk in ``text``."""

    def split(self, text: str) -> list[str]:
        """Split text into chunk strings."""
        return [text[start:end] for start, end in self.spans(text)]

    def chunk_pages(self, pages: Sequence[str]) -> list[Chunk]:
        """Chunk a whole document given as one string per page.

        Pages are joined with a newline and split as one text, so chunks may
        cross page breaks. Each chunk is tagged with the 1-based page its
        first character came from.
        """
        text = PAGE_SEPARATOR.join(pages)
        page_starts: list[int] = []
        offset = 0
        for page in pages:
            page_starts.append(offset)
            offset += len(page) + len(PAGE_SEPARATOR)

        chunks = []
        for i, (start, end) in enumerate(self.spans(text)):
            page = max(bisect_right(page_starts, start), 1)
            chunks.append(Chunk(text=text[start:end], source_page=page, sequence_index=i))
        return chunks

    @classmethod
    def strategy_name(cls) -> str:
        """Return human-readable strategy name."""
        return cls.__name__
