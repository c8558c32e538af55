"""Data models for the ingestion and query pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from manual_rag.retrieval.schemas import SearchHit

SUMMARY_TITLE = "Technical Manual Summary"


@dataclass
class AggregateDocument:
    """Merged, de-duplicated summary of every chunk's extraction."""

    title: str = SUMMARY_TITLE
    prerequisites: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "prerequisites": list(self.prerequisites),
            "warnings": list(self.warnings),
            "steps": list(self.steps),
        }


@dataclass
class IngestAck:
    """Acknowledgment returned after indexing a document for search."""

    file_name: str
    page_count: int
    total_chunks: int
    warnings: list[str] = field(default_factory=list)


@dataclass
class QueryMetadata:
    total_pages: int
    pages_searched: list[int] = field(default_factory=list)
    file_name: str = ""


@dataclass
class QueryAnswer:
    """Output of the query service."""

    question: str
    answer: str
    relevant_sections: list[SearchHit] = field(default_factory=list)
    metadata: QueryMetadata | None = None
    confidence: float = 0.0
    model: str = ""
