"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexedChunk:
    """A chunk held by the relevance index, tagged with its source page."""

    text: str
    page: int


@dataclass(frozen=True)
class SearchHit:
    """A single ranked search result."""

    text: str
    page: int
    score: float
