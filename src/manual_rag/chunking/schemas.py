"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A bounded piece of the document text, the unit of extraction work."""

    text: str
    source_page: int = 1
    sequence_index: int = 0
