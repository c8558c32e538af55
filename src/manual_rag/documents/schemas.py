"""Data models for page-text loading."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LoadResult:
    """Result of loading a single document file.

    Attributes:
        page_texts: One text string per page (a single page for TXT).
        source_path: Filesystem path or upload file name.
        format: File extension used (pdf, txt).
        warnings: Non-fatal issues encountered during loading.
    """

    page_texts: list[str] = field(default_factory=list)
    source_path: str | None = None
    format: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)

    @property
    def text(self) -> str:
        return "\n".join(self.page_texts)

    @property
    def char_count(self) -> int:
        return sum(len(p) for p in self.page_texts)
