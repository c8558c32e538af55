"""Page-text loader for uploaded manuals — PDF and TXT.

Supports both filesystem paths and in-memory bytes from upload handlers.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from pathlib import Path

from manual_rag.config import IngestionSettings
from manual_rag.documents.schemas import LoadResult

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".txt", ".pdf"}


class DocumentLoader:
    """Turn a document into one text string per page.

    Args:
        supported_extensions: Accepted file suffixes, compared case-insensitively.
        max_file_size_mb: Uploads larger than this are rejected. ``None``
            means no limit.
    """

    def __init__(
        self,
        supported_extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
        max_file_size_mb: float | None = None,
    ):
        self.supported_extensions = {ext.lower() for ext in supported_extensions}
        unknown = self.supported_extensions - SUPPORTED_EXTENSIONS
        if unknown:
            raise ValueError(f"No loader for formats: {sorted(unknown)}")
        self.max_file_size_mb = max_file_size_mb

    @classmethod
    def from_settings(cls, settings: IngestionSettings) -> DocumentLoader:
        return cls(settings.supported_formats, settings.max_file_size_mb)

    def load_file(self, path: str | Path) -> LoadResult:
        """Load a document from a filesystem path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        result = self.load_bytes(path.read_bytes(), path.name)
        result.source_path = str(path)
        return result

    def load_bytes(self, data: bytes, filename: str) -> LoadResult:
        """Load a document from in-memory bytes.

        Raises:
            ValueError: unsupported extension or file over the size limit.
        """
        ext = Path(filename).suffix.lower()
        if ext not in self.supported_extensions:
            raise ValueError(
                f"Unsupported format '{ext}'. Supported: {sorted(self.supported_extensions)}"
            )
        size_mb = len(data) / (1024 * 1024)
        if self.max_file_size_mb is not None and size_mb > self.max_file_size_mb:
            raise ValueError(
                f"File is {size_mb:.1f} MB; the limit is {self.max_file_size_mb} MB"
            )

        handler = self._load_pdf if ext == ".pdf" else self._load_txt
        result = handler(data)
        result.format = ext.lstrip(".")
        result.source_path = filename

        logger.info(
            "Loaded %s: %d pages, %d chars", filename, result.page_count, result.char_count
        )
        return result

    # ------------------------------------------------------------------
    # Format-specific loaders
    # ------------------------------------------------------------------

    @staticmethod
    def _load_txt(data: bytes) -> LoadResult:
        try:
            return LoadResult(page_texts=[data.decode("utf-8")])
        except UnicodeDecodeError:
            return LoadResult(
                page_texts=[data.decode("latin-1")],
                warnings=["File is not valid UTF-8; decoded as latin-1"],
            )

    @staticmethod
    def _load_pdf(data: bytes) -> LoadResult:
        import pdfplumber

        warnings: list[str] = []
        page_texts: list[str] = []

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for page in pdf.pages:
                    page_texts.append(page.extract_text() or "")
        except Exception as exc:
            warnings.append(f"PDF extraction error: {exc}")
            return LoadResult(warnings=warnings)

        if not any(p.strip() for p in page_texts):
            warnings.append("PDF contains no extractable text (may be scanned/image-only)")

        return LoadResult(page_texts=page_texts, warnings=warnings)
