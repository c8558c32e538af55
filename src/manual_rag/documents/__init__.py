"""Document loading and text clean-up."""

from manual_rag.documents.loader import SUPPORTED_EXTENSIONS, DocumentLoader
from manual_rag.documents.sanitize import normalize_whitespace, sanitize_document_text
from manual_rag.documents.schemas import LoadResult

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "DocumentLoader",
    "LoadResult",
    "normalize_whitespace",
    "sanitize_document_text",
]
