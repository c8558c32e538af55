"""Structured extraction over the remote model."""

from manual_rag.extraction.client import ExtractionClient
from manual_rag.extraction.parser import locate_json_block, parse_extraction
from manual_rag.extraction.schemas import ExtractionResult

__all__ = ["ExtractionClient", "ExtractionResult", "locate_json_block", "parse_extraction"]
