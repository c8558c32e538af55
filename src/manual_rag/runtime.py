"""Process-wide services shared by the upload and query entry points.

The document session lives here so that an upload handled by one entry
point is visible to queries handled by another in the same warm process.
Services are built lazily from settings on first use.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from manual_rag.config import Settings, load_settings
from manual_rag.errors import (
    DeadlineExceeded,
    EmptyDocumentText,
    ExtractionParseError,
    ManualRAGError,
    NoDocumentLoaded,
    RateLimitedError,
    RetryBudgetExhausted,
    TransportError,
)
from manual_rag.extraction.client import ExtractionClient
from manual_rag.llm.factory import provider_from_settings
from manual_rag.pipeline.ingest import IngestionService
from manual_rag.pipeline.query import QueryService
from manual_rag.pipeline.session import DocumentSession

logger = logging.getLogger(__name__)

_session = DocumentSession()
_settings: Settings | None = None
_ingestion: IngestionService | None = None
_query: QueryService | None = None

_ERROR_STATUS: list[tuple[type[ManualRAGError], int]] = [
    (NoDocumentLoaded, 400),
    (EmptyDocumentText, 400),
    (RateLimitedError, 429),
    (RetryBudgetExhausted, 502),
    (ExtractionParseError, 502),
    (TransportError, 502),
    (DeadlineExceeded, 504),
]


def get_session() -> DocumentSession:
    return _session


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _build_client(settings: Settings) -> ExtractionClient:
    return ExtractionClient(provider_from_settings(settings.llm))


def get_ingestion_service() -> IngestionService:
    global _ingestion
    if _ingestion is None:
        settings = get_settings()
        _ingestion = IngestionService.from_settings(_build_client(settings), _session, settings)
    return _ingestion


def get_query_service() -> QueryService:
    global _query
    if _query is None:
        settings = get_settings()
        _query = QueryService(
            _session, _build_client(settings), top_k=settings.retrieval.top_k
        )
    return _query


def reset() -> None:
    """Drop cached services and the active document (for testing)."""
    global _settings, _ingestion, _query
    _settings = None
    _ingestion = None
    _query = None
    _session.clear()


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def json_response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def error_status(exc: ManualRAGError) -> int:
    for exc_type, status in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


def error_response(exc: ManualRAGError) -> dict[str, Any]:
    status = error_status(exc)
    log = logger.warning if status < 500 else logger.error
    log("Request failed (%d): %s", status, exc)
    return json_response(status, exc.to_dict())
