"""Manual pipeline — batch extraction, merge, ingestion and query."""

from manual_rag.pipeline.ingest import IngestionService
from manual_rag.pipeline.merge import merge
from manual_rag.pipeline.orchestrator import BatchOrchestrator
from manual_rag.pipeline.query import QueryService
from manual_rag.pipeline.retry import Failure, RetryPolicy, Success
from manual_rag.pipeline.schemas import (
    AggregateDocument,
    IngestAck,
    QueryAnswer,
    QueryMetadata,
)
from manual_rag.pipeline.session import DocumentSession, DocumentSnapshot

__all__ = [
    "AggregateDocument",
    "BatchOrchestrator",
    "DocumentSession",
    "DocumentSnapshot",
    "Failure",
    "IngestAck",
    "IngestionService",
    "QueryAnswer",
    "QueryMetadata",
    "QueryService",
    "RetryPolicy",
    "Success",
    "merge",
]
