"""Exception hierarchy for the manual ingestion and query pipeline.

    ManualRAGError
    +-- NoDocumentLoaded        (query before any upload)
    +-- EmptyDocumentText       (page extraction produced no text)
    +-- ExtractionParseError    (model reply had no well-formed JSON object)
    +-- RateLimitedError        (remote service answered 429, retried)
    +-- TransportError          (network / timeout / 5xx, retried)
    +-- RetryBudgetExhausted    (a chunk failed every attempt)
    +-- DeadlineExceeded        (ingestion ran past its wall-clock ceiling)

Every error carries a short ``summary`` and a ``details`` string so the
entry points can return ``{"error": ..., "details": ...}`` bodies.
"""

from __future__ import annotations


class ManualRAGError(Exception):
    """Base class for all pipeline errors."""

    summary = "Manual pipeline error"

    def __init__(self, details: str = "", summary: str | None = None):
        if summary is not None:
            self.summary = summary
        self.details = details
        super().__init__(f"{self.summary}: {details}" if details else self.summary)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.summary, "details": self.details}


class NoDocumentLoaded(ManualRAGError):
    summary = "No manual content available"

    def __init__(self, details: str = "Please upload a manual first"):
        super().__init__(details)


class EmptyDocumentText(ManualRAGError):
    summary = "No text content found in document"

    def __init__(
        self,
        details: str = "The document appears to be empty or contains no extractable text",
    ):
        super().__init__(details)


class ExtractionParseError(ManualRAGError):
    """The model reply did not contain a parseable JSON object."""

    summary = "Failed to extract JSON from response"


class RateLimitedError(ManualRAGError):
    """The remote model service answered "too many requests"."""

    summary = "Rate limit hit"

    def __init__(self, details: str = "", provider: str | None = None):
        self.provider = provider
        super().__init__(details)


class TransportError(ManualRAGError):
    """Network failure, timeout, or a non-429 error status from the service."""

    summary = "Model service request failed"

    def __init__(self, details: str = "", provider: str | None = None):
        self.provider = provider
        super().__init__(details)


class RetryBudgetExhausted(ManualRAGError):
    """A chunk failed on every attempt; carries its position and last cause."""

    summary = "Failed to process chunk"

    def __init__(self, chunk_index: int, attempts: int, last_cause: BaseException):
        self.chunk_index = chunk_index
        self.attempts = attempts
        self.last_cause = last_cause
        super().__init__(
            f"chunk {chunk_index + 1} failed after {attempts} attempts: {last_cause}"
        )


class DeadlineExceeded(ManualRAGError):
    summary = "Ingestion deadline exceeded"

    def __init__(self, deadline_seconds: float, details: str = ""):
        self.deadline_seconds = deadline_seconds
        super().__init__(details or f"processing took longer than {deadline_seconds:.0f}s")
