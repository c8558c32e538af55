"""Batch orchestrator — rate-limited, retrying extraction over all chunks.

Chunks go out in fixed-size batches. Inside a batch every chunk runs on its
own worker (pool size == batch size); each attempt waits a pacing delay
first, failures back off per ``RetryPolicy``, and batches are separated by a
cooldown of twice the pacing delay. Results come back in input order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from manual_rag.chunking.schemas import Chunk
from manual_rag.config import BatchSettings
from manual_rag.errors import DeadlineExceeded, RetryBudgetExhausted
from manual_rag.extraction.client import ExtractionClient
from manual_rag.extraction.schemas import ExtractionResult
from manual_rag.pipeline.retry import Failure, RetryPolicy, Success, rate_limit_aware_backoff

logger = logging.getLogger(__name__)

BATCH_SIZE = 2
MAX_RETRIES = 3
RETRY_DELAY = 2.0
PACING_DELAY = 5.0
DEADLINE_SECONDS = 900.0


class BatchOrchestrator:
    """Drive chunks through an ``ExtractionClient`` in paced batches."""

    def __init__(
        self,
        client: ExtractionClient,
        batch_size: int = BATCH_SIZE,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        pacing_delay: float = PACING_DELAY,
        deadline_seconds: float | None = DEADLINE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self.client = client
        self.batch_size = batch_size
        self.pacing_delay = pacing_delay
        self.deadline_seconds = deadline_seconds
        self.retry_policy = RetryPolicy(
            max_attempts=max_retries,
            backoff=rate_limit_aware_backoff(retry_delay),
        )
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        client: ExtractionClient,
        settings: BatchSettings,
        **kwargs,
    ) -> BatchOrchestrator:
        """Build an orchestrator from the ``batch`` settings section (ms → s)."""
        return cls(
            client,
            batch_size=settings.batch_size,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay_ms / 1000,
            pacing_delay=settings.pacing_delay_ms / 1000,
            deadline_seconds=settings.deadline_seconds,
            **kwargs,
        )

    @property
    def batch_cooldown(self) -> float:
        return self.pacing_delay * 2

    def process(self, chunks: Sequence[Chunk]) -> list[ExtractionResult]:
        """Extract every chunk; ``result[i]`` belongs to ``chunks[i]``.

        Raises:
            RetryBudgetExhausted: a chunk failed on every attempt. The rest
                of its batch still finishes; later batches never start.
            DeadlineExceeded: the overall deadline passed.
        """
        if not chunks:
            return []

        started = self._clock()
        total = len(chunks)
        batches = [chunks[i : i + self.batch_size] for i in range(0, total, self.batch_size)]
        results: list[ExtractionResult] = []

        with ThreadPoolExecutor(
            max_workers=self.batch_size, thread_name_prefix="extract"
        ) as pool:
            for batch_index, batch in enumerate(batches):
                self._check_deadline(started)
                logger.info("Processing batch %d/%d", batch_index + 1, len(batches))

                offset = batch_index * self.batch_size
                futures = [
                    pool.submit(self._process_chunk, offset + i, total, chunk, started)
                    for i, chunk in enumerate(batch)
                ]
                # Join the whole batch before assembling ordered output
                outcomes = [f.result() for f in futures]

                for i, outcome in enumerate(outcomes):
                    if isinstance(outcome, Failure):
                        raise RetryBudgetExhausted(
                            chunk_index=offset + i,
                            attempts=outcome.attempts,
                            last_cause=outcome.cause,
                        ) from outcome.cause
                    results.append(outcome.value)

                if batch_index < len(batches) - 1:
                    logger.info(
                        "Waiting %.1fs before processing next batch...", self.batch_cooldown
                    )
                    self._sleep(self.batch_cooldown)

        logger.info("Processed %d chunks in %d batches", total, len(batches))
        return results

    def _process_chunk(
        self,
        index: int,
        total: int,
        chunk: Chunk,
        started: float,
    ) -> Success[ExtractionResult] | Failure:
        def before_attempt(attempt: int) -> None:
            self._check_deadline(started)
            self._sleep(self.pacing_delay)

        outcome = self.retry_policy.run(
            lambda: self.client.extract(chunk.text),
            sleep=self._sleep,
            before_attempt=before_attempt,
            label=f"chunk {index + 1}/{total}",
        )
        if isinstance(outcome, Success):
            logger.info("Successfully processed chunk %d/%d", index + 1, total)
        return outcome

    def _check_deadline(self, started: float) -> None:
        if self.deadline_seconds is None:
            return
        elapsed = self._clock() - started
        if elapsed > self.deadline_seconds:
            raise DeadlineExceeded(
                self.deadline_seconds,
                f"stopped after {elapsed:.0f}s (limit {self.deadline_seconds:.0f}s)",
            )
