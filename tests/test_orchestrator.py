"""Tests for the batch orchestrator — ordering, retries, pacing, deadline."""

from __future__ import annotations

import random
import threading
import time
from collections import Counter
from collections.abc import Callable

import pytest

from manual_rag.chunking.schemas import Chunk
from manual_rag.config import BatchSettings
from manual_rag.errors import (
    DeadlineExceeded,
    RateLimitedError,
    RetryBudgetExhausted,
    TransportError,
)
from manual_rag.extraction.schemas import ExtractionResult
from manual_rag.pipeline.orchestrator import (
    BATCH_SIZE,
    MAX_RETRIES,
    PACING_DELAY,
    BatchOrchestrator,
)


class FakeExtractionClient:
    """Stands in for ``ExtractionClient``; echoes the chunk text as a key point.

    ``fail`` is called with ``(text, attempt_number)`` and may return an
    exception to raise for that attempt.
    """

    model = "fake-model"

    def __init__(
        self,
        fail: Callable[[str, int], BaseException | None] | None = None,
        delay: Callable[[str], float] | None = None,
    ):
        self.fail = fail
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def extract(self, chunk_text: str) -> ExtractionResult:
        with self._lock:
            self.calls[chunk_text] += 1
            attempt = self.calls[chunk_text]
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay is not None:
                time.sleep(self.delay(chunk_text))
            if self.fail is not None:
                exc = self.fail(chunk_text, attempt)
                if exc is not None:
                    raise exc
            return ExtractionResult(key_points=[chunk_text])
        finally:
            with self._lock:
                self.active -= 1


class FakeClock:
    """Monotonic clock advanced only by the orchestrator's own sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []
        self._lock = threading.Lock()

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.sleeps.append(seconds)
            self.now += seconds


def _chunks(*texts: str) -> list[Chunk]:
    return [Chunk(text=t, sequence_index=i) for i, t in enumerate(texts)]


def _orchestrator(client, sleeps: list[float], **kwargs) -> BatchOrchestrator:
    return BatchOrchestrator(client, sleep=sleeps.append, **kwargs)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_empty_input(self, no_sleep):
        client = FakeExtractionClient()
        assert _orchestrator(client, no_sleep).process([]) == []
        assert no_sleep == []
        assert not client.calls

    def test_results_follow_input_order(self, no_sleep):
        client = FakeExtractionClient()
        chunks = _chunks("c0", "c1", "c2", "c3", "c4")
        results = _orchestrator(client, no_sleep).process(chunks)
        assert [r.key_points for r in results] == [["c0"], ["c1"], ["c2"], ["c3"], ["c4"]]

    def test_order_survives_random_completion_and_retries(self):
        rng = random.Random(20240611)
        for trial in range(100):
            count = rng.randint(0, 9)
            batch_size = rng.randint(1, 4)
            texts = [f"t{trial}-c{i}" for i in range(count)]
            delays = {t: rng.uniform(0, 0.002) for t in texts}
            transient = {t: rng.randint(0, MAX_RETRIES - 1) for t in texts}

            client = FakeExtractionClient(
                fail=lambda text, n: TransportError("flaky") if n <= transient[text] else None,
                delay=delays.__getitem__,
            )
            results = BatchOrchestrator(
                client, batch_size=batch_size, sleep=lambda s: None
            ).process(_chunks(*texts))

            assert [r.key_points[0] for r in results] == texts, f"trial {trial}"

    def test_concurrency_bounded_by_batch_size(self, no_sleep):
        client = FakeExtractionClient(delay=lambda text: 0.01)
        chunks = _chunks(*[f"c{i}" for i in range(7)])
        _orchestrator(client, no_sleep, batch_size=3).process(chunks)
        assert 1 <= client.max_active <= 3


# ---------------------------------------------------------------------------
# Retries
# ---------------------------------------------------------------------------


class TestRetries:
    def test_succeeds_after_transient_failures(self, no_sleep):
        client = FakeExtractionClient(
            fail=lambda text, n: TransportError("503") if n < MAX_RETRIES else None
        )
        results = _orchestrator(client, no_sleep).process(_chunks("only"))
        assert results[0].key_points == ["only"]
        assert client.calls["only"] == MAX_RETRIES
        # pacing, backoff 2*2, pacing, backoff 2*4, pacing
        assert no_sleep == [5.0, 4.0, 5.0, 8.0, 5.0]

    def test_rate_limited_backoff_is_linear(self, no_sleep):
        client = FakeExtractionClient(
            fail=lambda text, n: RateLimitedError("429") if n < 3 else None
        )
        _orchestrator(client, no_sleep).process(_chunks("only"))
        assert no_sleep == [5.0, 2.0, 5.0, 4.0, 5.0]

    def test_exhausted_budget_reports_chunk(self, no_sleep):
        cause = TransportError("always down")
        client = FakeExtractionClient(fail=lambda text, n: cause if text == "c1" else None)

        with pytest.raises(RetryBudgetExhausted) as exc_info:
            _orchestrator(client, no_sleep).process(_chunks("c0", "c1"))

        err = exc_info.value
        assert err.chunk_index == 1
        assert err.attempts == MAX_RETRIES
        assert err.last_cause is cause
        assert err.__cause__ is cause
        assert "chunk 2" in err.details
        assert client.calls["c1"] == MAX_RETRIES

    def test_failure_stops_later_batches(self, no_sleep):
        client = FakeExtractionClient(
            fail=lambda text, n: TransportError("down") if text == "c2" else None
        )
        with pytest.raises(RetryBudgetExhausted) as exc_info:
            _orchestrator(client, no_sleep).process(_chunks("c0", "c1", "c2", "c3", "c4"))

        assert exc_info.value.chunk_index == 2
        # The failing chunk's batch mate still ran; the next batch never started
        assert client.calls["c3"] == 1
        assert client.calls["c4"] == 0

    def test_non_retryable_error_propagates(self, no_sleep):
        client = FakeExtractionClient(fail=lambda text, n: KeyError("bug"))
        with pytest.raises(KeyError):
            _orchestrator(client, no_sleep).process(_chunks("c0"))
        assert client.calls["c0"] == 1


# ---------------------------------------------------------------------------
# Pacing and deadline
# ---------------------------------------------------------------------------


class TestPacing:
    def test_defaults(self):
        orchestrator = BatchOrchestrator(FakeExtractionClient())
        assert orchestrator.batch_size == BATCH_SIZE == 2
        assert orchestrator.pacing_delay == PACING_DELAY == 5.0
        assert orchestrator.batch_cooldown == 10.0
        assert orchestrator.retry_policy.max_attempts == 3

    def test_cooldown_only_between_batches(self, no_sleep):
        client = FakeExtractionClient()
        _orchestrator(client, no_sleep).process(_chunks("c0", "c1", "c2"))
        assert no_sleep.count(10.0) == 1
        assert no_sleep.count(5.0) == 3

    def test_single_batch_has_no_cooldown(self, no_sleep):
        _orchestrator(FakeExtractionClient(), no_sleep).process(_chunks("c0", "c1"))
        assert 10.0 not in no_sleep

    def test_from_settings_converts_milliseconds(self):
        settings = BatchSettings(
            batch_size=4, max_retries=5, retry_delay_ms=100, pacing_delay_ms=50,
            deadline_seconds=30,
        )
        orchestrator = BatchOrchestrator.from_settings(FakeExtractionClient(), settings)
        assert orchestrator.batch_size == 4
        assert orchestrator.retry_policy.max_attempts == 5
        assert orchestrator.pacing_delay == pytest.approx(0.05)
        assert orchestrator.batch_cooldown == pytest.approx(0.1)
        assert orchestrator.deadline_seconds == 30

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchOrchestrator(FakeExtractionClient(), batch_size=0)


class TestDeadline:
    def test_deadline_stops_processing(self):
        clock = FakeClock()
        client = FakeExtractionClient()
        orchestrator = BatchOrchestrator(
            client, batch_size=1, deadline_seconds=12.0, sleep=clock.sleep, clock=clock,
        )
        # c0: pacing 5 -> t=5, cooldown 10 -> t=15, batch 2 check fails
        with pytest.raises(DeadlineExceeded) as exc_info:
            orchestrator.process(_chunks("c0", "c1", "c2"))

        assert exc_info.value.deadline_seconds == 12.0
        assert client.calls["c0"] == 1
        assert client.calls["c1"] == 0

    def test_deadline_checked_between_retries(self):
        clock = FakeClock()
        client = FakeExtractionClient(fail=lambda text, n: TransportError("down"))
        orchestrator = BatchOrchestrator(
            client, batch_size=1, deadline_seconds=12.0, sleep=clock.sleep, clock=clock,
        )
        # attempt 1 at t=0..5, backoff 4 -> t=9, attempt 2 pacing -> t=14,
        # backoff 8 -> t=22, attempt 3 check fails
        with pytest.raises(DeadlineExceeded):
            orchestrator.process(_chunks("c0"))
        assert client.calls["c0"] == 2

    def test_no_deadline(self):
        clock = FakeClock()
        orchestrator = BatchOrchestrator(
            FakeExtractionClient(), batch_size=1, deadline_seconds=None,
            sleep=clock.sleep, clock=clock,
        )
        results = orchestrator.process(_chunks(*[f"c{i}" for i in range(200)]))
        assert len(results) == 200
        assert clock.now > 900
