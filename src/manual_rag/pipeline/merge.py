"""Fold per-chunk extraction results into one aggregate document."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from manual_rag.extraction.schemas import ExtractionResult
from manual_rag.pipeline.schemas import SUMMARY_TITLE, AggregateDocument

logger = logging.getLogger(__name__)


def _dedupe(items: Iterable[str]) -> list[str]:
    """Drop exact duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))


def merge(results: Sequence[ExtractionResult]) -> AggregateDocument:
    """Concatenate every field across results, then de-duplicate.

    ``key_points`` become ``prerequisites``. Comparison is exact and
    case-sensitive. An empty sequence gives an empty document.
    """
    logger.info("Merging %d processed chunks...", len(results))

    prerequisites: list[str] = []
    warnings: list[str] = []
    steps: list[str] = []
    for result in results:
        prerequisites.extend(result.key_points)
        warnings.extend(result.warnings)
        steps.extend(result.steps)

    merged = AggregateDocument(
        title=SUMMARY_TITLE,
        prerequisites=_dedupe(prerequisites),
        warnings=_dedupe(warnings),
        steps=_dedupe(steps),
    )
    logger.info(
        "Merge completed: %d prerequisites, %d warnings, %d steps",
        len(merged.prerequisites), len(merged.warnings), len(merged.steps),
    )
    return merged
