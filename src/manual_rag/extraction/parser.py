"""Locate and validate the JSON object embedded in a model reply.

Models wrap the object in a fenced ```json block most of the time; when the
fence is missing the outermost ``{...}`` span is used instead.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from manual_rag.errors import ExtractionParseError
from manual_rag.extraction.schemas import ExtractionResult

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


class ExtractionPayload(BaseModel):
    """Shape of the JSON object requested by the extraction prompt."""

    model_config = ConfigDict(extra="ignore")

    key_points: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)

    @field_validator("key_points", "warnings", "steps", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


def locate_json_block(text: str) -> str:
    """Return the JSON object text embedded in ``text``.

    Raises:
        ExtractionParseError: if no ``{...}`` span can be found.
    """
    for match in _FENCED_JSON.finditer(text):
        candidate = match.group(1).strip()
        if candidate.startswith("{"):
            return candidate

    match = _BRACE_SPAN.search(text)
    if match is None:
        raise ExtractionParseError(f"no JSON object in model reply ({len(text)} chars)")
    return match.group(0)


def parse_extraction(text: str) -> ExtractionResult:
    """Parse a model reply into an ``ExtractionResult``.

    Raises:
        ExtractionParseError: if the block is missing, is not valid JSON, or
            does not match the expected shape.
    """
    block = locate_json_block(text)
    try:
        payload = ExtractionPayload.model_validate_json(block)
    except ValidationError as exc:
        logger.debug("Rejected extraction block: %s", block[:200])
        raise ExtractionParseError(
            f"malformed extraction JSON: {exc.error_count()} validation error(s)"
        ) from exc

    return ExtractionResult(
        key_points=payload.key_points,
        warnings=payload.warnings,
        steps=payload.steps,
    )
