"""Extraction client — one prompt in, one parsed result out.

Wraps an ``LLMProvider`` with the manual-extraction prompt and the JSON
parser. Calls are single-shot; retries are the orchestrator's job.
"""

from __future__ import annotations

import logging

from manual_rag.extraction.parser import parse_extraction
from manual_rag.extraction.prompts import build_extraction_prompt
from manual_rag.extraction.schemas import ExtractionResult
from manual_rag.llm.base import LLMProvider

logger = logging.getLogger(__name__)


class ExtractionClient:
    """Structured extraction and free-text answers over one LLM provider."""

    def __init__(self, llm_provider: LLMProvider):
        self.llm_provider = llm_provider

    @property
    def model(self) -> str:
        return getattr(self.llm_provider, "model", "unknown")

    def extract(self, chunk_text: str) -> ExtractionResult:
        """Extract key points, warnings and steps from one chunk of text."""
        reply = self.llm_provider.generate(build_extraction_prompt(chunk_text))
        logger.debug("Raw extraction reply (%d chars)", len(reply))
        return parse_extraction(reply)

    def answer(self, prompt: str, system: str | None = None) -> str:
        """Return the model's raw text for a grounded prompt."""
        return self.llm_provider.generate(prompt, system=system)
