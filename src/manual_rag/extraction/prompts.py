"""Prompt templates for manual extraction and grounded question answering."""

from __future__ import annotations

from collections.abc import Sequence

from manual_rag.retrieval.schemas import SearchHit

# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

EXTRACTION_TEMPLATE = """\
Analyze this section of a technical manual and extract key information:
{chunk}

Format your response as a JSON object inside a ```json code block with this structure:
{{
  "key_points": ["Point 1", "Point 2", ...],
  "warnings": ["Warning 1", "Warning 2", ...],
  "steps": ["Step 1", "Step 2", ...]
}}
"""

# ---------------------------------------------------------------------------
# Grounded answers
# ---------------------------------------------------------------------------

GROUNDED_QUERY_TEMPLATE = """\
Based on these sections from the manual (with page numbers):
{context}

Question: {question}

Please provide a comprehensive answer that:
1. Directly addresses the question
2. Includes specific details from the manual
3. Lists any steps in order (if applicable)
4. Mentions relevant warnings or prerequisites (if any)
5. Cites the page numbers when referring to specific information

Format the response in a clear, easy-to-read manner.
"""


def build_extraction_prompt(chunk_text: str) -> str:
    return EXTRACTION_TEMPLATE.format(chunk=chunk_text)


def format_context(hits: Sequence[SearchHit]) -> str:
    """Render hits as ``[Page N]: text`` blocks separated by blank lines."""
    return "\n\n".join(f"[Page {hit.page}]: {hit.text}" for hit in hits)


def build_grounding_prompt(question: str, hits: Sequence[SearchHit]) -> str:
    """Build the prompt that anchors the model's answer to retrieved sections.

    Args:
        question: The user's question.
        hits: Ranked search hits to embed as context.

    Returns:
        The formatted prompt string.
    """
    return GROUNDED_QUERY_TEMPLATE.format(context=format_context(hits), question=question)
