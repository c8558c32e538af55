"""Text clean-up applied before document text reaches a prompt.

Manuals are untrusted input that gets pasted into LLM prompts, so phrases
that read like instructions to the model are redacted.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

REDACTION = "[REDACTED]"

_INJECTION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ignore\s+(?:all\s+)?previous\s+instructions", re.IGNORECASE),
    re.compile(r"you\s+are\s+now\s+an?\b", re.IGNORECASE),
    re.compile(r"\bsystem\s*:", re.IGNORECASE),
    re.compile(r"</?\s*system\s*>", re.IGNORECASE),
    re.compile(r"\bassistant\s*:", re.IGNORECASE),
    re.compile(r"forget\s+(?:everything|your)\b", re.IGNORECASE),
    re.compile(r"new\s+instructions\s*:", re.IGNORECASE),
    re.compile(r"override\s+(?:your\s+)?(?:instructions|rules)", re.IGNORECASE),
]

_WHITESPACE = re.compile(r"\s+")


def sanitize_document_text(text: str) -> str:
    """Replace prompt-injection phrases with ``[REDACTED]``.

    Everything else, whitespace included, is left as is.
    """
    redactions = 0
    for pattern in _INJECTION_PATTERNS:
        text, n = pattern.subn(REDACTION, text)
        redactions += n
    if redactions:
        logger.warning("Redacted %d prompt-injection phrase(s) from document text", redactions)
    return text


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim the ends."""
    return _WHITESPACE.sub(" ", text).strip()
