"""Anthropic Claude LLM provider.

Requires the ``anthropic`` extra; the key comes from ``ANTHROPIC_API_KEY``
unless passed in.
"""

from __future__ import annotations

import logging
from typing import Any

from manual_rag.llm.base import LLMProvider, sdk_errors

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicLLMProvider(LLMProvider):
    """Single-shot Messages API calls with SDK retries switched off."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = 60.0,
    ):
        try:
            import anthropic
        except ImportError as exc:
            raise ImportError(
                "anthropic package required: pip install technical-manual-rag[anthropic]"
            ) from exc

        self._sdk = anthropic
        self._client: Any = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self._request: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

    def generate(self, prompt: str, system: str | None = None) -> str:
        request = dict(self._request, messages=[{"role": "user", "content": prompt}])
        if system:
            request["system"] = system

        with sdk_errors(self._sdk, "anthropic"):
            message = self._client.messages.create(**request)

        return "".join(block.text for block in message.content if block.type == "text")
