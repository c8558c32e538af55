"""OpenAI LLM provider — GPT models and OpenAI-compatible endpoints.

Requires the ``openai`` extra; the key comes from ``OPENAI_API_KEY`` unless
passed in.
"""

from __future__ import annotations

import logging
from typing import Any

from manual_rag.llm.base import LLMProvider, sdk_errors

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAILLMProvider(LLMProvider):
    """Single-shot Chat Completions calls with SDK retries switched off."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = 60.0,
    ):
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "openai package required: pip install technical-manual-rag[openai]"
            ) from exc

        self._sdk = openai
        self._client: Any = openai.OpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0,
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate(self, prompt: str, system: str | None = None) -> str:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        with sdk_errors(self._sdk, "openai"):
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
