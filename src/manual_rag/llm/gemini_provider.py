"""Google Gemini LLM provider over the public REST API.

Reads the key from ``GEMINI_API_KEY`` (``VITE_GEMINI_API_KEY`` is accepted
for older deployments).
"""

from __future__ import annotations

import logging
import os

import httpx

from manual_rag.errors import TransportError
from manual_rag.llm.base import LLMProvider, post_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "VITE_GEMINI_API_KEY")


def _api_key_from_env() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


class GeminiLLMProvider(LLMProvider):
    """Generate responses via ``models/{model}:generateContent``."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = 60.0,
    ):
        api_key = api_key or _api_key_from_env()
        if not api_key:
            raise ValueError(
                "Gemini API key not configured: set GEMINI_API_KEY in the environment"
            )

        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def generate(self, prompt: str, system: str | None = None) -> str:
        payload: dict = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        data = post_json(
            self._client,
            f"/v1beta/models/{self.model}:generateContent",
            payload,
            provider="gemini",
            params={"key": self._api_key},
        )

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TransportError(
                "Invalid or empty response from Gemini API", provider="gemini"
            ) from exc
