"""Ollama LLM provider — local models through ``/api/chat``, no API key."""

from __future__ import annotations

import logging

import httpx

from manual_rag.errors import TransportError
from manual_rag.llm.base import LLMProvider, post_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.1:8b"
DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaLLMProvider(LLMProvider):
    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = 120.0,
    ):
        self.model = model
        self.options = {"temperature": temperature, "num_predict": max_tokens}
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def generate(self, prompt: str, system: str | None = None) -> str:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        data = post_json(
            self._client,
            "/api/chat",
            {"model": self.model, "messages": messages, "stream": False, "options": self.options},
            provider="ollama",
        )
        try:
            return data["message"]["content"]
        except (KeyError, TypeError) as exc:
            raise TransportError("Ollama reply has no message content", provider="ollama") from exc
