"""LLM providers — Gemini, Ollama, Anthropic, OpenAI."""

from manual_rag.llm.base import LLMProvider
from manual_rag.llm.factory import available_providers, get_llm_provider

__all__ = ["LLMProvider", "available_providers", "get_llm_provider"]
