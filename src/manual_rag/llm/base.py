"""Abstract base class for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from types import ModuleType

import httpx

from manual_rag.errors import RateLimitedError, TransportError

TOO_MANY_REQUESTS = 429


class LLMProvider(ABC):
    """Interface for single-shot LLM response generation.

    Implementations never retry. They raise ``RateLimitedError`` when the
    service answers 429 and ``TransportError`` for network failures,
    timeouts and other error statuses.
    """

    model: str = "unknown"

    @abstractmethod
    def generate(self, prompt: str, system: str | None = None) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: The user prompt.
            system: Optional system prompt.

        Returns:
            Generated text response.
        """

    @classmethod
    def provider_name(cls) -> str:
        """Return human-readable provider name."""
        return cls.__name__


def post_json(
    client: httpx.Client,
    url: str,
    payload: dict,
    provider: str,
    params: dict | None = None,
) -> dict:
    """POST a JSON payload and decode the JSON reply, mapping failures."""
    try:
        resp = client.post(url, json=payload, params=params)
    except httpx.TimeoutException as exc:
        raise TransportError(f"request timed out: {exc}", provider=provider) from exc
    except httpx.TransportError as exc:
        raise TransportError(str(exc), provider=provider) from exc

    if resp.status_code == TOO_MANY_REQUESTS:
        raise RateLimitedError(f"{provider} returned 429 Too Many Requests", provider=provider)
    if resp.is_error:
        raise TransportError(
            f"{provider} API error: {resp.status_code} {resp.reason_phrase}",
            provider=provider,
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise TransportError(f"{provider} returned a non-JSON body", provider=provider) from exc


@contextmanager
def sdk_errors(sdk: ModuleType, provider: str) -> Iterator[None]:
    """Map the errors of an official vendor SDK onto pipeline errors.

    The ``anthropic`` and ``openai`` packages share the same exception
    names: ``RateLimitError`` for 429 and ``APIConnectionError`` /
    ``APIStatusError`` for everything else on the wire.
    """
    try:
        yield
    except sdk.RateLimitError as exc:
        raise RateLimitedError(str(exc), provider=provider) from exc
    except (sdk.APIConnectionError, sdk.APIStatusError) as exc:
        raise TransportError(str(exc), provider=provider) from exc
