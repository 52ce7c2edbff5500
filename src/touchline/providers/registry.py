"""LLM client registry. Maps provider names to client classes."""

from __future__ import annotations

import httpx

from touchline.config import LLMSettings
from touchline.providers.base import LLMClient
from touchline.providers.openai import OpenAIChatClient

# Registry: provider name → client class
_CLIENTS: dict[str, type[LLMClient]] = {
    "openai": OpenAIChatClient,
}

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared async HTTP client."""
    global _http_client  # noqa: PLW0603
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(120.0, connect=10.0),
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            http2=True,
            follow_redirects=True,
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client (called on shutdown)."""
    global _http_client  # noqa: PLW0603
    if _http_client and not _http_client.is_closed:
        await _http_client.aclose()
        _http_client = None


def get_llm_client(settings: LLMSettings) -> LLMClient:
    """Get a client instance for the configured provider."""
    provider = settings.provider
    client_cls = _CLIENTS.get(provider)
    if client_cls is None:
        supported = ", ".join(sorted(_CLIENTS.keys()))
        raise ValueError(f"Unsupported provider: '{provider}'. Supported: {supported}")
    return client_cls(get_http_client(), settings)
