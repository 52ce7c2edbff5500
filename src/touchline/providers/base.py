"""Abstract base class for LLM clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from touchline.common.errors import LLMError
from touchline.config import LLMSettings

logger = structlog.stdlib.get_logger()

Message = dict[str, str]


class LLMClient(ABC):
    """
    Opaque `invoke(messages) -> text` used by the coaching advisor.

    Subclasses must implement:
      - build_request()  : (url, headers, body) for the provider's API
      - extract_text()   : pull the assistant text out of the raw response
      - invoke()         : one non-streaming completion

    No retries here; retry policy belongs to whoever calls invoke().
    """

    provider_name: str

    def __init__(self, http_client: httpx.AsyncClient, settings: LLMSettings) -> None:
        self.client = http_client
        self.settings = settings

    @abstractmethod
    def build_request(
        self,
        messages: list[Message],
        temperature: float | None = None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Returns (url, headers, body) for the provider's API."""
        ...

    @abstractmethod
    def extract_text(self, raw_response: dict[str, Any]) -> str:
        """Assistant message content; empty string when the model returned none."""
        ...

    @abstractmethod
    async def invoke(
        self,
        messages: list[Message],
        temperature: float | None = None,
    ) -> str:
        ...

    async def _handle_error_response(self, response: httpx.Response) -> None:
        """Shared error handling for non-2xx responses."""
        error_body = response.text
        await logger.aerror(
            f"llm.{self.provider_name}.error",
            status_code=response.status_code,
            body=error_body[:500],
            model=self.settings.model,
        )

        if response.status_code == 401:
            raise LLMError(
                f"{self.provider_name} authentication failed",
                details={"provider": self.provider_name, "status_code": 401},
            )
        if response.status_code == 429:
            raise LLMError(
                f"{self.provider_name} rate limit exceeded",
                details={"provider": self.provider_name, "status_code": 429, "retry": True},
            )

        raise LLMError(
            f"{self.provider_name} returned {response.status_code}: {error_body[:200]}",
            details={"provider": self.provider_name, "status_code": response.status_code},
        )
