"""OpenAI-compatible chat completions client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from touchline.common.errors import LLMError
from touchline.providers.base import LLMClient, Message

logger = structlog.stdlib.get_logger()


class OpenAIChatClient(LLMClient):
    provider_name = "openai"

    def build_request(
        self,
        messages: list[Message],
        temperature: float | None = None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = f"{self.settings.api_base.rstrip('/')}/chat/completions"

        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"

        body: dict[str, Any] = {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature if temperature is None else temperature,
            "max_tokens": self.settings.max_tokens,
        }
        return url, headers, body

    def extract_text(self, raw_response: dict[str, Any]) -> str:
        choices = raw_response.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    async def invoke(
        self,
        messages: list[Message],
        temperature: float | None = None,
    ) -> str:
        url, headers, body = self.build_request(messages, temperature)

        try:
            response = await self.client.post(
                url,
                headers=headers,
                json=body,
                timeout=self.settings.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise LLMError(
                f"LLM request timed out: {e}",
                details={"provider": self.provider_name, "model": self.settings.model},
            ) from e
        except httpx.ConnectError as e:
            raise LLMError(
                f"Failed to connect to LLM endpoint: {e}",
                details={"provider": self.provider_name, "model": self.settings.model},
            ) from e
        except httpx.HTTPError as e:
            raise LLMError(
                f"LLM request failed: {e}",
                details={"provider": self.provider_name, "model": self.settings.model},
            ) from e

        if response.status_code != 200:
            await self._handle_error_response(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise LLMError(
                "LLM endpoint returned a body that is not JSON",
                details={"provider": self.provider_name, "model": self.settings.model},
            ) from e
        if not isinstance(payload, dict):
            raise LLMError(
                "LLM endpoint returned an unexpected payload",
                details={"provider": self.provider_name, "model": self.settings.model},
            )

        text = self.extract_text(payload)
        await logger.adebug(
            "llm.invoke.success", model=self.settings.model, chars=len(text)
        )
        return text
