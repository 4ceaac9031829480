"""LLM gateway for Gemini access via an OpenAI-compatible endpoint."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from openai import AsyncOpenAI


class GeminiClient:
    """Minimal async Gemini client hiding transport plumbing from the service layer."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str,
        proxy_url: Optional[str] = None,
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required to contact Gemini endpoints.")

        if http_client is None:
            http_client_kwargs: Dict[str, Any] = {
                "timeout": httpx.Timeout(timeout, connect=10.0),
                "verify": True,
            }
            if proxy_url:
                http_client_kwargs["proxy"] = proxy_url
                http_client_kwargs["verify"] = False
            http_client = httpx.AsyncClient(**http_client_kwargs)

        self._http_client = http_client
        # Retries stay off: a failed call surfaces to the caller immediately.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            http_client=self._http_client,
            max_retries=0,
        )
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.2,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Fire a chat completion request and return the assistant message content."""
        request: Dict[str, Any] = {
            "model": self._model,
            "temperature": temperature,
            "messages": messages,
        }
        if response_format is not None:
            request["response_format"] = response_format

        response = await self._client.chat.completions.create(**request)
        if not response.choices:
            raise RuntimeError("Gemini returned no choices.")
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        """Release the underlying HTTP session."""
        await self._http_client.aclose()
