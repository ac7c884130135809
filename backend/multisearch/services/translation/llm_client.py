"""
Async chat-completion client used by the LLM translation provider.

Uses httpx against an OpenAI-compatible API; no vendor SDK.

Environment configuration:
- OPENAI_API_KEY: API key / bearer token (provider disabled when unset)
- LLM_API_BASE: Base URL for API (default: https://api.openai.com/v1)
- LLM_TRANSLATION_MODEL: Model name (default: gpt-3.5-turbo)
- TRANSLATION_PROVIDER_TIMEOUT_SECONDS: Request timeout (default: httpx default)
"""
import os
from typing import Any, Dict, List, Optional

import httpx

from multisearch.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"


class LLMClient:
    """Thin async client for /chat/completions."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"transport": self.transport}
        if self.timeout_seconds is not None:
            kwargs["timeout"] = self.timeout_seconds
        return httpx.AsyncClient(**kwargs)

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.3,
    ) -> str:
        """
        Call the chat completion endpoint.

        Returns:
            Stripped content of the first choice

        Raises:
            RuntimeError: no API key configured
            httpx.HTTPError: transport failure or non-2xx response
            ValueError: response without content
        """
        if not self.api_key:
            raise RuntimeError("LLM API key not configured")

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with self._client() as client:
            response = await client.post(
                f"{self.api_base}/chat/completions",
                headers=headers,
                json=payload,
            )
        response.raise_for_status()
        data = response.json()

        choices = data.get("choices") or []
        content = ((choices[0].get("message") or {}).get("content") if choices else None) or ""
        content = content.strip()
        if not content:
            raise ValueError("LLM response contained no content")

        usage = data.get("usage") or {}
        logger.debug(
            "llm_chat_completed",
            model=self.model,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )
        return content


_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get global LLM client instance."""
    global _llm_client
    if _llm_client is None:
        timeout = os.getenv("TRANSLATION_PROVIDER_TIMEOUT_SECONDS")
        _llm_client = LLMClient(
            api_base=os.getenv("LLM_API_BASE", DEFAULT_API_BASE),
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("LLM_TRANSLATION_MODEL", DEFAULT_MODEL),
            timeout_seconds=float(timeout) if timeout else None,
        )
    return _llm_client
