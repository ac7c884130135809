"""
Translation providers for the gateway waterfall.

Default order:
1. MyMemory (keyless; skipped when the local detector already sees the target language)
2. Google Translate public endpoint (keyless)
3. OpenAI chat completion (only when OPENAI_API_KEY is configured)
4. Offline mock (always succeeds, confidence 0.1)

Every provider is attempted through attempt(), which turns any failure
into a tagged ProviderOutcome instead of letting the exception escape.
"""
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from multisearch.core.circuit_breaker import CircuitBreaker
from multisearch.core.exceptions import ProviderError
from multisearch.core.logging import get_logger
from multisearch.core.metrics import record_provider_attempt
from multisearch.models.translation import TranslationRequest, TranslationResponse
from multisearch.services.search.language_detection import LanguageDetector, get_language_detector
from multisearch.services.translation.llm_client import LLMClient, get_llm_client

logger = get_logger(__name__)

MYMEMORY_URL = "https://api.mymemory.translated.net/get"
GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
USER_AGENT = "multisearch/1.0"

TRANSLATOR_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the given text to {language}. "
    "Maintain the original meaning, tone, and style. "
    "If the text is already in the target language, return it unchanged. "
    "Only return the translated text, nothing else."
)


@dataclass(frozen=True)
class ProviderOutcome:
    """Tagged result of one provider attempt."""
    provider: str
    response: Optional[TranslationResponse] = None
    error: Optional[str] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.response is not None


class TranslationProvider:
    """Base class for waterfall providers."""

    name = "provider"

    def is_available(self) -> bool:
        return True

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        raise NotImplementedError

    async def attempt(self, request: TranslationRequest) -> ProviderOutcome:
        """Run translate() and convert the result into a ProviderOutcome."""
        if not self.is_available():
            logger.debug("translation_provider_skipped", provider=self.name)
            return ProviderOutcome(provider=self.name, error="provider not configured", skipped=True)

        start = time.time()
        try:
            response = await self.translate(request)
        except Exception as e:
            record_provider_attempt(self.name, success=False, duration_seconds=time.time() - start)
            logger.warning(
                "translation_provider_failed",
                provider=self.name,
                target_language=request.target_language.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ProviderOutcome(provider=self.name, error=str(e))

        record_provider_attempt(self.name, success=True, duration_seconds=time.time() - start)
        return ProviderOutcome(provider=self.name, response=response)


class HttpTranslationProvider(TranslationProvider):
    """Provider backed by a keyless HTTP endpoint, guarded by a circuit breaker."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.circuit_breaker = circuit_breaker or CircuitBreaker(name=f"translation_{self.name}")

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"transport": self.transport}
        if self.timeout_seconds is not None:
            kwargs["timeout"] = self.timeout_seconds
        return httpx.AsyncClient(**kwargs)

    async def _fetch_json(self, url: str, params: Dict[str, str], headers: Dict[str, str]) -> Any:
        async with self._client() as client:
            response = await client.get(url, params=params, headers=headers)

        if response.status_code < 200 or response.status_code >= 300:
            raise ProviderError(self.name, f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ProviderError(self.name, f"unparseable payload: {e}") from e

    async def _get_json(self, url: str, params: Dict[str, str], headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.circuit_breaker.call_async(
            self._fetch_json,
            url,
            params,
            {"User-Agent": USER_AGENT, **(headers or {})},
        )


class MyMemoryProvider(HttpTranslationProvider):
    """MyMemory public API with a locally detected source language."""

    name = "mymemory"

    def __init__(
        self,
        contact_email: Optional[str] = None,
        detector: Optional[LanguageDetector] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.contact_email = contact_email
        self.detector = detector or get_language_detector()

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        source = self.detector.detect(request.text)
        source_code = source.provider_code
        target_code = request.target_language.provider_code

        if source_code == target_code:
            return TranslationResponse(
                translated_text=request.text,
                detected_source_language=source_code,
                confidence=1.0,
                provider=self.name,
            )

        params = {"q": request.text, "langpair": f"{source_code}|{target_code}"}
        if self.contact_email:
            params["de"] = self.contact_email

        data = await self._get_json(MYMEMORY_URL, params)

        try:
            status = int(data.get("responseStatus", 0))
            translated = data["responseData"]["translatedText"]
            match = data["responseData"].get("match")
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(self.name, f"unexpected payload: {e}") from e

        if status != 200:
            raise ProviderError(self.name, f"API error: {data.get('responseDetails')}", status_code=status)
        if not translated:
            raise ProviderError(self.name, "empty translation")

        return TranslationResponse(
            translated_text=translated,
            detected_source_language=source_code,
            confidence=float(match) if match else 0.7,
            provider=self.name,
        )


class GoogleFreeProvider(HttpTranslationProvider):
    """Public translate.googleapis.com endpoint with auto-detected source."""

    name = "google_free"

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        params = {
            "client": "gtx",
            "sl": "auto",
            "tl": request.target_language.provider_code,
            "dt": "t",
            "q": request.text,
        }
        data = await self._get_json(GOOGLE_TRANSLATE_URL, params)

        try:
            segments = data[0]
            translated = "".join(segment[0] for segment in segments if segment and segment[0])
        except (IndexError, KeyError, TypeError) as e:
            raise ProviderError(self.name, f"unexpected payload: {e}") from e

        if not translated:
            raise ProviderError(self.name, "empty translation")

        detected = data[2] if len(data) > 2 and isinstance(data[2], str) else "auto"
        return TranslationResponse(
            translated_text=translated,
            detected_source_language=detected,
            confidence=0.8,
            provider=self.name,
        )


class OpenAIProvider(TranslationProvider):
    """LLM translation, only attempted when an API key is configured."""

    name = "openai"

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.client = client or get_llm_client()
        self.circuit_breaker = circuit_breaker or CircuitBreaker(name=f"translation_{self.name}")

    def is_available(self) -> bool:
        return self.client.is_configured

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        messages: List[Dict[str, str]] = [
            {
                "role": "system",
                "content": TRANSLATOR_SYSTEM_PROMPT.format(language=request.target_language.english_name),
            },
            {"role": "user", "content": request.text},
        ]
        translated = await self.circuit_breaker.call_async(self.client.chat, messages)
        return TranslationResponse(
            translated_text=translated,
            confidence=0.9,
            provider=self.name,
        )


class MockProvider(TranslationProvider):
    """Deterministic offline fallback: '[<language name>] <text>'."""

    name = "mock"

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        return TranslationResponse(
            translated_text=f"[{request.target_language.native_name}] {request.text}",
            detected_source_language="en",
            confidence=0.1,
            provider=self.name,
        )
