"""
Translation gateway.

Flow for translate():
1. Validate input (non-empty, <= 5000 chars, no injection patterns)
2. Ask the rate limiter (no-op by default)
3. Serve from the TTL cache when a live entry exists
4. Walk the provider waterfall in order until one succeeds
5. Cache and return

For valid input translate() never raises: the last provider is an offline
mock, and the gateway falls back to one if the configured chain is
exhausted. Concurrent misses for the same text are not de-duplicated.
"""
import asyncio
import os
import re
from typing import Dict, List, Optional, Sequence

from multisearch.core.exceptions import RateLimitExceededError, ValidationError
from multisearch.core.logging import get_logger
from multisearch.core.metrics import record_translation_cache_hit, record_translation_cache_miss
from multisearch.core.rate_limit import NoopRateLimiter, RateLimiter
from multisearch.models.languages import SupportedLanguage
from multisearch.models.translation import TranslationRequest, TranslationResponse
from multisearch.services.translation.cache import (
    TRANSLATION_CACHE_TTL_SECONDS,
    InMemoryTTLCache,
    TranslationCache,
    translation_cache_key,
)
from multisearch.services.translation.providers import (
    GoogleFreeProvider,
    MockProvider,
    MyMemoryProvider,
    OpenAIProvider,
    ProviderOutcome,
    TranslationProvider,
)

logger = get_logger(__name__)

DEFAULT_MAX_TEXT_LENGTH = 5000
DEFAULT_CLIENT_ID = "default"

SUSPICIOUS_PATTERNS = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on(?:click|error|load)", re.IGNORECASE),
    re.compile(r"eval\(", re.IGNORECASE),
)


class TranslationGateway:
    """Validated, cached, fault-tolerant term translator."""

    def __init__(
        self,
        providers: Optional[Sequence[TranslationProvider]] = None,
        cache: Optional[TranslationCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ):
        self.providers: List[TranslationProvider] = list(providers) if providers is not None else build_default_providers()
        self.cache = cache if cache is not None else InMemoryTTLCache()
        self.rate_limiter = rate_limiter or NoopRateLimiter()
        self.max_text_length = max_text_length
        self._fallback = MockProvider()

    def validate(self, text: str) -> None:
        """Raise ValidationError for empty, oversized or suspicious text."""
        if not isinstance(text, str) or not text:
            raise ValidationError("Invalid text input")

        if len(text) > self.max_text_length:
            raise ValidationError(f"Text too long. Maximum {self.max_text_length} characters allowed")

        for pattern in SUSPICIOUS_PATTERNS:
            if pattern.search(text):
                raise ValidationError("Invalid text content detected")

    async def translate(
        self,
        request: TranslationRequest,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> TranslationResponse:
        """
        Translate request.text into request.target_language.

        Raises:
            ValidationError: invalid input (never retried, never cached)
            RateLimitExceededError: only when a real rate limiter is plugged in
        """
        self.validate(request.text)

        if self.rate_limiter.is_rate_limited(client_id):
            raise RateLimitExceededError(client_id)

        cache_key = request.cache_key or translation_cache_key(request.text, request.target_language.value)
        cached = self.cache.get(cache_key)
        if cached is not None:
            record_translation_cache_hit()
            logger.debug("translation_cache_hit", key=cache_key)
            return cached

        record_translation_cache_miss()
        logger.debug("translation_cache_miss", key=cache_key)

        outcome = await self._run_waterfall(request)
        self.cache.set(cache_key, outcome.response)

        logger.info(
            "translation_completed",
            provider=outcome.provider,
            target_language=request.target_language.value,
            text_length=len(request.text),
            confidence=outcome.response.confidence,
        )
        return outcome.response

    async def _run_waterfall(self, request: TranslationRequest) -> ProviderOutcome:
        """Attempt providers sequentially; first successful outcome wins."""
        failures: List[ProviderOutcome] = []
        for provider in self.providers:
            outcome = await provider.attempt(request)
            if outcome.ok:
                return outcome
            failures.append(outcome)

        logger.warning(
            "translation_waterfall_exhausted",
            attempted=[f.provider for f in failures if not f.skipped],
            target_language=request.target_language.value,
        )
        return await self._fallback.attempt(request)

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("translation_cache_cleared")

    async def translate_text(
        self,
        text: str,
        target_language: SupportedLanguage,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> str:
        """Best-effort translation returning the original text on any failure."""
        try:
            result = await self.translate(
                TranslationRequest(text=text, target_language=target_language),
                client_id,
            )
        except (ValidationError, RateLimitExceededError) as e:
            logger.warning("translate_text_fallback", error=str(e), error_type=type(e).__name__)
            return text
        return result.translated_text or text

    async def batch_translate(
        self,
        texts: Sequence[str],
        target_language: SupportedLanguage,
        client_id: str = "batch",
        delay_seconds: float = 0.1,
    ) -> Dict[str, str]:
        """
        Translate texts one after another.

        Empty texts map to themselves; per-item failures fall back to the
        original text.
        """
        results: Dict[str, str] = {}
        for i, text in enumerate(texts):
            if not text or not text.strip():
                results[text] = text
                continue

            results[text] = await self.translate_text(text, target_language, f"{client_id}-{i}")

            if delay_seconds and i < len(texts) - 1:
                await asyncio.sleep(delay_seconds)

        return results


def build_default_providers() -> List[TranslationProvider]:
    """Default waterfall configured from the environment."""
    timeout = os.getenv("TRANSLATION_PROVIDER_TIMEOUT_SECONDS")
    timeout_seconds = float(timeout) if timeout else None
    return [
        MyMemoryProvider(
            contact_email=os.getenv("TRANSLATION_EMAIL", "support@example.com"),
            timeout_seconds=timeout_seconds,
        ),
        GoogleFreeProvider(timeout_seconds=timeout_seconds),
        OpenAIProvider(),
        MockProvider(),
    ]


_translation_gateway: Optional[TranslationGateway] = None


def get_translation_gateway() -> TranslationGateway:
    """Get global translation gateway instance."""
    global _translation_gateway

    if _translation_gateway is None:
        ttl = float(os.getenv("TRANSLATION_CACHE_TTL_SECONDS", str(TRANSLATION_CACHE_TTL_SECONDS)))
        max_length = int(os.getenv("TRANSLATION_MAX_TEXT_LENGTH", str(DEFAULT_MAX_TEXT_LENGTH)))
        _translation_gateway = TranslationGateway(
            cache=InMemoryTTLCache(ttl_seconds=ttl),
            max_text_length=max_length,
        )

    return _translation_gateway
