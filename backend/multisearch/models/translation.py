"""Translation request/response values shared by the gateway and its providers."""
from dataclasses import dataclass
from typing import Optional

from multisearch.models.languages import SupportedLanguage


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    target_language: SupportedLanguage
    source_language: Optional[SupportedLanguage] = None
    cache_key: Optional[str] = None


@dataclass(frozen=True)
class TranslationResponse:
    """
    Result of a translation.

    confidence is advisory (0..1); nothing filters on it.
    """
    translated_text: str
    detected_source_language: Optional[str] = None
    confidence: float = 0.0
    provider: Optional[str] = None
