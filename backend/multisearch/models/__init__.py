"""Domain values and API models."""

from .languages import SupportedLanguage
from .search import (
    ALL_SENTINEL,
    MultilingualSearchOptions,
    ProcessedSearchTerms,
    SpellingCorrection,
    TranslatedLabel,
)
from .translation import TranslationRequest, TranslationResponse

__all__ = [
    "SupportedLanguage",
    "ALL_SENTINEL",
    "MultilingualSearchOptions",
    "ProcessedSearchTerms",
    "SpellingCorrection",
    "TranslatedLabel",
    "TranslationRequest",
    "TranslationResponse",
]
