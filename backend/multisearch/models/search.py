"""Value types produced by the search-term pipeline."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from multisearch.models.languages import SupportedLanguage

ALL_SENTINEL = "all"


@dataclass(frozen=True)
class MultilingualSearchOptions:
    query: str
    category: str = ALL_SENTINEL
    target_language: SupportedLanguage = SupportedLanguage.EN_US
    source_language: Optional[SupportedLanguage] = None


@dataclass(frozen=True)
class ProcessedSearchTerms:
    """
    Expanded query and category terms for one search request.

    translated_queries / translated_categories always start with the
    original input.
    """
    original_query: str
    translated_queries: Tuple[str, ...]
    original_category: str
    translated_categories: Tuple[str, ...]
    detected_language: SupportedLanguage

    @property
    def query_active(self) -> bool:
        return bool(self.original_query) and self.original_query != ALL_SENTINEL

    @property
    def category_active(self) -> bool:
        return bool(self.original_category) and self.original_category != ALL_SENTINEL


@dataclass
class SpellingCorrection:
    is_likely_misspelled: bool
    suggestions: List[str] = field(default_factory=list)
    corrected_query: Optional[str] = None
    confidence: float = 1.0


@dataclass(frozen=True)
class TranslatedLabel:
    """Display translation of a category (or tag) label."""
    original: str
    translated: str
    id: Optional[str] = None
