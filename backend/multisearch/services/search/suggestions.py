"""
Autocomplete suggestions and spell correction.

Suggestion tiers (earlier tiers win, no duplicates, stop at limit):
1. Published categories, translated for display: prefix, substring, similarity >= 0.8
2. Product names containing the partial query
3. Common terms for the target language: prefix, substring, similarity in [0.6, 1.0)

Repository failures are logged and the engine falls through to the
dictionary tier.
"""
import os
from typing import Any, Callable, Iterable, List, Mapping, Optional

from multisearch.core.logging import get_logger
from multisearch.core.metrics import record_repository_error
from multisearch.models.languages import SupportedLanguage
from multisearch.models.search import SpellingCorrection, TranslatedLabel
from multisearch.models.translation import TranslationRequest
from multisearch.services.search.dictionaries import TermDictionaries, get_term_dictionaries
from multisearch.services.search.edit_distance import similarity
from multisearch.services.search.product_repository import ProductRepository, get_product_repository
from multisearch.services.translation.gateway import TranslationGateway, get_translation_gateway
from multisearch.services.translation.providers import MockProvider

logger = get_logger(__name__)

DEFAULT_LIMIT = 5
MIN_SUGGESTION_LENGTH = 2
MIN_SPELLING_LENGTH = 3
SPELLING_SUGGESTION_LIMIT = 3

DEFAULT_CATEGORY_THRESHOLD = 0.8
DEFAULT_COMMON_TERM_THRESHOLD = 0.6
DEFAULT_SPELLING_THRESHOLD = 0.8
EXACT_MISSPELLING_CONFIDENCE = 0.9


def rank_matches(
    partial: str,
    candidates: Iterable[str],
    accept_similarity: Callable[[float], bool],
) -> List[str]:
    """Order candidates: prefix matches, then substring matches, then similar ones."""
    needle = partial.lower()
    prefix, substring, similar = [], [], []
    for candidate in candidates:
        lowered = candidate.lower()
        if lowered.startswith(needle):
            prefix.append(candidate)
        elif needle in lowered:
            substring.append(candidate)
        elif accept_similarity(similarity(needle, lowered)):
            similar.append(candidate)
    return prefix + substring + similar


class _SuggestionList:
    """Bounded, case-insensitively de-duplicated suggestion accumulator."""

    def __init__(self, limit: int):
        self.limit = limit
        self.items: List[str] = []
        self._seen = set()

    @property
    def full(self) -> bool:
        return len(self.items) >= self.limit

    @property
    def remaining(self) -> int:
        return max(self.limit - len(self.items), 0)

    def extend(self, candidates: Iterable[str]) -> None:
        for candidate in candidates:
            if self.full:
                return
            key = candidate.lower()
            if key not in self._seen:
                self._seen.add(key)
                self.items.append(candidate)


class SuggestionEngine:
    """Autocomplete and spell correction over catalog data and static dictionaries."""

    def __init__(
        self,
        repository: Optional[ProductRepository] = None,
        gateway: Optional[TranslationGateway] = None,
        dictionaries: Optional[TermDictionaries] = None,
        category_threshold: float = DEFAULT_CATEGORY_THRESHOLD,
        common_term_threshold: float = DEFAULT_COMMON_TERM_THRESHOLD,
        spelling_threshold: float = DEFAULT_SPELLING_THRESHOLD,
    ):
        self.repository = repository or get_product_repository()
        self.gateway = gateway or get_translation_gateway()
        self.dictionaries = dictionaries or get_term_dictionaries()
        self.category_threshold = category_threshold
        self.common_term_threshold = common_term_threshold
        self.spelling_threshold = spelling_threshold

    async def suggest(
        self,
        partial_query: str,
        target_language: SupportedLanguage = SupportedLanguage.EN_US,
        limit: int = DEFAULT_LIMIT,
    ) -> List[str]:
        """
        Generate autocomplete suggestions.

        Args:
            partial_query: What the user has typed so far
            target_language: Display language
            limit: Maximum number of suggestions

        Returns:
            At most `limit` suggestions ordered by tier
        """
        partial = (partial_query or "").strip()
        if len(partial) < MIN_SUGGESTION_LENGTH or limit <= 0:
            return []

        suggestions = _SuggestionList(limit)

        # Tier 1: live categories
        categories = self._repository_call("get_published_categories", self.repository.get_published_categories)
        if categories:
            labels = await self.translate_categories_for_display(categories, target_language)
            suggestions.extend(rank_matches(
                partial,
                [label.translated for label in labels],
                lambda score: score >= self.category_threshold,
            ))

        # Tier 2: product names
        if not suggestions.full:
            names = self._repository_call(
                "search_product_names",
                self.repository.search_product_names,
                partial,
                suggestions.remaining,
            )
            suggestions.extend(names)

        # Tier 3: common terms
        if not suggestions.full:
            suggestions.extend(rank_matches(
                partial,
                self.dictionaries.common_terms(target_language),
                lambda score: self.common_term_threshold <= score < 1.0,
            ))

        logger.info(
            "search_suggestions_generated",
            partial_query=partial,
            target_language=target_language.value,
            count=len(suggestions.items),
        )
        return suggestions.items

    def _repository_call(self, operation: str, func: Callable[..., List[str]], *args: Any) -> List[str]:
        try:
            return func(*args)
        except Exception as e:
            record_repository_error(operation)
            logger.warning(
                "suggestion_repository_error",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

    async def correct_spelling(
        self,
        query: str,
        target_language: SupportedLanguage = SupportedLanguage.EN_US,
    ) -> SpellingCorrection:
        """
        Detect a likely misspelling and propose a correction.

        Exact misspelling-dictionary hits win; otherwise the first canonical
        term with similarity in [threshold, 1.0) is taken.
        """
        lowered = (query or "").lower().strip()
        if len(lowered) < MIN_SPELLING_LENGTH:
            return SpellingCorrection(is_likely_misspelled=False)

        canonical_terms = self.dictionaries.misspellings(target_language)
        if lowered in canonical_terms:
            return SpellingCorrection(is_likely_misspelled=False)

        corrected = self.dictionaries.canonical_for(lowered, target_language)
        confidence = EXACT_MISSPELLING_CONFIDENCE

        if corrected is None:
            for canonical in canonical_terms:
                score = similarity(lowered, canonical)
                if self.spelling_threshold <= score < 1.0:
                    corrected = canonical
                    confidence = score
                    break

        if corrected is None:
            return SpellingCorrection(is_likely_misspelled=False)

        suggestions = await self.suggest(corrected, target_language, SPELLING_SUGGESTION_LIMIT)
        logger.info(
            "spelling_correction_found",
            query=query,
            corrected_query=corrected,
            confidence=confidence,
        )
        return SpellingCorrection(
            is_likely_misspelled=True,
            suggestions=suggestions,
            corrected_query=corrected,
            confidence=confidence,
        )

    async def translate_categories_for_display(
        self,
        categories: Iterable[str],
        target_language: SupportedLanguage,
    ) -> List[TranslatedLabel]:
        """Translate category labels; a failed item keeps its original text."""
        return [
            TranslatedLabel(original=category, translated=await self._translate_label(category, target_language))
            for category in categories
        ]

    async def translate_tags_for_display(
        self,
        tags: Iterable[Mapping[str, Any]],
        target_language: SupportedLanguage,
    ) -> List[TranslatedLabel]:
        """Translate tag names ({id, name} mappings); a failed item keeps its original text."""
        labels = []
        for tag in tags:
            name = tag.get("name", "")
            tag_id = tag.get("id", tag.get("_id"))
            labels.append(TranslatedLabel(
                original=name,
                translated=await self._translate_label(name, target_language),
                id=str(tag_id) if tag_id is not None else None,
            ))
        return labels

    async def _translate_label(self, label: str, target_language: SupportedLanguage) -> str:
        # Catalog labels are stored in English
        try:
            result = await self.gateway.translate(
                TranslationRequest(
                    text=label,
                    target_language=target_language,
                    source_language=SupportedLanguage.EN_US,
                )
            )
        except Exception as e:
            logger.warning(
                "label_translation_failed",
                label=label,
                target_language=target_language.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return label
        if result.provider == MockProvider.name:
            # Placeholder text from the offline fallback is not a display label
            logger.debug("label_translation_unavailable", label=label, target_language=target_language.value)
            return label
        return result.translated_text or label


_suggestion_engine: Optional[SuggestionEngine] = None


def get_suggestion_engine() -> SuggestionEngine:
    """Get global suggestion engine instance (thresholds from the environment)."""
    global _suggestion_engine

    if _suggestion_engine is None:
        _suggestion_engine = SuggestionEngine(
            category_threshold=float(
                os.getenv("SEARCH_CATEGORY_SIMILARITY_THRESHOLD", str(DEFAULT_CATEGORY_THRESHOLD))
            ),
            common_term_threshold=float(
                os.getenv("SEARCH_COMMON_TERM_SIMILARITY_THRESHOLD", str(DEFAULT_COMMON_TERM_THRESHOLD))
            ),
            spelling_threshold=float(
                os.getenv("SEARCH_SPELLING_SIMILARITY_THRESHOLD", str(DEFAULT_SPELLING_THRESHOLD))
            ),
        )

    return _suggestion_engine
