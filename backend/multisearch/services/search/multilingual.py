"""
Public multilingual search operations.

Thin module-level entry points over the global service instances, used by
the API routes.
"""
from typing import Any, Iterable, List, Mapping, Optional

from multisearch.models.languages import SupportedLanguage
from multisearch.models.search import (
    MultilingualSearchOptions,
    ProcessedSearchTerms,
    SpellingCorrection,
    TranslatedLabel,
)
from multisearch.services.search.language_detection import get_language_detector
from multisearch.services.search.query_filter import Predicate, get_query_filter_builder
from multisearch.services.search.suggestions import DEFAULT_LIMIT, get_suggestion_engine
from multisearch.services.search.term_processor import get_search_term_processor


async def process_search_terms(options: MultilingualSearchOptions) -> ProcessedSearchTerms:
    return await get_search_term_processor().process(options)


def create_multilingual_search_filter(terms: ProcessedSearchTerms) -> Optional[Predicate]:
    """Predicate tree for the catalog; None means no filtering."""
    return get_query_filter_builder().build_filter(terms)


async def translate_categories_for_display(
    categories: Iterable[str],
    target_language: SupportedLanguage,
) -> List[TranslatedLabel]:
    return await get_suggestion_engine().translate_categories_for_display(categories, target_language)


async def translate_tags_for_display(
    tags: Iterable[Mapping[str, Any]],
    target_language: SupportedLanguage,
) -> List[TranslatedLabel]:
    return await get_suggestion_engine().translate_tags_for_display(tags, target_language)


async def generate_search_suggestions(
    partial_query: str,
    target_language: SupportedLanguage = SupportedLanguage.EN_US,
    limit: int = DEFAULT_LIMIT,
) -> List[str]:
    return await get_suggestion_engine().suggest(partial_query, target_language, limit)


async def detect_and_correct_spelling(
    query: str,
    target_language: SupportedLanguage = SupportedLanguage.EN_US,
) -> SpellingCorrection:
    return await get_suggestion_engine().correct_spelling(query, target_language)


def detect_query_language(query: str) -> SupportedLanguage:
    return get_language_detector().detect(query)
