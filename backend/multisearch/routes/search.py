"""
Multilingual search endpoints.

GET  /search/terms?q={query}&category={category}&locale={locale}&source={optional}
GET  /search/suggestions?q={partial}&locale={locale}&limit={int}
GET  /search/language?q={query}
POST /search/categories/translate
"""
import asyncio
import time
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from multisearch.core.logging import get_logger
from multisearch.models.languages import SupportedLanguage
from multisearch.models.responses import (
    CategoryTranslation,
    CategoryTranslationRequest,
    LanguageResponse,
    ProcessedTermsResponse,
    SpellCheckResult,
    SuggestionsResponse,
)
from multisearch.models.search import ALL_SENTINEL, MultilingualSearchOptions
from multisearch.services.search.multilingual import (
    create_multilingual_search_filter,
    detect_and_correct_spelling,
    detect_query_language,
    generate_search_suggestions,
    process_search_terms,
    translate_categories_for_display,
)
from multisearch.services.search.query_filter import to_mongo_filter

logger = get_logger(__name__)

router = APIRouter()

MIN_SUGGESTION_QUERY_LENGTH = 2


@router.get("/terms", response_model=ProcessedTermsResponse)
async def search_terms(
    q: str = Query(ALL_SENTINEL, description="Search query ('all' for no query filter)"),
    category: str = Query(ALL_SENTINEL, description="Category ('all' for no category filter)"),
    locale: SupportedLanguage = Query(SupportedLanguage.EN_US, description="Target language"),
    source: Optional[SupportedLanguage] = Query(None, description="Source language (detected when omitted)"),
):
    """
    Expand a query and category into multilingual terms.

    Returns the expanded terms and the catalog filter rendered as a
    Mongo-style document ({} when neither side filters).
    """
    start_time = time.time()
    try:
        terms = await process_search_terms(
            MultilingualSearchOptions(
                query=q.strip(),
                category=category.strip(),
                target_language=locale,
                source_language=source,
            )
        )
        predicate = create_multilingual_search_filter(terms)

        logger.info(
            "search_terms_completed",
            query=q,
            category=category,
            detected_language=terms.detected_language.value,
            latency_ms=int((time.time() - start_time) * 1000),
        )
        return ProcessedTermsResponse(
            original_query=terms.original_query,
            translated_queries=list(terms.translated_queries),
            original_category=terms.original_category,
            translated_categories=list(terms.translated_categories),
            detected_language=terms.detected_language,
            filter=to_mongo_filter(predicate),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "search_terms_error",
            query=q,
            category=category,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Internal server error during search term processing")


@router.get("/suggestions", response_model=SuggestionsResponse)
async def search_suggestions(
    q: str = Query("", description="Partial search query"),
    locale: SupportedLanguage = Query(SupportedLanguage.EN_US, description="Display language"),
    limit: int = Query(5, ge=1, le=20, description="Maximum number of suggestions"),
):
    """
    Autocomplete suggestions plus spell check.

    The detected query language overrides the requested locale.
    """
    query = q.strip()
    if len(query) < MIN_SUGGESTION_QUERY_LENGTH:
        return SuggestionsResponse(suggestions=[], spell_check=None)

    detected_language = detect_query_language(query)
    if detected_language != locale:
        logger.debug(
            "suggestion_locale_overridden",
            requested=locale.value,
            detected=detected_language.value,
        )

    suggestions, correction = await asyncio.gather(
        generate_search_suggestions(query, detected_language, limit),
        detect_and_correct_spelling(query, detected_language),
    )

    spell_check = None
    if correction.is_likely_misspelled:
        spell_check = SpellCheckResult(
            is_likely_misspelled=True,
            suggestions=correction.suggestions,
            corrected_query=correction.corrected_query,
            confidence=correction.confidence,
        )

    return SuggestionsResponse(
        suggestions=suggestions,
        spell_check=spell_check,
        detected_language=detected_language,
    )


@router.get("/language", response_model=LanguageResponse)
async def search_language(q: str = Query("", description="Text to classify")):
    return LanguageResponse(query=q, detected_language=detect_query_language(q))


@router.post("/categories/translate", response_model=List[CategoryTranslation])
async def translate_categories(body: CategoryTranslationRequest):
    """Translate category labels for display; failed items keep their original text."""
    labels = await translate_categories_for_display(body.categories, body.target_language)
    return [CategoryTranslation(original=label.original, translated=label.translated) for label in labels]
