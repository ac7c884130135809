"""Multilingual search-term expansion, catalog filters and suggestions."""

from .multilingual import (
    create_multilingual_search_filter,
    detect_and_correct_spelling,
    detect_query_language,
    generate_search_suggestions,
    process_search_terms,
    translate_categories_for_display,
    translate_tags_for_display,
)

__all__ = [
    "create_multilingual_search_filter",
    "detect_and_correct_spelling",
    "detect_query_language",
    "generate_search_suggestions",
    "process_search_terms",
    "translate_categories_for_display",
    "translate_tags_for_display",
]
