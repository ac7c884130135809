"""
Request and response models for API endpoints.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from multisearch.models.languages import SupportedLanguage


class ProcessedTermsResponse(BaseModel):
    """Expanded terms plus the rendered catalog filter."""
    original_query: str
    translated_queries: List[str]
    original_category: str
    translated_categories: List[str]
    detected_language: SupportedLanguage
    filter: Dict[str, Any]


class SpellCheckResult(BaseModel):
    is_likely_misspelled: bool
    suggestions: List[str] = []
    corrected_query: Optional[str] = None
    confidence: float


class SuggestionsResponse(BaseModel):
    suggestions: List[str]
    spell_check: Optional[SpellCheckResult] = None
    detected_language: Optional[SupportedLanguage] = None


class LanguageResponse(BaseModel):
    query: str
    detected_language: SupportedLanguage


class TranslateRequestBody(BaseModel):
    text: str
    target_language: SupportedLanguage


class TranslateResponseBody(BaseModel):
    success: bool = True
    translated_text: str
    detected_source_language: Optional[str] = None
    confidence: float


class CategoryTranslationRequest(BaseModel):
    categories: List[str] = Field(default_factory=list)
    target_language: SupportedLanguage = SupportedLanguage.EN_US


class CategoryTranslation(BaseModel):
    original: str
    translated: str
