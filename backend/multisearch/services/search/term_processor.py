"""
Search term processing.

Turns a raw query + category pair into ProcessedSearchTerms:
1. Detect the source language (unless given)
2. Add fuzzy variants of the input
3. Add cross-language equivalents from the product-term dictionary
4. Only when no dictionary mapping exists, translate into every other
   supported language and fold in a simplified form of each translation

Query and category sides are expanded independently; the sentinel "all"
(or an empty value) is passed through untouched.
"""
import re
from typing import Iterable, List, Optional, Tuple

from multisearch.core.logging import get_logger
from multisearch.core.metrics import record_search_terms
from multisearch.models.languages import SupportedLanguage
from multisearch.models.search import ALL_SENTINEL, MultilingualSearchOptions, ProcessedSearchTerms
from multisearch.models.translation import TranslationRequest
from multisearch.services.search.dictionaries import TermDictionaries, get_term_dictionaries
from multisearch.services.search.fuzzy_variants import FuzzyVariantGenerator, get_fuzzy_variant_generator
from multisearch.services.search.language_detection import LanguageDetector, get_language_detector
from multisearch.services.translation.gateway import TranslationGateway, get_translation_gateway

logger = get_logger(__name__)

LEADING_TAG = re.compile(r"^\[[^\]]*\]\s*")
LEADING_ARTICLE = re.compile(r"^(a pair of|an?|the|en|et|ei)\s+", re.IGNORECASE)
ELLIPSIS = re.compile(r"\s*\.\.\.\s*")
PUNCTUATION = re.compile(r"[!?,.]")

EXTRA_PRODUCT_KEYWORDS = ("shoe",)


def _unique(terms: Iterable[str]) -> List[str]:
    """Drop empties and duplicates, keeping first-seen order."""
    seen = set()
    ordered = []
    for term in terms:
        if term and term not in seen:
            seen.add(term)
            ordered.append(term)
    return ordered


class SearchTermProcessor:
    """Expands query and category input into multilingual term sets."""

    def __init__(
        self,
        detector: Optional[LanguageDetector] = None,
        fuzzy: Optional[FuzzyVariantGenerator] = None,
        dictionaries: Optional[TermDictionaries] = None,
        gateway: Optional[TranslationGateway] = None,
    ):
        self.detector = detector or get_language_detector()
        self.dictionaries = dictionaries or get_term_dictionaries()
        if fuzzy is not None:
            self.fuzzy = fuzzy
        elif dictionaries is not None or detector is not None:
            self.fuzzy = FuzzyVariantGenerator(dictionaries=self.dictionaries, detector=self.detector)
        else:
            self.fuzzy = get_fuzzy_variant_generator()
        self.gateway = gateway or get_translation_gateway()

    async def process(self, options: MultilingualSearchOptions) -> ProcessedSearchTerms:
        """
        Process search terms and category for multilingual search.

        Never fails on network conditions: translation trouble degrades to
        dictionary and fuzzy expansion only.
        """
        query_terms, query_language = await self.expand_terms(options.query, options.source_language)
        category_terms, category_language = await self.expand_terms(options.category, options.source_language)

        detected_language = query_language or category_language or SupportedLanguage.EN_US

        record_search_terms("query", len(query_terms))
        record_search_terms("category", len(category_terms))

        logger.info(
            "search_terms_processed",
            query=options.query,
            category=options.category,
            detected_language=detected_language.value,
            query_terms=len(query_terms),
            category_terms=len(category_terms),
        )

        return ProcessedSearchTerms(
            original_query=options.query,
            translated_queries=tuple(query_terms),
            original_category=options.category,
            translated_categories=tuple(category_terms),
            detected_language=detected_language,
        )

    async def expand_terms(
        self,
        text: str,
        source_language: Optional[SupportedLanguage] = None,
    ) -> Tuple[List[str], Optional[SupportedLanguage]]:
        """
        Expand one side (query or category) of a search.

        Returns:
            (terms with the original first, detected language or None when
            the input is inactive)
        """
        if not text or not text.strip() or text == ALL_SENTINEL:
            return [text], None

        language = source_language or self.detector.detect(text)
        lowered = text.lower().strip()

        fuzzy_variants = sorted(v for v in self.fuzzy.variants(text, language) if v != text)
        equivalents = self.dictionary_equivalents(lowered, language)

        translated: List[str] = []
        if not equivalents:
            translated = await self._translate_to_other_languages(text, language)

        return _unique([text, *fuzzy_variants, *equivalents, *translated]), language

    def dictionary_equivalents(self, lowered: str, language: SupportedLanguage) -> List[str]:
        """Cross-language equivalents of every dictionary term the text equals or contains."""
        equivalents: List[str] = []
        for term, mapped in self.dictionaries.product_terms(language).items():
            if lowered == term or term in lowered:
                equivalents.extend(mapped)
        return equivalents

    async def _translate_to_other_languages(self, text: str, source: SupportedLanguage) -> List[str]:
        found: List[str] = []
        for target in SupportedLanguage:
            if target == source:
                continue

            try:
                result = await self.gateway.translate(
                    TranslationRequest(text=text, target_language=target, source_language=source)
                )
            except Exception as e:
                logger.warning(
                    "search_term_translation_failed",
                    text=text,
                    target_language=target.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            if result.translated_text and result.translated_text != text:
                simplified = self.extract_simple_terms(result.translated_text)
                if simplified:
                    found.append(simplified)
                    found.append(simplified.lower())

        return found

    def extract_simple_terms(self, translated_text: str) -> str:
        """
        Reduce a translated phrase to a searchable head term.

        "A pair of shoes." -> "shoes"; "[Norsk] kjole" -> "kjole"
        """
        simplified = LEADING_TAG.sub("", translated_text.strip())
        simplified = LEADING_ARTICLE.sub("", simplified)
        simplified = ELLIPSIS.sub("", simplified)
        simplified = PUNCTUATION.sub("", simplified).strip()

        words = simplified.split()
        if len(words) < 2:
            return simplified

        keywords = [*self.dictionaries.product_keywords(), *EXTRA_PRODUCT_KEYWORDS]
        for word in words:
            lowered = word.lower()
            if any(keyword in lowered for keyword in keywords):
                return word

        # Last word is usually the head noun
        return words[-1]


_search_term_processor: Optional[SearchTermProcessor] = None


def get_search_term_processor() -> SearchTermProcessor:
    """Get global search term processor instance."""
    global _search_term_processor

    if _search_term_processor is None:
        _search_term_processor = SearchTermProcessor()

    return _search_term_processor
