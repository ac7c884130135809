"""
Typo-tolerant variant generation.

Cheap, offline first line of typo tolerance: dictionary corrections,
phonetic normalization, per-language character substitutions, adjacent
transpositions, repeated-letter collapsing and prefix completion. Never
calls external services.
"""
import os
import re
from typing import Dict, Optional, Set, Tuple

from multisearch.core.logging import get_logger
from multisearch.models.languages import SupportedLanguage
from multisearch.services.search.dictionaries import TermDictionaries, get_term_dictionaries
from multisearch.services.search.edit_distance import similarity
from multisearch.services.search.language_detection import LanguageDetector, get_language_detector

logger = get_logger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.7
MIN_TERM_LENGTH = 3
PREFIX_EXTENSION_CHARS = 3

PHONETIC_SUBSTITUTIONS = (("ph", "f"), ("ck", "k"), ("ee", "e"))
REPEATED_VOWELS = re.compile(r"([aeiou])\1+")
REPEATED_CHARS = re.compile(r"(.)\1+")

# Orthographic alternatives: every occurrence of the key is replaced by each
# alternative in turn
CHARACTER_SUBSTITUTIONS: Dict[SupportedLanguage, Tuple[Tuple[str, Tuple[str, ...]], ...]] = {
    SupportedLanguage.AR: (
        ("ا", ("آ", "أ", "إ")),
        ("ة", ("ه",)),
        ("ي", ("ى",)),
        ("و", ("ؤ",)),
    ),
    SupportedLanguage.NB_NO: (
        ("å", ("a",)),
        ("æ", ("ae",)),
        ("ø", ("o",)),
        ("a", ("å",)),
        ("o", ("ø",)),
        ("e", ("æ",)),
    ),
    SupportedLanguage.EN_US: (
        ("c", ("k",)),
        ("k", ("c",)),
        ("s", ("z",)),
        ("z", ("s",)),
    ),
}


def phonetic_normalize(term: str) -> str:
    normalized = term
    for source, replacement in PHONETIC_SUBSTITUTIONS:
        normalized = normalized.replace(source, replacement)
    return REPEATED_VOWELS.sub(r"\1", normalized)


def substitutions(term: str, language: SupportedLanguage) -> Set[str]:
    """Spellings with one character class swapped, e.g. 'grønn' -> 'gronn' (nb-NO)."""
    swapped = set()
    for source, alternatives in CHARACTER_SUBSTITUTIONS.get(language, ()):
        if source in term:
            swapped.update(term.replace(source, alternative) for alternative in alternatives)
    swapped.discard(term)
    return swapped


def collapse_repeats(term: str) -> str:
    """'shoeees' -> 'shoes'."""
    return REPEATED_CHARS.sub(r"\1", term)


def transpositions(term: str) -> Set[str]:
    """Every string obtained by swapping one pair of adjacent characters."""
    swapped = set()
    for i in range(len(term) - 1):
        swapped.add(term[:i] + term[i + 1] + term[i] + term[i + 2:])
    return swapped


class FuzzyVariantGenerator:
    """Produces alternate spellings and canonical corrections for a term."""

    def __init__(
        self,
        dictionaries: Optional[TermDictionaries] = None,
        detector: Optional[LanguageDetector] = None,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ):
        self.dictionaries = dictionaries or get_term_dictionaries()
        self.detector = detector or get_language_detector()
        self.similarity_threshold = similarity_threshold

    def variants(self, term: str, language: Optional[SupportedLanguage] = None) -> Set[str]:
        """
        Generate fuzzy variants of term.

        Args:
            term: Search term
            language: Dictionary language; detected from term when omitted

        Returns:
            Set that always contains term itself
        """
        if not term or len(term) < MIN_TERM_LENGTH:
            return {term}

        language = language or self.detector.detect(term)
        lowered = term.lower()
        found = {term}

        misspellings = self.dictionaries.misspellings(language)
        for canonical, known_misspellings in misspellings.items():
            if lowered in known_misspellings:
                found.add(canonical)
                found.add(canonical.capitalize())
            if similarity(lowered, canonical) >= self.similarity_threshold:
                found.add(canonical)

        phonetic = phonetic_normalize(lowered)
        if phonetic != lowered:
            found.add(phonetic)

        found.update(substitutions(lowered, language))
        found.update(transpositions(lowered))

        collapsed = collapse_repeats(lowered)
        if collapsed != lowered:
            found.add(collapsed)

        for canonical in misspellings:
            if canonical.startswith(lowered) and len(canonical) <= len(lowered) + PREFIX_EXTENSION_CHARS:
                found.add(canonical)

        logger.debug(
            "fuzzy_variants_generated",
            term=term,
            language=language.value,
            variant_count=len(found),
        )
        return found


_fuzzy_variant_generator: Optional[FuzzyVariantGenerator] = None


def get_fuzzy_variant_generator() -> FuzzyVariantGenerator:
    """Get global generator (threshold from SEARCH_FUZZY_SIMILARITY_THRESHOLD)."""
    global _fuzzy_variant_generator

    if _fuzzy_variant_generator is None:
        threshold = float(os.getenv("SEARCH_FUZZY_SIMILARITY_THRESHOLD", str(DEFAULT_SIMILARITY_THRESHOLD)))
        _fuzzy_variant_generator = FuzzyVariantGenerator(similarity_threshold=threshold)

    return _fuzzy_variant_generator
