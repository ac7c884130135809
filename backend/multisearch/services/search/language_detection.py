"""
Heuristic language detection for search queries.

Maps free text to one of the supported locales. First match wins:
1. Any Arabic-script code point -> ar
2. Any of æ/ø/å -> nb-NO
3. A token from the Norwegian word list -> nb-NO
4. A token longer than 3 chars with a Norwegian suffix -> nb-NO
5. A single token with a Norwegian letter cluster -> nb-NO
6. en-US
"""
import re
from typing import FrozenSet, Optional, Tuple

from multisearch.models.languages import SupportedLanguage

ARABIC_SCRIPT = re.compile(r"[\u0600-\u06FF]")
NORWEGIAN_LETTERS = re.compile(r"[æøåÆØÅ]")

NORWEGIAN_WORDS: FrozenSet[str] = frozenset({
    # Function words
    "og", "eller", "for", "med", "på", "av", "til", "fra", "som", "jeg",
    "du", "han", "hun", "det", "vi", "de", "ikke", "være", "ha", "kunne",
    "skulle", "ville", "få",
    # Products
    "sko", "skjorte", "bukse", "jakke", "kjole", "genser", "trøye", "shorts",
    "jeans", "undertøy",
    # Shopping
    "pris", "kvalitet", "størrelse", "farge", "merke", "produkter", "kjøp",
    "salg", "tilbud", "levering", "bestilling", "betaling", "retur", "garanti",
    # Colors
    "rød", "blå", "grønn", "gul", "svart", "hvit", "grå", "brun", "rosa", "lilla",
    # Categories
    "klær", "elektronikk", "hjem", "hage", "sport", "barn", "dame", "herre",
    # Adjectives
    "god", "beste", "billig", "dyr", "ny", "brukt", "stor", "liten", "lett", "tung",
})

NORWEGIAN_SUFFIXES: Tuple[str, ...] = ("else", "het", "ing", "skap", "dom")
NORWEGIAN_CLUSTERS: Tuple[str, ...] = ("skj", "kj", "øy", "ey", "åk", "ål")


class LanguageDetector:
    """Deterministic, I/O-free locale classifier."""

    def __init__(
        self,
        norwegian_words: FrozenSet[str] = NORWEGIAN_WORDS,
        norwegian_suffixes: Tuple[str, ...] = NORWEGIAN_SUFFIXES,
        norwegian_clusters: Tuple[str, ...] = NORWEGIAN_CLUSTERS,
    ):
        self.norwegian_words = norwegian_words
        self.norwegian_suffixes = norwegian_suffixes
        self.norwegian_clusters = norwegian_clusters

    def detect(self, text: Optional[str]) -> SupportedLanguage:
        if not text:
            return SupportedLanguage.EN_US

        if ARABIC_SCRIPT.search(text):
            return SupportedLanguage.AR

        if NORWEGIAN_LETTERS.search(text):
            return SupportedLanguage.NB_NO

        words = text.lower().strip().split()
        if not words:
            return SupportedLanguage.EN_US

        if any(word in self.norwegian_words for word in words):
            return SupportedLanguage.NB_NO

        for word in words:
            if len(word) > 3 and word.endswith(self.norwegian_suffixes):
                return SupportedLanguage.NB_NO

        if len(words) == 1 and any(cluster in words[0] for cluster in self.norwegian_clusters):
            return SupportedLanguage.NB_NO

        return SupportedLanguage.EN_US


_language_detector: Optional[LanguageDetector] = None


def get_language_detector() -> LanguageDetector:
    """Get global language detector instance."""
    global _language_detector
    if _language_detector is None:
        _language_detector = LanguageDetector()
    return _language_detector
