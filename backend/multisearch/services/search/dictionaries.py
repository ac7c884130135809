"""
Static per-language term dictionaries.

Loaded once from JSON files and never mutated afterwards:
- misspellings.json: canonical term -> known misspellings
- product_terms.json: product term -> equivalent terms in the other languages
- common_terms.json: common search terms used for autocomplete
"""
import json
import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from multisearch.core.logging import get_logger
from multisearch.models.languages import SupportedLanguage

logger = get_logger(__name__)

DEFAULT_DICTIONARY_DIR = Path(__file__).parent / "data"

MISSPELLINGS_FILE = "misspellings.json"
PRODUCT_TERMS_FILE = "product_terms.json"
COMMON_TERMS_FILE = "common_terms.json"


class TermDictionaries:
    """
    Read-only holder for the misspelling, product-term and common-term maps.

    A missing or malformed file leaves that dictionary empty; search keeps
    working without it.
    """

    def __init__(self, dictionary_dir: Optional[Path] = None):
        self.dictionary_dir = Path(dictionary_dir) if dictionary_dir else DEFAULT_DICTIONARY_DIR
        self._misspellings: Dict[SupportedLanguage, Mapping[str, Tuple[str, ...]]] = {}
        self._product_terms: Dict[SupportedLanguage, Mapping[str, Tuple[str, ...]]] = {}
        self._common_terms: Dict[SupportedLanguage, Tuple[str, ...]] = {}
        self._is_initialized = False

    def initialize(self) -> bool:
        """
        Load all dictionaries.

        Returns:
            True if every file loaded, False if any was missing or invalid
        """
        if self._is_initialized:
            return True

        raw_misspellings = self._load_json(MISSPELLINGS_FILE)
        raw_product_terms = self._load_json(PRODUCT_TERMS_FILE)
        raw_common_terms = self._load_json(COMMON_TERMS_FILE)
        ok = all(raw is not None for raw in (raw_misspellings, raw_product_terms, raw_common_terms))

        self._misspellings = self._parse_term_map(raw_misspellings or {}, MISSPELLINGS_FILE)
        self._product_terms = self._parse_term_map(raw_product_terms or {}, PRODUCT_TERMS_FILE)

        for locale, terms in (raw_common_terms or {}).items():
            language = SupportedLanguage.parse(locale)
            if language is None or not isinstance(terms, list):
                logger.warning("term_dictionary_entry_skipped", file=COMMON_TERMS_FILE, locale=locale)
                continue
            self._common_terms[language] = tuple(t.lower() for t in terms if isinstance(t, str))

        self._is_initialized = True
        logger.info(
            "term_dictionaries_loaded",
            path=str(self.dictionary_dir),
            misspelling_terms=sum(len(m) for m in self._misspellings.values()),
            product_terms=sum(len(m) for m in self._product_terms.values()),
            common_terms=sum(len(t) for t in self._common_terms.values()),
        )
        return ok

    def _load_json(self, filename: str) -> Optional[dict]:
        path = self.dictionary_dir / filename
        if not path.exists():
            logger.warning("term_dictionary_not_found", path=str(path))
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("term_dictionary_json_error", path=str(path), error=str(e))
            return None

        if not isinstance(data, dict):
            logger.error(
                "term_dictionary_invalid",
                path=str(path),
                message="Dictionary must be a JSON object keyed by locale",
            )
            return None
        return data

    def _parse_term_map(
        self,
        raw: dict,
        filename: str,
    ) -> Dict[SupportedLanguage, Mapping[str, Tuple[str, ...]]]:
        parsed: Dict[SupportedLanguage, Mapping[str, Tuple[str, ...]]] = {}
        for locale, entries in raw.items():
            language = SupportedLanguage.parse(locale)
            if language is None or not isinstance(entries, dict):
                logger.warning("term_dictionary_entry_skipped", file=filename, locale=locale)
                continue
            parsed[language] = MappingProxyType({
                term.lower(): tuple(v.lower() for v in values if isinstance(v, str))
                for term, values in entries.items()
                if isinstance(values, list)
            })
        return parsed

    def _ensure_loaded(self) -> None:
        if not self._is_initialized:
            self.initialize()

    def misspellings(self, language: SupportedLanguage) -> Mapping[str, Tuple[str, ...]]:
        """Canonical term -> known misspellings for one language."""
        self._ensure_loaded()
        return self._misspellings.get(language, MappingProxyType({}))

    def product_terms(self, language: SupportedLanguage) -> Mapping[str, Tuple[str, ...]]:
        """Product term -> cross-language equivalents for one language."""
        self._ensure_loaded()
        return self._product_terms.get(language, MappingProxyType({}))

    def common_terms(self, language: SupportedLanguage) -> Tuple[str, ...]:
        self._ensure_loaded()
        return self._common_terms.get(language, ())

    def canonical_for(self, term: str, language: SupportedLanguage) -> Optional[str]:
        """Canonical spelling if term is a known misspelling, else None."""
        lowered = term.lower().strip()
        for canonical, misspellings in self.misspellings(language).items():
            if lowered in misspellings:
                return canonical
        return None

    def product_keywords(self) -> List[str]:
        """Every product term across languages (used to pick head nouns)."""
        self._ensure_loaded()
        keywords: List[str] = []
        for terms in self._product_terms.values():
            keywords.extend(terms.keys())
        return keywords


_term_dictionaries: Optional[TermDictionaries] = None


def get_term_dictionaries() -> TermDictionaries:
    """Get global dictionaries instance (honours SEARCH_DICTIONARY_PATH)."""
    global _term_dictionaries

    if _term_dictionaries is None:
        dictionary_dir = os.getenv("SEARCH_DICTIONARY_PATH")
        _term_dictionaries = TermDictionaries(
            dictionary_dir=Path(dictionary_dir) if dictionary_dir else None,
        )
        _term_dictionaries.initialize()

    return _term_dictionaries
