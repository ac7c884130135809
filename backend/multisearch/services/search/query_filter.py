"""
Storage-agnostic catalog filter.

ProcessedSearchTerms -> predicate tree of And / Or / FieldMatch nodes over
case-insensitive regex patterns:
- query side: restrictive patterns, OR across name, description and brand
- category side: fuzzy patterns, OR across category
- both active: AND(OR(query), OR(category)); neither active: no predicate

The tree can be rendered as a Mongo-style filter document with
to_mongo_filter() or evaluated in-process with Predicate.matches().
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from multisearch.core.logging import get_logger
from multisearch.models.search import ProcessedSearchTerms
from multisearch.services.search.fuzzy_variants import collapse_repeats

logger = get_logger(__name__)

QUERY_FIELDS = ("name", "description", "brand")
CATEGORY_FIELDS = ("category",)

MIN_SUBSTRING_LENGTH = 4
MIN_FUZZY_LENGTH = 4
MIN_FUZZY_PATTERN_LENGTH = 3


class PatternKind(str, Enum):
    EXACT = "exact"
    WORD_BOUNDARY = "word_boundary"
    SUBSTRING = "substring"
    OMISSION = "omission"
    COLLAPSED = "collapsed"


@dataclass(frozen=True)
class Pattern:
    """Regex applied to a single field value."""
    regex: str
    kind: PatternKind
    options: str = "i"

    def compile(self) -> "re.Pattern[str]":
        return re.compile(self.regex, re.IGNORECASE if "i" in self.options else 0)

    def search(self, value: str) -> bool:
        return self.compile().search(value) is not None


class Predicate:
    """Node of the filter tree."""

    def matches(self, record: Mapping[str, Any]) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class FieldMatch(Predicate):
    field: str
    pattern: Pattern

    def matches(self, record: Mapping[str, Any]) -> bool:
        value = record.get(self.field)
        if value is None:
            return False
        if isinstance(value, (list, tuple)):
            return any(self.pattern.search(str(item)) for item in value)
        return self.pattern.search(str(value))


@dataclass(frozen=True)
class Or(Predicate):
    predicates: Tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(p.matches(record) for p in self.predicates)


@dataclass(frozen=True)
class And(Predicate):
    predicates: Tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(p.matches(record) for p in self.predicates)


class QueryFilterBuilder:
    """Builds regex patterns and predicate trees from processed terms."""

    def build_patterns(self, terms: Iterable[str], restrictive: bool = False) -> List[Pattern]:
        """
        Create search patterns for a list of terms.

        Args:
            terms: Expanded terms
            restrictive: Skip typo-tolerant patterns (used for the query side
                to avoid matching unrelated products)

        Returns:
            Patterns in term order
        """
        patterns: List[Pattern] = []

        for term in terms:
            if not term or not term.strip():
                continue

            escaped = re.escape(term)
            patterns.append(Pattern(escaped, PatternKind.EXACT))
            patterns.append(Pattern(rf"\b{escaped}\b", PatternKind.WORD_BOUNDARY))

            # Compound words ("sneakershoes")
            if len(term) >= MIN_SUBSTRING_LENGTH:
                patterns.append(Pattern(escaped, PatternKind.SUBSTRING))

            if restrictive or len(term) < MIN_FUZZY_LENGTH:
                continue

            # Missing letter: "shos" matches "shoes" through "sho.s"
            chars = [re.escape(c) for c in term]
            for i in range(len(chars)):
                omitted = "".join(chars[:i]) + "." + "".join(chars[i + 1:])
                if len(omitted) >= MIN_FUZZY_PATTERN_LENGTH:
                    patterns.append(Pattern(omitted, PatternKind.OMISSION))

            # Extra letters: "shoeees" matches "shoes"
            collapsed = re.escape(collapse_repeats(term))
            if collapsed != escaped and len(collapsed) >= MIN_FUZZY_PATTERN_LENGTH:
                patterns.append(Pattern(collapsed, PatternKind.COLLAPSED))

        return patterns

    def build_filter(self, terms: ProcessedSearchTerms) -> Optional[Predicate]:
        """
        Assemble the catalog predicate.

        Returns:
            Predicate, or None when neither side is active (no filtering)
        """
        query_condition: Optional[Predicate] = None
        category_condition: Optional[Predicate] = None

        if terms.query_active:
            query_condition = self._field_condition(
                QUERY_FIELDS,
                self.build_patterns(terms.translated_queries, restrictive=True),
            )

        if terms.category_active:
            category_condition = self._field_condition(
                CATEGORY_FIELDS,
                self.build_patterns(terms.translated_categories, restrictive=False),
            )

        logger.debug(
            "search_filter_built",
            query_active=query_condition is not None,
            category_active=category_condition is not None,
        )

        if query_condition and category_condition:
            return And((query_condition, category_condition))
        return query_condition or category_condition

    def _field_condition(self, fields: Tuple[str, ...], patterns: List[Pattern]) -> Optional[Predicate]:
        if not patterns:
            return None
        return Or(tuple(FieldMatch(field, pattern) for field in fields for pattern in patterns))


def to_mongo_filter(predicate: Optional[Predicate]) -> Dict[str, Any]:
    """Render a predicate tree as a Mongo-style filter document."""
    if predicate is None:
        return {}
    if isinstance(predicate, FieldMatch):
        return {predicate.field: {"$regex": predicate.pattern.regex, "$options": predicate.pattern.options}}
    if isinstance(predicate, Or):
        return {"$or": [to_mongo_filter(p) for p in predicate.predicates]}
    if isinstance(predicate, And):
        return {"$and": [to_mongo_filter(p) for p in predicate.predicates]}
    raise TypeError(f"Unsupported predicate type: {type(predicate).__name__}")


_query_filter_builder: Optional[QueryFilterBuilder] = None


def get_query_filter_builder() -> QueryFilterBuilder:
    """Get global query filter builder instance."""
    global _query_filter_builder

    if _query_filter_builder is None:
        _query_filter_builder = QueryFilterBuilder()

    return _query_filter_builder
