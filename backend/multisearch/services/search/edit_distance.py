"""Levenshtein distance and normalized similarity ratio (SymSpell's edit distance)."""
from symspellpy.editdistance import DistanceAlgorithm, EditDistance

_levenshtein = EditDistance(DistanceAlgorithm.LEVENSHTEIN)


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions and substitutions."""
    if a == b:
        return 0
    # Bound by the longest string so the comparison never gives up early (-1)
    return _levenshtein.compare(a, b, max(len(a), len(b)))


def similarity(a: str, b: str) -> float:
    """(max_len - distance) / max_len, 1.0 for two empty strings."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein(a, b)) / longest
