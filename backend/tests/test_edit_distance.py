"""
Unit tests for Levenshtein distance and similarity ratio.
"""
import pytest

from multisearch.services.search.edit_distance import levenshtein, similarity


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("kitten", "sitting", 3),
        ("shos", "shoes", 1),
        ("", "abc", 3),
        ("abc", "", 3),
        ("flaw", "lawn", 2),
        ("sko", "kso", 2),
        ("jackeet", "jacket", 1),
        ("حذا", "حذاء", 1),
        ("armband", "armbånd", 1),
    ],
)
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected


@pytest.mark.parametrize("text", ["", "a", "shoes", "حذاء", "armbånd"])
def test_levenshtein_identity(text):
    assert levenshtein(text, text) == 0


def test_levenshtein_is_symmetric():
    assert levenshtein("jacket", "jaket") == levenshtein("jaket", "jacket")


def test_similarity_identical():
    assert similarity("shoes", "shoes") == 1.0


def test_similarity_both_empty():
    assert similarity("", "") == 1.0


def test_similarity_ratio():
    # One edit over five characters
    assert similarity("shos", "shoes") == pytest.approx(0.8)


def test_similarity_disjoint():
    assert similarity("abc", "xyz") == 0.0


def test_similarity_bounds():
    for a, b in [("a", "abcdef"), ("watch", "wach"), ("", "x")]:
        assert 0.0 <= similarity(a, b) <= 1.0


def test_levenshtein_never_reports_over_limit():
    # Completely different strings still get an exact distance, never -1
    assert levenshtein("a", "bcdefghijk") == 10


def test_similarity_close_canonical():
    assert similarity("shirt", "tshirt") == pytest.approx(5 / 6)
