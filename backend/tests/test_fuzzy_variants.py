"""
Unit tests for the term dictionaries and the fuzzy variant generator.
"""
import json

import pytest

from multisearch.models.languages import SupportedLanguage
from multisearch.services.search.dictionaries import TermDictionaries
from multisearch.services.search.fuzzy_variants import (
    FuzzyVariantGenerator,
    collapse_repeats,
    phonetic_normalize,
    substitutions,
    transpositions,
)


@pytest.fixture(scope="module")
def dictionaries():
    d = TermDictionaries()
    d.initialize()
    return d


@pytest.fixture
def generator(dictionaries):
    return FuzzyVariantGenerator(dictionaries=dictionaries)


# ============================================
# Helpers
# ============================================

def test_phonetic_normalize():
    assert phonetic_normalize("phone") == "fone"
    assert phonetic_normalize("jacket") == "jaket"
    assert phonetic_normalize("sneekers") == "snekers"
    assert phonetic_normalize("shoos") == "shos"


def test_collapse_repeats():
    assert collapse_repeats("shoeees") == "shoes"
    assert collapse_repeats("dress") == "dres"
    assert collapse_repeats("bag") == "bag"


def test_transpositions_one_per_pair():
    assert transpositions("abc") == {"bac", "acb"}
    assert transpositions("a") == set()


def test_substitutions_per_language():
    assert substitutions("socks", SupportedLanguage.EN_US) == {"sokks", "soccs", "zockz"}
    assert substitutions("jakke", SupportedLanguage.NB_NO) == {"jåkke", "jakkæ"}
    assert substitutions("mæt", SupportedLanguage.NB_NO) == {"maet"}
    assert "shøes" not in substitutions("shoes", SupportedLanguage.EN_US)


# ============================================
# Dictionaries
# ============================================

def test_packaged_dictionaries_load(dictionaries):
    assert "shoes" in dictionaries.misspellings(SupportedLanguage.EN_US)
    assert "shos" in dictionaries.misspellings(SupportedLanguage.EN_US)["shoes"]
    assert "sko" in dictionaries.product_terms(SupportedLanguage.EN_US)["shoes"]
    assert "shoes" in dictionaries.common_terms(SupportedLanguage.EN_US)


def test_canonical_for(dictionaries):
    assert dictionaries.canonical_for("SHOSE", SupportedLanguage.EN_US) == "shoes"
    assert dictionaries.canonical_for("kso", SupportedLanguage.NB_NO) == "sko"
    assert dictionaries.canonical_for("shoes", SupportedLanguage.EN_US) is None


def test_dictionaries_are_read_only(dictionaries):
    with pytest.raises(TypeError):
        dictionaries.misspellings(SupportedLanguage.EN_US)["new"] = ("x",)


def test_missing_dictionary_files(tmp_path):
    d = TermDictionaries(dictionary_dir=tmp_path)

    assert d.initialize() is False
    assert dict(d.misspellings(SupportedLanguage.EN_US)) == {}
    assert d.common_terms(SupportedLanguage.AR) == ()


def test_custom_dictionary_dir(tmp_path):
    (tmp_path / "misspellings.json").write_text(json.dumps({"en-US": {"Boots": ["Bots"]}}))
    (tmp_path / "product_terms.json").write_text(json.dumps({"en-US": {"boots": ["støvler"]}, "xx": {}}))
    (tmp_path / "common_terms.json").write_text(json.dumps({"en-US": ["Boots"]}))

    d = TermDictionaries(dictionary_dir=tmp_path)

    assert d.initialize() is True
    assert dict(d.misspellings(SupportedLanguage.EN_US)) == {"boots": ("bots",)}
    assert d.common_terms(SupportedLanguage.EN_US) == ("boots",)
    assert d.product_keywords() == ["boots"]


# ============================================
# Variant generation
# ============================================

def test_short_terms_unchanged(generator):
    assert generator.variants("sh") == {"sh"}
    assert generator.variants("") == {""}


def test_always_contains_original(generator):
    assert "Watch" in generator.variants("Watch")


def test_known_misspelling_adds_canonical(generator):
    variants = generator.variants("shos")

    assert "shoes" in variants
    assert "Shoes" in variants
    assert "shos" in variants


def test_similar_term_adds_canonical(generator):
    # Not a listed misspelling, but similarity("jackt", "jacket") >= 0.7
    assert "jacket" in generator.variants("jackt", SupportedLanguage.EN_US)


def test_phonetic_variant(generator):
    assert "fone" in generator.variants("phone")


def test_arabic_alef_and_ta_marbuta_variants(generator):
    variants = generator.variants("ساعة")

    assert "ساعه" in variants
    assert {"سآعة", "سأعة", "سإعة"} <= variants


def test_norwegian_letter_variants(generator):
    variants = generator.variants("grønn")

    assert "gronn" in variants
    assert "armband" in generator.variants("armbånd")


def test_transposition_variants(generator):
    variants = generator.variants("wacth", SupportedLanguage.EN_US)

    assert "watch" in variants
    assert "awcth" in variants


def test_repeated_letters_collapsed(generator):
    assert "shoes" in generator.variants("shoeees")


def test_prefix_extension(generator):
    assert "jacket" in generator.variants("jack", SupportedLanguage.EN_US)
    assert "sneakers" in generator.variants("sneak", SupportedLanguage.EN_US)


def test_prefix_extension_limited_to_three_chars(generator):
    # "headphones" is six characters longer than "head"
    assert "headphones" not in generator.variants("head", SupportedLanguage.EN_US)


def test_norwegian_dictionary(generator):
    assert "skjorte" in generator.variants("skjirt")


def test_threshold_is_configurable(dictionaries):
    strict = FuzzyVariantGenerator(dictionaries=dictionaries, similarity_threshold=0.95)

    assert "jacket" not in strict.variants("jackt", SupportedLanguage.EN_US)
