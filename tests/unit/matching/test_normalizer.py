"""Unit tests for company name normalization."""

import pytest

from warmpath.services.matching.normalizer import normalize_company_name, significant_tokens


class TestNormalizeCompanyName:
    """Suffix stripping, punctuation and whitespace handling."""

    @pytest.mark.parametrize(
        "raw",
        ["Acme Capital, Inc.", "ACME CAPITAL", "Acme Capital LLC", "  acme   capital  "],
    )
    def test_equivalent_spellings_share_a_key(self, raw):
        assert normalize_company_name(raw) == "acme capital"

    def test_descriptor_words_survive_when_part_of_the_name(self):
        assert normalize_company_name("Sequoia Capital Management LLC") == "sequoia capital management"
        assert normalize_company_name("Goldman Sachs Group, Inc.") == "goldman sachs group"

    def test_stacked_legal_forms_are_all_removed(self):
        assert normalize_company_name("Foo Co., Inc.") == "foo"
        assert normalize_company_name("Bar Holdings Ltd. LLC") == "bar holdings"

    def test_suffix_inside_a_word_is_kept(self):
        assert normalize_company_name("Costco") == "costco"
        assert normalize_company_name("Blinc") == "blinc"

    @pytest.mark.parametrize("raw", ["LLC", "Inc.", "Capital Management LLC", "Group, Ltd"])
    def test_suffix_only_names_normalize_to_empty(self, raw):
        assert normalize_company_name(raw) == ""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_input(self, raw):
        assert normalize_company_name(raw) == ""

    def test_inner_punctuation_becomes_space(self):
        assert normalize_company_name("Andreessen-Horowitz & Co.") == "andreessen horowitz"

    @pytest.mark.parametrize(
        "raw",
        [
            "Acme Capital, Inc.",
            "Foo Co., Inc.",
            "foo_co",
            "Sequoia Capital Management LLC",
            "AT&T Inc.",
            "LLC",
            "Kleiner Perkins Caufield & Byers, LLC",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize_company_name(raw)
        assert normalize_company_name(once) == once


class TestSignificantTokens:

    def test_short_tokens_are_dropped(self):
        assert significant_tokens("a16z of ny") == frozenset({"a16z"})

    def test_empty_name(self):
        assert significant_tokens("") == frozenset()
