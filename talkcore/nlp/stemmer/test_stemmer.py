"""
Unit Tests for Stemmers
=======================
"""

import pytest

from talkcore.error_handling import ConfigurationError
from talkcore.nlp.stemmer import (
    MultiStemmer,
    PorterStemmer,
    SnowballStemmer,
    UkrainianStemmer,
    create_stemmer,
)


class TestPorterStemmer:
    """Test the English stemmer."""

    @pytest.fixture
    def stemmer(self):
        return PorterStemmer()

    def test_stem(self, stemmer):
        assert stemmer.stem("running") == "run"
        assert stemmer.stem("London") == "london"
        assert stemmer.stem("  cities ") == "citi"

    def test_tokenize_and_stem_keeps_stops(self, stemmer):
        stemmer.add_stop_words(["is", "the"])
        assert stemmer.tokenize_and_stem("The city is running", keep_stops=True) == ["the", "citi", "is", "run"]
        assert stemmer.tokenize_and_stem("The city is running") == ["citi", "run"]

    def test_stop_word_editing(self, stemmer):
        stemmer.add_stop_word("You")
        assert "you" in stemmer.stopwords
        stemmer.remove_stop_word("YOU")
        assert "you" not in stemmer.stopwords


class TestSnowballStemmer:
    """Test Snowball stemmer selection."""

    def test_known_language(self):
        stemmer = SnowballStemmer("english")
        assert stemmer.stem("running") == "run"

    def test_unknown_language(self):
        with pytest.raises(ConfigurationError):
            SnowballStemmer("klingon")


class TestUkrainianStemmer:
    """Test the rule-based Ukrainian stemmer."""

    @pytest.fixture
    def stemmer(self):
        return UkrainianStemmer()

    def test_short_word(self, stemmer):
        assert stemmer.stem("рим") == "рим"

    def test_word_without_vowels(self, stemmer):
        assert stemmer.stem("ткк") == "ткк"

    def test_noun_forms_share_stem(self, stemmer):
        assert stemmer.stem("книга") == "книг"
        assert stemmer.stem("книги") == "книг"
        assert stemmer.stem("Вінниця") == "вінниц"

    def test_default_stop_words(self, stemmer):
        assert stemmer.tokenize_and_stem("Ти книга") == ["книг"]
        assert stemmer.tokenize_and_stem("Ти книга", keep_stops=True) == ["ти", "книг"]


class TestMultiStemmer:
    """Test language-dispatching stemmer."""

    @pytest.fixture
    def stemmer(self):
        return MultiStemmer(["en", "uk"])

    def test_languages(self, stemmer):
        assert stemmer.languages == ["en", "uk"]
        assert isinstance(stemmer.get_stemmer("uk"), UkrainianStemmer)
        assert stemmer.get_stemmer("de") is None

    def test_delegates_by_language(self, stemmer):
        assert stemmer.stem("running") == "run"
        assert stemmer.stem("книга") == "книг"
        assert stemmer.tokenize_and_stem("книги", keep_stops=True) == ["книг"]

    def test_undetected_language_uses_first(self, stemmer):
        assert stemmer.detect_language("12345") == "en"

    def test_unsupported_languages_are_skipped(self):
        stemmer = MultiStemmer(["xx", "uk"])
        assert stemmer.languages == ["uk"]

    def test_set_stemmer(self, stemmer):
        porter = PorterStemmer()
        stemmer.set_stemmer("uk", porter)
        assert stemmer.get_stemmer("uk") is porter

    def test_stop_word_editing_not_supported(self, stemmer):
        with pytest.raises(NotImplementedError):
            stemmer.add_stop_words(["a"])
        with pytest.raises(NotImplementedError):
            stemmer.remove_stop_word("a")


class TestCreateStemmer:
    """Test stemmer construction by name."""

    def test_names(self):
        assert isinstance(create_stemmer("porter"), PorterStemmer)
        assert isinstance(create_stemmer("uk"), UkrainianStemmer)
        assert isinstance(create_stemmer("multi", ["en", "uk"]), MultiStemmer)
        assert isinstance(create_stemmer("german"), SnowballStemmer)

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError):
            create_stemmer("unknown")
