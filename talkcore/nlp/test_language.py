"""
Unit Tests for Language Detection
=================================
"""

import pytest

from talkcore.error_handling import ConfigurationError
from talkcore.nlp.language import UNKNOWN_LANGUAGE, LanguageDetector, resolve_language


class TestLanguageDetector:
    """Test detection among the default candidate languages."""

    @pytest.fixture
    def detector(self):
        return LanguageDetector()

    def test_default_languages(self, detector):
        assert detector.languages == ["en", "ru", "uk"]

    def test_detects_existing_language(self, detector):
        assert detector.detect("hello!") == "en"
        assert detector.detect("привіт") == "uk"
        assert detector.detect("привет, как ты?") == "ru"

    def test_detects_unknown_language(self, detector):
        assert detector.detect("12345") == UNKNOWN_LANGUAGE
        assert detector.detect("") == UNKNOWN_LANGUAGE

    def test_process_returns_confidence_values(self, detector):
        result = detector.process("привіт")
        assert result.language == "uk"
        assert result.classifications
        assert result.classifications[0][0] == "uk"
        scores = [score for _, score in result.classifications]
        assert scores == sorted(scores, reverse=True)


class TestSingleLanguageDetector:
    """Test detection with a single candidate language."""

    def test_always_returns_the_language(self):
        detector = LanguageDetector(["uk"])
        assert detector.detect("hello") == "uk"
        assert detector.process("12345").classifications == [("uk", 1.0)]


class TestLanguageCodes:
    """Test language code resolution."""

    def test_valid_code(self):
        assert resolve_language("en") is not None

    @pytest.mark.parametrize("code", ["", "en/us", "xx"])
    def test_invalid_code(self, code):
        with pytest.raises(ConfigurationError):
            resolve_language(code)

    def test_invalid_detector_languages(self):
        with pytest.raises(ConfigurationError):
            LanguageDetector(["en", "xx"])
