"""
Language Detection
==================

Best-guess language detection restricted to a set of candidate languages.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from lingua import IsoCode639_1, Language, LanguageDetectorBuilder

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("en", "ru", "uk")
UNKNOWN_LANGUAGE = "un"


@dataclass
class DetectedLanguage:
    """Language detection result."""
    language: str
    classifications: List[Tuple[str, float]] = field(default_factory=list)


def resolve_language(code: str) -> Language:
    """
    Resolve an ISO 639-1 code into a detector language.

    Args:
        code: Two-letter language code, e.g. "en"

    Returns:
        Matching lingua language
    """
    if not code or "/" in code:
        raise ConfigurationError(f"Invalid language code \"{code}\".", code=code)
    try:
        iso_code = getattr(IsoCode639_1, code.upper())
        return Language.from_iso_code_639_1(iso_code)
    except (AttributeError, ValueError) as e:
        raise ConfigurationError(
            f"Unsupported language code \"{code}\".", original_error=e, code=code
        )


class LanguageDetector:
    """Detects the language of a text among candidate languages."""

    def __init__(self, languages: Optional[Sequence[str]] = None):
        self.languages: List[str] = list(languages or DEFAULT_LANGUAGES)
        if not self.languages:
            raise ConfigurationError("At least one language is required.")

        self._codes: Dict[Language, str] = {
            resolve_language(code): code for code in self.languages
        }
        self._detector = None
        if len(self._codes) > 1:
            self._detector = LanguageDetectorBuilder.from_languages(*self._codes).build()

    def detect(self, text: str) -> str:
        """
        Detect the language of text.

        Args:
            text: Text to analyze

        Returns:
            Language code, or "un" when the language cannot be determined
        """
        return self.process(text).language

    def process(self, text: str) -> DetectedLanguage:
        """Detect the language of text, keeping per-language confidence values."""
        if self._detector is None:
            return DetectedLanguage(self.languages[0], [(self.languages[0], 1.0)])

        detected = self._detector.detect_language_of(text)
        classifications = [
            (self._codes[value.language], float(value.value))
            for value in self._detector.compute_language_confidence_values(text)
            if value.language in self._codes
        ]
        classifications.sort(key=lambda item: item[1], reverse=True)

        if detected is None:
            logger.debug(f"Could not detect language of {text!r}")
            return DetectedLanguage(UNKNOWN_LANGUAGE, classifications)
        return DetectedLanguage(self._codes[detected], classifications)
