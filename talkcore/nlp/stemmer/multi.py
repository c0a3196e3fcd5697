"""
Multi-language Stemmer
======================

Delegates stemming to a per-language stemmer chosen by language detection.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..language import LanguageDetector
from .base import Stemmer
from .porter import PorterStemmer, SnowballStemmer
from .uk import UkrainianStemmer

logger = logging.getLogger(__name__)

MULTI_STEMMER_DEFAULTS: Dict[str, Callable[[], Stemmer]] = {
    "uk": UkrainianStemmer,
    "en": PorterStemmer,
    "de": lambda: SnowballStemmer("german"),
    "es": lambda: SnowballStemmer("spanish"),
    "fr": lambda: SnowballStemmer("french"),
    "it": lambda: SnowballStemmer("italian"),
    "nl": lambda: SnowballStemmer("dutch"),
    "pt": lambda: SnowballStemmer("portuguese"),
    "ru": lambda: SnowballStemmer("russian"),
    "sv": lambda: SnowballStemmer("swedish"),
}


class MultiStemmer(Stemmer):
    """Stemmer that detects the language of every input before stemming it."""

    def __init__(self, languages: Optional[Iterable[str]] = None):
        super().__init__()
        selected = list(languages) if languages is not None else list(MULTI_STEMMER_DEFAULTS)
        self.stemmers: Dict[str, Stemmer] = {
            language: MULTI_STEMMER_DEFAULTS[language]()
            for language in selected
            if language in MULTI_STEMMER_DEFAULTS
        }
        if not self.stemmers:
            self.stemmers["en"] = PorterStemmer()
        self.detector = LanguageDetector(self.languages)

    @property
    def languages(self) -> List[str]:
        return list(self.stemmers)

    def get_stemmer(self, language: str) -> Optional[Stemmer]:
        return self.stemmers.get(language)

    def set_stemmer(self, language: str, stemmer: Stemmer):
        self.stemmers[language] = stemmer
        self.detector = LanguageDetector(self.languages)

    def detect_language(self, text: str) -> str:
        language = self.detector.detect(text)
        if language not in self.stemmers:
            return self.languages[0]
        return language

    def detect_stemmer(self, text: str) -> Stemmer:
        return self.stemmers[self.detect_language(text)]

    def tokenize_and_stem(self, text: str, keep_stops: bool = False) -> List[str]:
        return self.detect_stemmer(text).tokenize_and_stem(text, keep_stops)

    def stem(self, token: str) -> str:
        return self.detect_stemmer(token).stem(token)

    def add_stop_words(self, words: Iterable[str]):
        raise NotImplementedError("MultiStemmer does not support direct stopword editing.")

    def remove_stop_words(self, words: Iterable[str]):
        raise NotImplementedError("MultiStemmer does not support direct stopword editing.")


def create_stemmer(name: str, languages: Optional[Iterable[str]] = None) -> Stemmer:
    """
    Create a stemmer by its configuration name.

    Args:
        name: "porter", "uk", "multi" or a Snowball language name
        languages: Candidate languages of a multi-language stemmer

    Returns:
        Stemmer instance
    """
    if name == "porter":
        return PorterStemmer()
    if name == "uk":
        return UkrainianStemmer()
    if name == "multi":
        return MultiStemmer(languages)
    return SnowballStemmer(name)
