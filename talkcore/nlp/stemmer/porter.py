"""
NLTK Stemmers
=============

Porter and Snowball stemmers backed by NLTK.
"""

from typing import Iterable, Optional

from nltk.stem import PorterStemmer as NltkPorterStemmer
from nltk.stem import SnowballStemmer as NltkSnowballStemmer

from ...error_handling import ConfigurationError
from .base import Stemmer


class PorterStemmer(Stemmer):
    """English Porter stemmer."""

    def __init__(self, stopwords: Optional[Iterable[str]] = None):
        super().__init__(stopwords)
        self._stemmer = NltkPorterStemmer()

    def stem(self, token: str) -> str:
        return self._stemmer.stem(token.strip().lower())


class SnowballStemmer(Stemmer):
    """Snowball stemmer for any language NLTK ships a Snowball algorithm for."""

    def __init__(self, language: str, stopwords: Optional[Iterable[str]] = None):
        if language not in NltkSnowballStemmer.languages:
            raise ConfigurationError(
                f"Snowball stemmer does not support language \"{language}\".",
                language=language,
            )
        super().__init__(stopwords)
        self.language = language
        self._stemmer = NltkSnowballStemmer(language)

    def stem(self, token: str) -> str:
        return self._stemmer.stem(token.strip().lower())
