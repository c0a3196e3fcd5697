"""
Stemmer Base
============

Common stemmer contract used by entity extractors and the classifier.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from ..tokenizer import WordTokenizer


class Stemmer(ABC):
    """Reduces tokens to their lexical root."""

    def __init__(self, stopwords: Optional[Iterable[str]] = None):
        self.stopwords: Set[str] = {word.lower() for word in (stopwords or [])}
        self.tokenizer = WordTokenizer()

    @abstractmethod
    def stem(self, token: str) -> str:
        """Stem a single token, returning its lexical root."""

    def tokenize_and_stem(self, text: str, keep_stops: bool = False) -> List[str]:
        """
        Split text into tokens and stem them.

        Args:
            text: Text to tokenize and stem
            keep_stops: Keep stop words instead of dropping them

        Returns:
            List of stemmed tokens
        """
        tokens = self.tokenizer.tokenize(text)
        if not keep_stops:
            tokens = [token for token in tokens if token.lower() not in self.stopwords]
        return [self.stem(token) for token in tokens]

    def add_stop_words(self, words: Iterable[str]):
        """Add multiple words to the ignore list."""
        self.stopwords.update(word.lower() for word in words)

    def remove_stop_words(self, words: Iterable[str]):
        """Remove multiple words from the ignore list."""
        self.stopwords.difference_update(word.lower() for word in words)

    def add_stop_word(self, word: str):
        """Add a single word to the ignore list."""
        self.add_stop_words([word])

    def remove_stop_word(self, word: str):
        """Remove a single word from the ignore list."""
        self.remove_stop_words([word])
