"""
Word Tokenizer
==============

Unicode-aware word tokenizer that keeps apostrophes inside words.
"""

from typing import List

from nltk.tokenize import RegexpTokenizer

WORD_CHARACTER = r"[\w'ʼ]"
# Anything that is neither a word character nor an apostrophe separates tokens.
NON_WORD_CHARACTERS = r"[^\w'ʼ]+"


class WordTokenizer(RegexpTokenizer):
    """Splits text into word tokens, keeping contractions like "that's" whole."""

    def __init__(self):
        super().__init__(NON_WORD_CHARACTERS, gaps=True, discard_empty=True)

    def tokenize(self, text: str) -> List[str]:
        """
        Split text into a list of tokens.

        Args:
            text: Text to tokenize

        Returns:
            List of non-empty tokens in original order and case
        """
        tokens = super().tokenize(text)
        return [token for token in tokens if token.strip(" '_ʼ")]
