"""
Enumerated Entity
=================

Fuzzy matching of text tokens against a closed set of options. Tokens and
option examples are compared by Levenshtein distance between their stems.
"""

import logging
import re
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence, Union

import Levenshtein

from ..error_handling import EntityError
from ..nlp.stemmer import PorterStemmer, Stemmer
from ..nlp.tokenizer import WORD_CHARACTER, WordTokenizer
from .entity import Entity, EntityMatch

logger = logging.getLogger(__name__)

EnumOptions = Union[Sequence[str], Mapping[str, Union[str, Sequence[str]]]]


class EnumEntity(Entity):
    """
    Extracts entities from a list of known options.

    Options are either a list of strings, each being its own example, or a
    mapping of option name to its textual variants.
    """

    def __init__(self, label: str, options: EnumOptions, min_threshold: float = 0.75,
                 tokenizer: Optional[WordTokenizer] = None, stemmer: Optional[Stemmer] = None):
        super().__init__(label)
        if isinstance(options, Mapping):
            self.options: Dict[str, List[str]] = {
                option: [examples] if isinstance(examples, str) else list(examples)
                for option, examples in options.items()
            }
        else:
            self.options = {option: [option] for option in options}

        if not self.options or not all(self.options.values()):
            raise EntityError(f"Entity \"{label}\" requires at least one option.", label=label)

        self.min_threshold = min_threshold
        self.tokenizer = tokenizer or WordTokenizer()
        self.stemmer = stemmer or PorterStemmer()

    def search(self, text: str) -> List[EntityMatch]:
        # Found tokens are blanked out so repeated tokens resolve to later positions.
        working_copy = text
        matches = []
        for token in self.tokenizer.tokenize(text):
            best = self.match(token)
            if best is None or best.score < self.min_threshold:
                continue
            start = self._locate(working_copy, token)
            working_copy = working_copy[:start] + " " * len(token) + working_copy[start + len(token):]
            matches.append(replace(best, start=start))
        return matches

    @staticmethod
    def _locate(text: str, token: str) -> int:
        # Whole words only, so "Paris" is not found inside "Parisian".
        pattern = rf"(?<!{WORD_CHARACTER}){re.escape(token)}(?!{WORD_CHARACTER})"
        match = re.search(pattern, text)
        return match.start() if match else text.find(token)

    def distance(self, major: str, minor: str) -> int:
        """Levenshtein distance between the stems of two strings."""
        return Levenshtein.distance(self.stemmer.stem(major), self.stemmer.stem(minor))

    def similarity(self, major: str, minor: str) -> float:
        """
        Similarity between two strings relative to the length of major.

        Args:
            major: String to compare against
            minor: Secondary string

        Returns:
            Score in [0, 1]
        """
        if not major:
            return 0.0
        score = round((len(major) - self.distance(major, minor)) / len(major), 2)
        return max(0.0, score)

    def match(self, token: str) -> Optional[EntityMatch]:
        """Return the best scoring option for token, if any."""
        best = None
        for option, examples in self.options.items():
            for example in examples:
                score = self.similarity(token, example)
                if best is None or score > best.score:
                    best = EntityMatch(label=self.label, option=option, source=token, score=score)
        return best
