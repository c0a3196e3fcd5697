"""
Ukrainian Stemmer
=================

Rule-based suffix stripping stemmer for the Ukrainian language.

Works on the part of the word after the first vowel: one suffix class is
removed, common consonant alternations are normalized, and soft signs and
doubled consonants at the end are dropped.
"""

import re
from typing import Iterable, Optional

from .base import Stemmer

STEMMER_RVRE = re.compile(r"^(.*?[аеиоуюяіїє])(.*)$", re.IGNORECASE)

STEMMER_ADJECTIVE = re.compile(
    r"(у|а|е|і|ій|ім|ий|им|их|ою|ої|ому|ого|ими)$", re.IGNORECASE
)

STEMMER_VERB_GENERAL = re.compile(
    r"(у|ю|е|є|ує|сь|ся|ив|ать|ять|ав|али|учи|ячи|вши|ши|ме|яти)$", re.IGNORECASE
)

STEMMER_VERB_SPECIAL = re.compile(
    r"(овувала|овував|увала|ував|увати)$", re.IGNORECASE
)

STEMMER_NOUN_GENERAL = re.compile(
    r"(я|у|а|е|і|и|о|ою|ам|ах|ів|ов|ом|им|ами|ові)$", re.IGNORECASE
)

STEMMER_NOUN_SPECIAL = re.compile(
    r"(очки|очка|очку|очок|очком|очків|очках|очкам|очками|очкові|ість|істю|осте|ості)$",
    re.IGNORECASE,
)

# Longer special forms are checked before the shorter general ones.
SUFFIX_CLASSES = (
    STEMMER_VERB_SPECIAL,
    STEMMER_NOUN_SPECIAL,
    STEMMER_ADJECTIVE,
    STEMMER_VERB_GENERAL,
    STEMMER_NOUN_GENERAL,
)

ALTERNATIONS = (
    (re.compile(r"ядер$"), "ядр"),
    (re.compile(r"ач$"), "ак"),
    (re.compile(r"іч$"), "ік"),
    (re.compile(r"че$"), "ік"),
)

DEFAULT_STOPWORDS = (
    "а", "але", "б", "би", "в", "вже", "ви", "від", "вона", "вони", "воно", "все",
    "де", "для", "до", "є", "же", "з", "за", "и", "й", "і", "із", "їх", "к", "коли",
    "ми", "на", "над", "не", "ні", "о", "об", "от", "по", "при", "про", "та", "так",
    "також", "те", "ти", "то", "тут", "у", "хто", "це", "ці", "чи", "чого", "що",
    "щоб", "як", "який", "яка", "якщо", "я",
)


class UkrainianStemmer(Stemmer):
    """
    Stemmer for Ukrainian language.

    This implementation incorporates ideas from two other stemmers:

    - https://github.com/vgrichina/ukrainian-stemmer
    - https://github.com/tochytskyi/ukrstemmer
    """

    def __init__(self, stopwords: Optional[Iterable[str]] = None):
        super().__init__(DEFAULT_STOPWORDS if stopwords is None else stopwords)

    def stem(self, token: str) -> str:
        normalized = token.strip().lower()
        match = STEMMER_RVRE.match(normalized)
        if not match:
            return normalized
        head, tail = match.groups()
        if not head or not tail:
            return normalized

        for suffix in SUFFIX_CLASSES:
            if suffix.search(tail):
                tail = suffix.sub("", tail, count=1)
                break

        for pattern, replacement in ALTERNATIONS:
            tail = pattern.sub(replacement, tail)

        tail = re.sub(r"ь$", "", tail)
        tail = re.sub(r"нн$", "", tail)
        return head + tail
