"""
Stemmers
========

Stemmer capability implementations.
"""

from .base import Stemmer
from .porter import PorterStemmer, SnowballStemmer
from .uk import UkrainianStemmer
from .multi import MultiStemmer, create_stemmer

__all__ = [
    "Stemmer",
    "PorterStemmer",
    "SnowballStemmer",
    "UkrainianStemmer",
    "MultiStemmer",
    "create_stemmer",
]
