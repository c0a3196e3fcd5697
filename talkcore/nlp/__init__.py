"""
NLP Module
==========

Tokenization, stemming, language detection and intent classification.
"""

from .tokenizer import WordTokenizer
from .stemmer import Stemmer, PorterStemmer, SnowballStemmer, UkrainianStemmer, MultiStemmer
from .language import LanguageDetector, DetectedLanguage, DEFAULT_LANGUAGES, UNKNOWN_LANGUAGE
from .classifier import (
    Classifier,
    ClassifierDocument,
    ClassifierMatch,
    StatisticalClassifier,
    LogisticRegressionClassifier,
    build_label,
    parse_label,
)

__all__ = [
    "WordTokenizer",
    "Stemmer",
    "PorterStemmer",
    "SnowballStemmer",
    "UkrainianStemmer",
    "MultiStemmer",
    "LanguageDetector",
    "DetectedLanguage",
    "DEFAULT_LANGUAGES",
    "UNKNOWN_LANGUAGE",
    "Classifier",
    "ClassifierDocument",
    "ClassifierMatch",
    "StatisticalClassifier",
    "LogisticRegressionClassifier",
    "build_label",
    "parse_label",
]
