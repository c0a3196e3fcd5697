"""
Intent Classifier
=================

Natural language understanding on top of a statistical text classifier.

The statistical classifier only understands flat labels, so every document is
registered under a synthesized "<language>/<intent>" label which is parsed
back into intent and language when scores come out. Long inputs are split into
sentences, classified one by one and merged into a single normalized ranking.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.linear_model import LogisticRegression

from ..error_handling import ClassifierError, ConfigurationError, ErrorCategory
from .language import UNKNOWN_LANGUAGE, LanguageDetector
from .stemmer import PorterStemmer, Stemmer

logger = logging.getLogger(__name__)

SENTENCE_BOUNDARY = re.compile(r"[!?.]")
LABEL_PATTERN = re.compile(r"(.+?)/(.+)", re.DOTALL)


@dataclass(frozen=True)
class ClassifierMatch:
    """Single classification result."""
    intent: str
    language: str
    score: float


@dataclass
class ClassifierDocument:
    """Classifier learning sample."""
    intent: str
    examples: List[str] = field(default_factory=list)
    language: Optional[str] = None


def build_label(intent: str, language: str) -> str:
    """Build an internal classifier label."""
    return f"{language}/{intent}"


def parse_label(label: str) -> Tuple[str, str]:
    """
    Parse an internal classifier label.

    Args:
        label: Label built by build_label

    Returns:
        Tuple of (intent, language)
    """
    match = LABEL_PATTERN.match(label)
    if not match:
        raise ClassifierError(f"Malformed classifier label \"{label}\".", label=label)
    language, intent = match.groups()
    return intent, language


def _passthrough(tokens: List[str]) -> List[str]:
    return tokens


class StatisticalClassifier(ABC):
    """Trainable text classifier returning raw per-label scores."""

    @property
    @abstractmethod
    def document_count(self) -> int:
        """Number of training pairs registered so far."""

    @abstractmethod
    def add_document(self, text: str, label: str) -> bool:
        """Register a training pair. Returns False if the text was rejected."""

    @abstractmethod
    def train(self):
        """Train the classifier on every registered pair."""

    @abstractmethod
    def get_scores(self, text: str) -> Dict[str, float]:
        """Return a raw score for every known label."""


class LogisticRegressionClassifier(StatisticalClassifier):
    """
    One-vs-rest logistic regression over binary bags of stemmed tokens.

    Each label gets its own binary model, so scores are independent
    probabilities and do not sum to 1 across labels.
    """

    def __init__(self, stemmer: Optional[Stemmer] = None, keep_stops: bool = True,
                 regularization: float = 50.0, max_iter: int = 1000):
        self.stemmer = stemmer or PorterStemmer()
        self.keep_stops = keep_stops
        self.regularization = regularization
        self.max_iter = max_iter
        self.documents: List[Tuple[List[str], str]] = []
        self._vectorizer: Optional[CountVectorizer] = None
        self._models: Dict[str, LogisticRegression] = {}

    @property
    def document_count(self) -> int:
        return len(self.documents)

    def add_document(self, text: str, label: str) -> bool:
        tokens = self.stemmer.tokenize_and_stem(text, self.keep_stops)
        if not tokens:
            return False
        self.documents.append((tokens, label))
        return True

    def train(self):
        if not self.documents:
            raise ClassifierError("Empty classifier could not be trained.")

        vectorizer = CountVectorizer(analyzer=_passthrough, binary=True)
        matrix = vectorizer.fit_transform([tokens for tokens, _ in self.documents]).toarray()

        # An all-zero background row gives every label at least one negative sample.
        features = np.vstack([matrix, np.zeros((1, matrix.shape[1]))])
        labels = np.array([label for _, label in self.documents] + [""], dtype=object)

        models = {}
        for label in dict.fromkeys(label for _, label in self.documents):
            targets = (labels == label).astype(int)
            model = LogisticRegression(C=self.regularization, max_iter=self.max_iter)
            model.fit(features, targets)
            models[label] = model

        self._vectorizer = vectorizer
        self._models = models

    def get_scores(self, text: str) -> Dict[str, float]:
        if self._vectorizer is None:
            raise ClassifierError(
                "Classifier is not trained.", category=ErrorCategory.RUNTIME_STATE
            )
        tokens = self.stemmer.tokenize_and_stem(text, self.keep_stops)
        features = self._vectorizer.transform([tokens]).toarray()
        return {
            label: float(model.predict_proba(features)[0][1])
            for label, model in self._models.items()
        }


class Classifier:
    """
    Natural Language Understanding (NLU).

    Wraps a statistical classifier with multi-language labeling, sentence
    splitting, score aggregation and outlier suppression. Calls into the
    statistical classifier are funneled through a single worker, since it is
    not safe under concurrent use.
    """

    def __init__(self, stemmer: Optional[Stemmer] = None,
                 classifier: Optional[StatisticalClassifier] = None,
                 keep_stops: bool = True,
                 languages: Optional[Sequence[str]] = None,
                 language_detector: Optional[LanguageDetector] = None):
        self.classifier = classifier or LogisticRegressionClassifier(
            stemmer or PorterStemmer(), keep_stops=keep_stops
        )
        self.language = language_detector or LanguageDetector(languages)
        self._ready = False
        self._queue = ThreadPoolExecutor(max_workers=1, thread_name_prefix="talkcore-classifier")

    @property
    def stemmer(self) -> Optional[Stemmer]:
        return getattr(self.classifier, "stemmer", None)

    @property
    def is_empty(self) -> bool:
        return self.classifier.document_count < 1

    @property
    def is_trained(self) -> bool:
        return self._ready

    def add_document(self, doc: ClassifierDocument):
        """
        Add a new document sample.

        Args:
            doc: Document to learn from
        """
        if not doc.examples:
            raise ClassifierError("No examples were provided.", intent=doc.intent)

        original_count = self.classifier.document_count
        for example in doc.examples:
            language = doc.language or self.language.detect(example)
            if "/" in language:
                raise ConfigurationError(
                    f"Invalid language code \"{language}\".", code=language
                )
            if language == UNKNOWN_LANGUAGE:
                logger.warning(f"Could not detect language of example {example!r} ({doc.intent})")
            self.classifier.add_document(example, build_label(doc.intent, language))

        if self.classifier.document_count == original_count:
            raise ClassifierError(
                "No new documents were added. Bad tokenizer?", intent=doc.intent
            )

    def train(self):
        """
        Train the classifier.

        Running this method may take some time.
        """
        if self.is_empty:
            raise ClassifierError("Empty classifier could not be trained.")
        self.classifier.train()
        self._ready = True
        logger.info(f"Classifier trained on {self.classifier.document_count} documents")

    async def classify(self, text: str) -> List[ClassifierMatch]:
        """
        Classify text as a single sentence.

        May be slow and inaccurate for long texts, use classify_text instead.

        Args:
            text: Sentence to classify

        Returns:
            Matching classifications, best first
        """
        if not self.is_trained:
            raise ClassifierError(
                "Classifier is not trained.", category=ErrorCategory.RUNTIME_STATE
            )

        loop = asyncio.get_running_loop()
        scores = await loop.run_in_executor(self._queue, self.classifier.get_scores, text)

        matches = []
        for label, value in scores.items():
            score = round(value, 2)
            if score <= 0:
                continue
            intent, language = parse_label(label)
            matches.append(ClassifierMatch(intent=intent, language=language, score=score))
        matches.sort(key=lambda match: match.score, reverse=True)

        if len(matches) <= 1:
            return matches

        # Anything at or below the mean is noise next to a clear winner.
        mean = sum(match.score for match in matches) / len(matches)
        return [match for match in matches if match.score > mean]

    async def classify_text(self, text: str) -> List[ClassifierMatch]:
        """
        Classify text as a collection of sentences.

        Args:
            text: Text to classify

        Returns:
            Merged classifications with scores summing to 1, best first
        """
        sentences = [sentence for sentence in SENTENCE_BOUNDARY.split(text) if sentence.strip()]
        if len(sentences) <= 1:
            return await self.classify(text)

        results = await asyncio.gather(*(self.classify(sentence) for sentence in sentences))

        merged: Dict[Tuple[str, str], float] = {}
        for sentence, sentence_matches in zip(sentences, results):
            if not sentence_matches:
                logger.debug(f"No classification for sentence {sentence.strip()!r}")
                continue
            for match in sentence_matches:
                key = (match.language, match.intent)
                merged[key] = merged.get(key, 0.0) + match.score

        total = sum(merged.values())
        if total <= 0:
            return []

        ratio = 1 / total
        classifications = [
            ClassifierMatch(intent=intent, language=language, score=round(score * ratio, 2))
            for (language, intent), score in merged.items()
        ]
        classifications.sort(key=lambda match: match.score, reverse=True)
        return classifications

    def close(self):
        """Release the classifier worker."""
        self._queue.shutdown(wait=False)
