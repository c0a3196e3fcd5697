"""
Corpus Loader
=============

Builds entities and documents from declarative YAML corpus files.

Example:
    entities:
      - label: city
        options: [London, Paris]
      - label: number
        pattern: "\\d+"
        flags: [IGNORECASE]
    documents:
      - intent: chatter/hello
        language: en
        examples: [hello, hi]
        answers: [Hello!]
    fallback: Sorry, I don't understand you.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .chatbot import Bot, BotDocument
from .error_handling import ConfigurationError
from .ner import EnumEntity, EntityExtractor, RegexpEntity
from .nlp.stemmer import Stemmer

logger = logging.getLogger(__name__)


@dataclass
class Corpus:
    """Parsed corpus file."""
    entities: List[EntityExtractor] = field(default_factory=list)
    documents: List[BotDocument] = field(default_factory=list)
    fallback: Optional[str] = None


def _parse_flags(names: Any, label: str) -> int:
    if not isinstance(names, list):
        raise ConfigurationError(f"Flags of entity \"{label}\" must be a list", label=label)
    flags = 0
    for name in names:
        flag = getattr(re.RegexFlag, str(name).upper(), None)
        if not isinstance(flag, re.RegexFlag):
            raise ConfigurationError(f"Unknown regular expression flag \"{name}\"", label=label)
        flags |= flag
    return flags


def parse_entity(data: Dict[str, Any], stemmer: Optional[Stemmer] = None,
                 min_threshold: float = 0.75) -> EntityExtractor:
    """
    Build an entity extractor from its corpus definition.

    Exactly one of "options" (enumeration) or "pattern" (regular expression)
    must be given.
    """
    if not isinstance(data, dict) or not data.get("label"):
        raise ConfigurationError(f"Entity definition must be a mapping with a label: {data!r}")
    label = data["label"]

    if ("options" in data) == ("pattern" in data):
        raise ConfigurationError(
            f"Entity \"{label}\" requires exactly one of \"options\" or \"pattern\"", label=label
        )

    if "pattern" in data:
        flags = _parse_flags(data.get("flags", []), label)
        return RegexpEntity(label, str(data["pattern"]), flags=flags)

    options = data["options"]
    if not isinstance(options, (list, dict)):
        raise ConfigurationError(f"Options of entity \"{label}\" must be a list or a mapping", label=label)
    return EnumEntity(
        label,
        options,
        min_threshold=data.get("min_threshold", min_threshold),
        stemmer=stemmer,
    )


def parse_document(data: Dict[str, Any]) -> BotDocument:
    """Build a bot document from its corpus definition."""
    if not isinstance(data, dict) or not data.get("intent"):
        raise ConfigurationError(f"Document definition must be a mapping with an intent: {data!r}")

    examples = data.get("examples") or []
    answers = data.get("answers")
    if not isinstance(examples, list) or (answers is not None and not isinstance(answers, list)):
        raise ConfigurationError(
            f"Examples and answers of \"{data['intent']}\" must be lists", intent=data["intent"]
        )
    if "handler" in data:
        raise ConfigurationError(
            f"Handlers cannot be declared in corpus files (\"{data['intent']}\")", intent=data["intent"]
        )

    return BotDocument(
        intent=str(data["intent"]),
        examples=[str(example) for example in examples],
        language=data.get("language"),
        answers=[str(answer) for answer in answers] if answers else None,
    )


def parse_corpus(data: Any, stemmer: Optional[Stemmer] = None,
                 entity_threshold: float = 0.75) -> Corpus:
    """Build a corpus from parsed YAML data."""
    if not isinstance(data, dict):
        raise ConfigurationError("Corpus root must be a mapping")

    entities = data.get("entities") or []
    documents = data.get("documents") or []
    if not isinstance(entities, list) or not isinstance(documents, list):
        raise ConfigurationError("Corpus entities and documents must be lists")

    return Corpus(
        entities=[parse_entity(entity, stemmer, entity_threshold) for entity in entities],
        documents=[parse_document(document) for document in documents],
        fallback=data.get("fallback"),
    )


def read_corpus(path: Union[str, Path], stemmer: Optional[Stemmer] = None,
                entity_threshold: float = 0.75) -> Corpus:
    """Read a corpus file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Corpus file not found: {path}", original_error=e)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed corpus file: {path}", original_error=e)
    return parse_corpus(data, stemmer, entity_threshold)


def load_corpus(path: Union[str, Path], bot: Bot, entity_threshold: float = 0.75) -> Corpus:
    """
    Read a corpus file and register its entities and documents on a bot.

    Args:
        path: YAML corpus file
        bot: Bot to populate
        entity_threshold: Default similarity threshold of enumerated entities

    Returns:
        The loaded corpus
    """
    corpus = read_corpus(path, bot.stemmer, entity_threshold)
    for entity in corpus.entities:
        bot.add_entity(entity)
    for document in corpus.documents:
        bot.add_document(document)

    logger.info(
        f"Loaded corpus {path}: {len(corpus.entities)} entities, {len(corpus.documents)} documents"
    )
    return corpus
