"""
Named Entity Recognition
========================

Common entity extractor contract and the entity registry that merges the
results of several extractors into a single non-overlapping list.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..error_handling import EntityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityMatch:
    """Entity found in a text."""
    label: str
    option: str
    source: str
    score: float
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.source)


@dataclass
class EntityResult:
    """Template string together with the entities it was built from."""
    template: str
    entities: List[EntityMatch] = field(default_factory=list)


def build_template(text: str, matches: List[EntityMatch]) -> str:
    """
    Replace every matched span of text with its "%label%" placeholder.

    Matches must be sorted by position and must not overlap. Offsets refer to
    the original text and are shifted by the length change of every
    substitution made so far.
    """
    result = text
    for match in matches:
        position = match.start - (len(text) - len(result))
        result = result[:position] + f"%{match.label}%" + result[position + len(match.source):]
    return result


class Entity(ABC):
    """
    Generic entity extractor.

    Subclasses implement one matching strategy behind the common search
    contract.
    """

    def __init__(self, label: str):
        if not label:
            raise EntityError("Entity label must not be empty.")
        self.label = label

    @staticmethod
    def template(text: str, matches: List[EntityMatch]) -> str:
        """Convert text into a template by replacing matches with their labels."""
        return build_template(text, matches)

    @abstractmethod
    def search(self, text: str) -> List[EntityMatch]:
        """Return every match of this entity in text, ordered by position."""

    def process(self, text: str) -> EntityResult:
        """Return the template string and the matches of this entity."""
        entities = self.search(text)
        return EntityResult(template=self.template(text, entities), entities=entities)

    def __repr__(self):
        return f"{self.__class__.__name__}(label={self.label!r})"


class EntityManager:
    """Stores and processes multiple entities at once."""

    def __init__(self):
        self.extractors: Dict[str, Entity] = {}

    def add_entity(self, extractor: Entity):
        """
        Add a new entity extractor.

        Args:
            extractor: Extractor with a label not registered yet
        """
        if extractor.label in self.extractors:
            raise EntityError(
                f"Entity with label \"{extractor.label}\" already exists.",
                label=extractor.label,
            )
        self.extractors[extractor.label] = extractor
        logger.debug(f"Registered entity {extractor!r}")

    def get_entity(self, label: str) -> Optional[Entity]:
        return self.extractors.get(label)

    def remove_entity(self, label: str):
        """Remove an extractor by label. Does nothing if it does not exist."""
        self.extractors.pop(label, None)

    def search(self, text: str) -> List[EntityMatch]:
        """
        Run every extractor over text and resolve overlapping matches.

        Matches are sorted by start offset and kept greedily: a match survives
        only if it starts at or after the end of the last kept match.
        """
        candidates = [
            match
            for extractor in self.extractors.values()
            for match in extractor.search(text)
        ]
        candidates.sort(key=lambda match: match.start)

        entities = []
        last_ending = 0
        for match in candidates:
            if match.start < last_ending:
                continue
            entities.append(match)
            last_ending = match.end
        return entities

    def process(self, text: str) -> EntityResult:
        """Return the template string and the non-overlapping matches of text."""
        entities = self.search(text)
        return EntityResult(template=build_template(text, entities), entities=entities)

    def __len__(self):
        return len(self.extractors)
