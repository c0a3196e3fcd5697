"""
NER Module
==========

Entity extractors and the entity registry.
"""

from typing import Union

from .entity import Entity, EntityManager, EntityMatch, EntityResult, build_template
from .regexp import MatchMode, RegexpEntity
from .enumerated import EnumEntity

EntityExtractor = Union[RegexpEntity, EnumEntity]

__all__ = [
    "Entity",
    "EntityManager",
    "EntityMatch",
    "EntityResult",
    "EntityExtractor",
    "MatchMode",
    "RegexpEntity",
    "EnumEntity",
    "build_template",
]
