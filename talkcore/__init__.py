"""
Talkcore
========

Rule-driven chatbot toolkit: entity extraction, multi-language intent
classification and resumable multi-turn conversations.
"""

from .chatbot import Bot, BotContext, BotDocument, BotRequest, BotResponse, Routine
from .ner import EntityManager, EnumEntity, RegexpEntity
from .nlp import Classifier, ClassifierDocument, ClassifierMatch
from .error_handling import (
    TalkcoreError, ConfigurationError, EntityError, ClassifierError, BotError, RoutineError,
)

__version__ = "0.2.0"

__all__ = [
    "Bot", "BotContext", "BotDocument", "BotRequest", "BotResponse", "Routine",
    "EntityManager", "EnumEntity", "RegexpEntity",
    "Classifier", "ClassifierDocument", "ClassifierMatch",
    "TalkcoreError", "ConfigurationError", "EntityError", "ClassifierError", "BotError", "RoutineError",
]
