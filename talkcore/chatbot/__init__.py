"""
Chatbot Module
==============

Dialogue engine, conversation routines and session state.
"""

from .routine import Routine, RoutineContext, RoutineState
from .session import KeyedLock, Session, SessionRegistry, SessionStatus
from .bot import (
    Bot,
    BotContext,
    BotDocument,
    BotHandler,
    BotMiddleware,
    BotRequest,
    BotResponse,
    select_intent,
)

__all__ = [
    "Routine",
    "RoutineContext",
    "RoutineState",
    "KeyedLock",
    "Session",
    "SessionRegistry",
    "SessionStatus",
    "Bot",
    "BotContext",
    "BotDocument",
    "BotHandler",
    "BotMiddleware",
    "BotRequest",
    "BotResponse",
    "select_intent",
]
