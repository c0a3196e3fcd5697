"""
Session Registry
================

Per-user conversation state: the store shared by handler turns and the
routine of the conversation in progress, plus per-user locks serializing
request processing.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional

from .routine import Routine

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(Enum):
    """Conversation status of a session."""
    IDLE = "idle"
    ACTIVE = "active"


@dataclass
class Session:
    """Conversation state of a single user."""
    user_id: str
    store: Dict[str, Any] = field(default_factory=dict)
    routine: Optional[Routine] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def status(self) -> SessionStatus:
        if self.routine is not None and not self.routine.is_done():
            return SessionStatus.ACTIVE
        return SessionStatus.IDLE

    def touch(self):
        self.updated_at = _now()

    def discard_routine(self):
        """Forget the conversation in progress, cancelling it if suspended."""
        if self.routine is not None:
            self.routine.close()
            self.routine = None
        self.touch()


class SessionRegistry:
    """
    Session storage keyed by user id.

    Sessions are created on the first handler turn of a user and are never
    dropped automatically. Call cleanup_idle to evict stale ones.
    """

    def __init__(self):
        self.sessions: Dict[str, Session] = {}

    def get_or_create(self, user_id: str) -> Session:
        """Get existing session or create new one."""
        session = self.sessions.get(user_id)
        if session is None:
            session = self.sessions[user_id] = Session(user_id=user_id)
            logger.debug(f"Created session for user {user_id}")
        return session

    def get(self, user_id: str) -> Optional[Session]:
        return self.sessions.get(user_id)

    def end(self, user_id: str) -> bool:
        """
        End the conversation of a user.

        The store survives; only the routine is cancelled and discarded.

        Returns:
            True if the user had a session
        """
        session = self.sessions.get(user_id)
        if session is None:
            return False
        session.discard_routine()
        return True

    def stats(self) -> Dict[str, int]:
        """Get statistics about sessions."""
        total_sessions = len(self.sessions)
        active_sessions = sum(
            1 for session in self.sessions.values() if session.status is SessionStatus.ACTIVE
        )
        return {
            "total_sessions": total_sessions,
            "active_sessions": active_sessions,
            "idle_sessions": total_sessions - active_sessions,
        }

    def cleanup_idle(self, max_age_hours: float = 24) -> int:
        """
        Drop sessions without an active conversation untouched for max_age_hours.

        Returns:
            Number of dropped sessions
        """
        cutoff_time = _now() - timedelta(hours=max_age_hours)
        stale: List[str] = [
            user_id for user_id, session in self.sessions.items()
            if session.status is SessionStatus.IDLE and session.updated_at < cutoff_time
        ]
        for user_id in stale:
            del self.sessions[user_id]

        if stale:
            logger.info(f"Dropped {len(stale)} idle sessions")
        return len(stale)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self.sessions

    def __len__(self):
        return len(self.sessions)


class KeyedLock:
    """asyncio locks created on demand per key and dropped once unused."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self):
        return len(self._locks)
