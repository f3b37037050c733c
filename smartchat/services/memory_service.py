"""
Session memory for multi-turn conversations.

Keeps a bounded, ordered message history per session id. Histories are
trimmed to the most recent ``max_history_size`` messages on every append and
whole sessions are dropped once their newest message is older than
``max_message_age``.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List

from ..models.message import MemoryStatistics, Message, Role
from ..utils import get_logger


@dataclass
class _SessionState:
    """Messages of one session, guarded by their own lock."""
    lock: threading.Lock = field(default_factory=threading.Lock)
    messages: List[Message] = field(default_factory=list)
    removed: bool = False


class SessionMemory:
    """
    Thread-safe in-memory store of conversation histories.

    Each session carries its own lock, so concurrent turns in different
    sessions never contend. An entry retired by ``clear`` or
    ``sweep_expired`` is marked removed under its lock; an ``append`` that
    raced with the removal re-resolves the session and lands in a fresh entry.
    """

    def __init__(
        self,
        max_history_size: int = 20,
        max_message_age: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize session memory.

        Args:
            max_history_size: Messages kept per session (oldest dropped first)
            max_message_age: Idle time after which a session is swept
            clock: Source of message timestamps
        """
        if max_history_size < 1:
            raise ValueError("max_history_size must be at least 1")

        self.max_history_size = max_history_size
        self.max_message_age = max_message_age
        self._clock = clock
        self._sessions: Dict[str, _SessionState] = {}
        # Guards key removal only; appends take the per-session lock
        self._index_lock = threading.Lock()
        self.logger = get_logger("memory_service")

    def _state(self, session_id: str) -> _SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            state = self._sessions.setdefault(session_id, _SessionState())
        return state

    def _discard(self, session_id: str, state: _SessionState) -> None:
        with self._index_lock:
            if self._sessions.get(session_id) is state:
                del self._sessions[session_id]

    def append(self, session_id: str, role: Role, content: str) -> Message:
        """
        Append a message and trim the session to its maximum size.

        Args:
            session_id: Conversation identifier
            role: Author of the message
            content: Message text

        Returns:
            The stored message
        """
        while True:
            state = self._state(session_id)
            with state.lock:
                if state.removed:
                    self._discard(session_id, state)
                    continue

                message = Message(role=role, content=content, created_at=self._clock())
                state.messages.append(message)

                overflow = len(state.messages) - self.max_history_size
                if overflow > 0:
                    del state.messages[:overflow]
                    self.logger.debug(
                        f"Trimmed {overflow} old message(s) from session {session_id}"
                    )
                return message

    def history(self, session_id: str) -> List[Message]:
        """Copy of the session's messages, oldest first; empty if unknown."""
        state = self._sessions.get(session_id)
        if state is None:
            return []
        with state.lock:
            return list(state.messages)

    def formatted_history(self, session_id: str) -> str:
        """
        Render the history for prompt inclusion.

        Each message becomes ``ROLE: content`` followed by a blank line;
        an empty history renders as an empty string.
        """
        return "".join(f"{message.format()}\n\n" for message in self.history(session_id))

    def recent_messages(self, session_id: str, count: int) -> List[Message]:
        """Last ``count`` messages of the session, oldest first."""
        if count <= 0:
            return []
        return self.history(session_id)[-count:]

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def clear(self, session_id: str) -> None:
        """Remove a session's history. Clearing an unknown session is a no-op."""
        with self._index_lock:
            state = self._sessions.pop(session_id, None)
        if state is None:
            return
        with state.lock:
            state.removed = True
        self.logger.info(f"Cleared conversation memory for session: {session_id}")

    def sweep_expired(self) -> int:
        """
        Remove every session whose newest message is older than max_message_age.

        Returns:
            Number of sessions removed
        """
        cutoff = self._clock() - self.max_message_age
        removed = 0

        for session_id, state in list(self._sessions.items()):
            with state.lock:
                if state.removed:
                    continue
                if state.messages and not state.messages[-1].created_at < cutoff:
                    continue
                state.removed = True

            self._discard(session_id, state)
            removed += 1

        if removed:
            self.logger.info(f"Swept {removed} expired session(s)")
        return removed

    def statistics(self) -> MemoryStatistics:
        """Snapshot of session count and total stored messages."""
        states = list(self._sessions.values())
        total = 0
        for state in states:
            with state.lock:
                total += len(state.messages)

        return MemoryStatistics(
            active_sessions=len(states),
            total_messages=total,
            max_history_size=self.max_history_size,
        )

    def __len__(self) -> int:
        return len(self._sessions)
