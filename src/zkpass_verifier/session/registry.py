"""SessionRegistry — session-id keyed table of verification sessions.

Hosts that serve several requesters at once keep one
:class:`~zkpass_verifier.session.session.VerificationSession` per
requester here instead of sharing process-wide state. The interface
(store / lookup / get / remove / list_all / list_active / clear) is small
so a persistent backend can be substituted without changing call sites.
"""
from __future__ import annotations

import threading
from typing import Optional

from zkpass_verifier.session.session import VerificationSession


class SessionNotFoundError(KeyError):
    """Raised when a session_id is not present in the registry."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id!r} is not registered.")
        self.session_id = session_id


class SessionRegistry:
    """In-memory, thread-safe store of sessions keyed by ``session_id``.

    Storing a session whose id is already present replaces the previous
    entry.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, VerificationSession] = {}
        self._lock = threading.Lock()

    def store(self, session: VerificationSession) -> None:
        """Add *session*, keyed by its ``session_id``."""
        with self._lock:
            self._sessions[session.session_id] = session

    def lookup(self, session_id: str) -> Optional[VerificationSession]:
        """Return the session for *session_id*, or ``None``."""
        with self._lock:
            return self._sessions.get(session_id)

    def get(self, session_id: str) -> VerificationSession:
        """Return the session for *session_id*.

        Raises
        ------
        SessionNotFoundError
            If no such session is registered.
        """
        session = self.lookup(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        """Remove and reset the session; ``False`` if it was not registered."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.reset()
        return True

    def list_all(self) -> list[VerificationSession]:
        """Snapshot of all sessions in insertion order."""
        with self._lock:
            return list(self._sessions.values())

    def list_active(self) -> list[VerificationSession]:
        """Sessions currently between Idle and a terminal state."""
        return [session for session in self.list_all() if session.is_active]

    def clear(self) -> None:
        """Reset and drop every session."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
