"""SessionAuditLogger — JSONL audit trail for verification sessions.

Each session milestone (start, request creation, state change, ignored
event, finish) is appended as a single JSON line to the configured file,
giving an append-only record of who was asked to prove what and how the
attempt ended. Disclosed attribute values are never written; only the
verdict flags are.

If no file path is configured the logger keeps lines in an in-memory
buffer that can be drained via :meth:`SessionAuditLogger.drain_buffer`.
"""
from __future__ import annotations

import datetime
import json
import threading
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SessionAuditEvent:
    """A single auditable session event.

    Parameters
    ----------
    event_type:
        Short snake_case string (e.g. ``"state_changed"``).
    session_id:
        The session the event belongs to.
    details:
        Arbitrary key-value metadata about the event.
    timestamp:
        UTC datetime of the event. Defaults to now.
    """

    event_type: str
    session_id: str
    details: dict[str, object] = field(default_factory=dict)
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary suitable for JSON encoding."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type,
            "session_id": self.session_id,
            "details": self.details,
        }


class SessionAuditLogger:
    """Append-only JSONL audit logger for verification sessions.

    Thread-safe. Each call to :meth:`log` appends one JSON line to the
    configured file path (or to the in-memory buffer if no path is set).

    Parameters
    ----------
    log_path:
        Path to the JSONL log file. Parent directories are created
        automatically. If None, events are buffered in memory only.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path
        self._buffer: list[str] = []
        self._lock = threading.Lock()

        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: SessionAuditEvent) -> None:
        """Append *event* to the log."""
        line = json.dumps(event.to_dict(), separators=(",", ":"), default=str)
        with self._lock:
            if self._log_path is not None:
                with self._log_path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            else:
                self._buffer.append(line)

    def log_event(self, event_type: str, session_id: str, **details: object) -> None:
        """Log a simple event without constructing :class:`SessionAuditEvent`."""
        self.log(SessionAuditEvent(event_type=event_type, session_id=session_id, details=dict(details)))

    # ------------------------------------------------------------------
    # Convenience event loggers
    # ------------------------------------------------------------------

    def log_transition(self, session_id: str, old_state: str, new_state: str) -> None:
        """Log a state_changed event."""
        self.log_event("state_changed", session_id, old_state=old_state, new_state=new_state)

    def log_outcome(
        self,
        session_id: str,
        kind: str,
        state: str,
        success: bool,
        partial: bool,
    ) -> None:
        """Log a session_finished event with the verdict flags only."""
        self.log_event(
            "session_finished",
            session_id,
            kind=kind,
            state=state,
            success=success,
            partial=partial,
        )

    # ------------------------------------------------------------------
    # Buffer access
    # ------------------------------------------------------------------

    def drain_buffer(self) -> list[str]:
        """Return and clear the in-memory buffer (oldest first)."""
        with self._lock:
            events = list(self._buffer)
            self._buffer.clear()
        return events

    def read_events(self, session_id: str | None = None) -> list[dict[str, object]]:
        """Read parsed events from the log file or buffer.

        Parameters
        ----------
        session_id:
            If given, only events for that session are returned.
        """
        with self._lock:
            if self._log_path is None or not self._log_path.exists():
                lines = list(self._buffer)
            else:
                lines = self._log_path.read_text(encoding="utf-8").splitlines()

        parsed: list[dict[str, object]] = []
        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            try:
                entry: dict[str, object] = json.loads(stripped)
            except json.JSONDecodeError:
                continue
            if session_id is None or entry.get("session_id") == session_id:
                parsed.append(entry)
        return parsed
