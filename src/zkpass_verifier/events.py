"""Lifecycle events pushed by the proof capability while a request is live.

The capability reports progress on the holder's device as a stream of
:class:`LifecycleEvent` objects, always in this order::

    request_received -> generating_proof -> proof_generated -> result

``result``, ``reject`` and ``error`` are terminal and mutually exclusive;
either of the last two may arrive at any point.

:class:`ProofEventStream` is the push-to-pull bridge: a capability (or a
test) calls :meth:`ProofEventStream.emit` from callbacks, and the session
consumes the same events with ``async for``.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Mapping, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Kinds of lifecycle event the capability can push."""

    REQUEST_RECEIVED = "request_received"
    GENERATING_PROOF = "generating_proof"
    PROOF_GENERATED = "proof_generated"
    RESULT = "result"
    REJECT = "reject"
    ERROR = "error"


TERMINAL_EVENTS: frozenset[EventType] = frozenset(
    {EventType.RESULT, EventType.REJECT, EventType.ERROR}
)


@dataclass(frozen=True)
class LifecycleEvent:
    """A single event from the proof pipeline.

    Parameters
    ----------
    event_type:
        Which lifecycle step this event reports.
    name:
        Informational proof name carried by ``proof_generated``.
    verified:
        Proof validity flag carried by ``result``.
    result:
        Raw result payload carried by ``result``. Never mutated.
    detail:
        Error detail carried by ``error``.
    """

    event_type: EventType
    name: Optional[str] = None
    verified: bool = False
    result: Mapping[str, Any] = field(default_factory=dict)
    detail: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.event_type in TERMINAL_EVENTS

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def request_received(cls) -> "LifecycleEvent":
        return cls(EventType.REQUEST_RECEIVED)

    @classmethod
    def generating_proof(cls) -> "LifecycleEvent":
        return cls(EventType.GENERATING_PROOF)

    @classmethod
    def proof_generated(cls, name: Optional[str] = None) -> "LifecycleEvent":
        return cls(EventType.PROOF_GENERATED, name=name)

    @classmethod
    def verification_result(
        cls, verified: bool, result: Optional[Mapping[str, Any]] = None
    ) -> "LifecycleEvent":
        return cls(EventType.RESULT, verified=verified, result=dict(result or {}))

    @classmethod
    def reject(cls) -> "LifecycleEvent":
        return cls(EventType.REJECT)

    @classmethod
    def error(cls, detail: Optional[str] = None) -> "LifecycleEvent":
        return cls(EventType.ERROR, detail=detail)


class ProofEventStream:
    """Queue-backed event stream shared by a capability and a session.

    Iteration ends after the first terminal event or after :meth:`close`.
    Events emitted after that point are dropped.

    Example
    -------
    ::

        stream = ProofEventStream()
        stream.emit(LifecycleEvent.request_received())
        stream.emit(LifecycleEvent.reject())

        async for event in stream:
            print(event.event_type)
    """

    _CLOSE = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._finished = False

    @property
    def finished(self) -> bool:
        """``True`` once a terminal event was emitted or the stream was closed."""
        return self._finished

    def emit(self, event: LifecycleEvent) -> bool:
        """Push *event* onto the stream.

        Returns
        -------
        bool
            ``False`` when the stream has already finished and the event
            was dropped.
        """
        if self._finished:
            logger.debug("Dropping %s emitted after stream finished", event.event_type.value)
            return False
        self._queue.put_nowait(event)
        if event.is_terminal:
            self._finished = True
        return True

    def close(self) -> None:
        """End iteration without a terminal event (used on session reset)."""
        if not self._finished:
            self._finished = True
            self._queue.put_nowait(self._CLOSE)

    def __aiter__(self) -> AsyncIterator[LifecycleEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[LifecycleEvent]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSE:
                return
            assert isinstance(item, LifecycleEvent)
            yield item
            if item.is_terminal:
                return
