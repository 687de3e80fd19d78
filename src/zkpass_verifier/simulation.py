"""Scripted proof capability for developer mode, demos and tests.

:class:`ScriptedProofCapability` accepts a fixed set of attribute keys,
issues deterministic request URLs and, when asked, replays a scripted list
of lifecycle events onto each request's event stream. No proof is
constructed; the script decides the result.

Example
-------
::

    capability = ScriptedProofCapability(
        script=standard_script(verified=True, result={"age": 30}),
        autoplay=True,
    )
    session = VerificationSession(capability.factory())
    await session.start(VerificationKind.AGE)
    outcome = await session.wait_for_outcome()
"""
from __future__ import annotations

import asyncio
import itertools
import logging
import urllib.parse
from typing import Any, Iterable, Mapping, Optional, Sequence

from zkpass_verifier.capability import (
    CapabilityFactory,
    CapabilityUnavailable,
    FinalizedRequest,
    ProofCapability,
    RequestCreationFailed,
    RequestHandle,
    RequestMetadata,
    UnsupportedAttribute,
)
from zkpass_verifier.events import LifecycleEvent, ProofEventStream

logger = logging.getLogger(__name__)

DEFAULT_ACCEPTED_KEYS: frozenset[str] = frozenset({"age", "firstname"})
DEFAULT_BASE_URL = "https://zkpassport.id/r"


def standard_script(
    verified: bool = True,
    result: Optional[Mapping[str, Any]] = None,
    proof_name: str = "disclosure-proof",
) -> list[LifecycleEvent]:
    """The four-step happy-path event sequence ending in a result."""
    return [
        LifecycleEvent.request_received(),
        LifecycleEvent.generating_proof(),
        LifecycleEvent.proof_generated(proof_name),
        LifecycleEvent.verification_result(verified, result),
    ]


def rejection_script() -> list[LifecycleEvent]:
    """Holder opens the request, then declines it."""
    return [LifecycleEvent.request_received(), LifecycleEvent.reject()]


class ScriptedRequestHandle(RequestHandle):
    """Request handle that records every key it was asked to disclose."""

    def __init__(self, capability: "ScriptedProofCapability", request_id: int, metadata: RequestMetadata) -> None:
        self._capability = capability
        self.request_id = request_id
        self.metadata = metadata
        self.attempted: list[str] = []
        self.disclosed: list[str] = []
        self.stream: Optional[ProofEventStream] = None

    def disclose(self, key: str) -> "ScriptedRequestHandle":
        self.attempted.append(key)
        if key not in self._capability.accepted_keys:
            raise UnsupportedAttribute(key)
        self.disclosed.append(key)
        return self

    def finalize(self) -> FinalizedRequest:
        query = urllib.parse.urlencode(
            {
                "id": self.request_id,
                "scope": self.metadata.scope,
                "disclose": ",".join(self.disclosed),
            }
        )
        self.stream = ProofEventStream()
        if self._capability.autoplay:
            self._capability.schedule(self.stream)
        return FinalizedRequest(url=f"{self._capability.base_url}?{query}", events=self.stream)


class ScriptedProofCapability(ProofCapability):
    """In-process capability driven by a fixed event script.

    Parameters
    ----------
    accepted_keys:
        Attribute keys that :meth:`ScriptedRequestHandle.disclose` accepts.
    script:
        Events replayed onto each finalized request.
    autoplay:
        Replay the script automatically as soon as a request is finalized.
    delay:
        Seconds to wait between scripted events.
    fail_create:
        Make :meth:`create_request` raise :class:`RequestCreationFailed`.
    base_url:
        Prefix for generated request URLs.
    """

    def __init__(
        self,
        accepted_keys: Iterable[str] = DEFAULT_ACCEPTED_KEYS,
        script: Optional[Sequence[LifecycleEvent]] = None,
        autoplay: bool = False,
        delay: float = 0.0,
        fail_create: bool = False,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self.accepted_keys: frozenset[str] = frozenset(accepted_keys)
        self.script: list[LifecycleEvent] = list(script or [])
        self.autoplay = autoplay
        self.delay = delay
        self.fail_create = fail_create
        self.base_url = base_url
        self.requests: list[ScriptedRequestHandle] = []
        self._ids = itertools.count(1)
        self._tasks: set[asyncio.Task[None]] = set()

    async def create_request(self, metadata: RequestMetadata) -> ScriptedRequestHandle:
        if self.fail_create:
            raise RequestCreationFailed("Scripted capability configured to refuse requests")
        handle = ScriptedRequestHandle(self, next(self._ids), metadata)
        self.requests.append(handle)
        return handle

    @property
    def last_request(self) -> Optional[ScriptedRequestHandle]:
        return self.requests[-1] if self.requests else None

    def factory(self) -> CapabilityFactory:
        """Return a coroutine factory yielding this capability."""

        async def _initialize() -> ProofCapability:
            return self

        return _initialize

    def schedule(self, stream: ProofEventStream) -> None:
        """Replay the script onto *stream* in a background task."""
        task = asyncio.get_running_loop().create_task(self.play(stream))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def play(self, stream: Optional[ProofEventStream] = None) -> None:
        """Emit the script onto *stream* (defaults to the latest request's stream)."""
        if stream is None:
            latest = self.last_request
            if latest is None or latest.stream is None:
                raise RuntimeError("No finalized request to play events onto")
            stream = latest.stream
        for event in self.script:
            await asyncio.sleep(self.delay)
            if not stream.emit(event):
                logger.debug("Scripted stream finished; remaining events dropped")
                return


def unavailable_factory(reason: str = "ZKPassport SDK not available") -> CapabilityFactory:
    """Return a capability factory that always fails to initialize."""

    async def _initialize() -> ProofCapability:
        raise CapabilityUnavailable(reason)

    return _initialize
