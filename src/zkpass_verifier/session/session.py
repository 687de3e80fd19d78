"""VerificationSession — drives one verification attempt end to end.

A session owns the kind, the expected first name, the disclosure spec and
the event subscription of a single attempt. It moves through
:class:`~zkpass_verifier.session.state.SessionState` as the requester
starts, the request is built and shown, and the capability reports
progress from the holder's device::

    Idle -> [AwaitingInput] -> BuildingRequest -> AwaitingScan
         -> RequestReceived -> GeneratingProof -> ProofGenerated
         -> AwaitingResult -> Succeeded | PartiallyVerified | Failed
                              Rejected | Errored   (from any active state)

Terminal states are sticky: later events are ignored until :meth:`reset`.
Capability and build failures never escape :meth:`start` or
:meth:`submit_name`; they end the attempt in ``Errored``.

Example
-------
::

    session = VerificationSession(capability_factory)
    await session.start(VerificationKind.AGE)
    print(session.request_url)
    outcome = await session.wait_for_outcome()
"""
from __future__ import annotations

import asyncio
import datetime
import logging
import uuid
from typing import Callable, Optional

from zkpass_verifier.audit import SessionAuditLogger
from zkpass_verifier.capability import CapabilityError, CapabilityFactory
from zkpass_verifier.config import VerifierConfig
from zkpass_verifier.disclosure.kinds import VerificationKind
from zkpass_verifier.disclosure.request import DisclosureSpec, RequestBuilder
from zkpass_verifier.disclosure.resolver import NoCompatibleKey
from zkpass_verifier.events import EventType, LifecycleEvent, ProofEventStream
from zkpass_verifier.qr import QRRenderer, RenderError, RenderTarget
from zkpass_verifier.results.eligibility import NormalizedOutcome, evaluate
from zkpass_verifier.results.messages import UNVERIFIED_PROOF_MESSAGE, outcome_message
from zkpass_verifier.session.outcome import StatusUpdate, VerificationOutcome
from zkpass_verifier.session.state import (
    LISTENING_STATES,
    PAUSED_MESSAGE,
    STATUS_MESSAGES,
    SessionState,
    Severity,
)
from zkpass_verifier.session.validation import NameValidationError, validate_first_name

logger = logging.getLogger(__name__)

StatusListener = Callable[[StatusUpdate], None]
OutcomeListener = Callable[[VerificationOutcome], None]

_PROGRESS_STATES: dict[EventType, SessionState] = {
    EventType.REQUEST_RECEIVED: SessionState.REQUEST_RECEIVED,
    EventType.GENERATING_PROOF: SessionState.GENERATING_PROOF,
    EventType.PROOF_GENERATED: SessionState.PROOF_GENERATED,
}


class InvalidTransitionError(RuntimeError):
    """Raised when a transition would move a session backwards."""

    def __init__(self, old: SessionState, new: SessionState) -> None:
        super().__init__(f"Cannot move session from {old.value!r} to {new.value!r}")
        self.old = old
        self.new = new


class VerificationSession:
    """State machine for one verification attempt.

    Parameters
    ----------
    capability_factory:
        Coroutine factory that initializes the proof capability; it raises
        :class:`~zkpass_verifier.capability.CapabilityUnavailable` when the
        capability cannot be reached.
    config:
        Verifier settings. Defaults to :class:`VerifierConfig`.
    renderer:
        Optional QR renderer invoked once the request URL is known.
    render_target:
        Surface handed to *renderer*. Rendering is skipped when either
        *renderer* or *render_target* is ``None``.
    builder:
        Request builder. A default one is created when omitted.
    audit:
        Optional audit logger receiving session milestones.
    clock:
        Returns "today" for date-of-birth arithmetic.
    session_id:
        Explicit identifier; a random UUID is used when omitted.
    """

    def __init__(
        self,
        capability_factory: CapabilityFactory,
        config: Optional[VerifierConfig] = None,
        renderer: Optional[QRRenderer] = None,
        render_target: Optional[RenderTarget] = None,
        builder: Optional[RequestBuilder] = None,
        audit: Optional[SessionAuditLogger] = None,
        clock: Callable[[], datetime.date] = datetime.date.today,
        session_id: Optional[str] = None,
    ) -> None:
        self._capability_factory = capability_factory
        self._config = config or VerifierConfig()
        self._renderer = renderer
        self._render_target = render_target
        self._builder = builder or RequestBuilder()
        self._audit = audit
        self._clock = clock
        self.session_id: str = session_id or str(uuid.uuid4())

        self._status_listeners: list[StatusListener] = []
        self._outcome_listeners: list[OutcomeListener] = []

        self._state = SessionState.IDLE
        self._attempt = 0
        self._kind: Optional[VerificationKind] = None
        self._expected_name: Optional[str] = None
        self._spec: Optional[DisclosureSpec] = None
        self._request_url: Optional[str] = None
        self._stream: Optional[ProofEventStream] = None
        self._listener: Optional[asyncio.Task[None]] = None
        self._proof_name: Optional[str] = None
        self._error: Optional[str] = None
        self._outcome: Optional[VerificationOutcome] = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def kind(self) -> Optional[VerificationKind]:
        return self._kind

    @property
    def expected_name(self) -> Optional[str]:
        return self._expected_name

    @property
    def disclosure_spec(self) -> Optional[DisclosureSpec]:
        return self._spec

    @property
    def request_url(self) -> Optional[str]:
        return self._request_url

    @property
    def error(self) -> Optional[str]:
        """Error detail when the session ended in ``Errored``."""
        return self._error

    @property
    def outcome(self) -> Optional[VerificationOutcome]:
        """Terminal outcome, or ``None`` while the attempt is still open."""
        return self._outcome

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_status_listener(self, listener: StatusListener) -> None:
        """Register *listener* for every :class:`StatusUpdate`."""
        self._status_listeners.append(listener)

    def add_outcome_listener(self, listener: OutcomeListener) -> None:
        """Register *listener* for terminal :class:`VerificationOutcome` objects."""
        self._outcome_listeners.append(listener)

    # ------------------------------------------------------------------
    # Requester actions
    # ------------------------------------------------------------------

    async def start(self, kind: VerificationKind) -> SessionState:
        """Begin an attempt of *kind*.

        Age-only attempts go straight to building the request; name-based
        attempts wait for :meth:`submit_name`. Calling ``start`` while an
        attempt is active, or before a terminal attempt was reset, changes
        nothing.

        Returns
        -------
        SessionState
            The state after the call.
        """
        if self._state is not SessionState.IDLE:
            logger.debug(
                "Session %s: start(%s) ignored in state %s",
                self.session_id,
                kind.value,
                self._state.value,
            )
            return self._state

        self._kind = kind
        self._audit_event("session_started", kind=kind.value)
        if kind.requires_name:
            self._transition(SessionState.AWAITING_INPUT)
            return self._state
        return await self._begin_request()

    async def submit_name(self, raw_name: str) -> SessionState:
        """Supply the expected first name for a name-based attempt.

        Invalid input leaves the session in ``AwaitingInput`` and emits an
        error-severity status update.
        """
        if self._state is not SessionState.AWAITING_INPUT:
            logger.warning(
                "Session %s: name submitted in state %s; ignoring",
                self.session_id,
                self._state.value,
            )
            return self._state
        try:
            name = validate_first_name(raw_name)
        except NameValidationError as exc:
            self._emit_status(StatusUpdate(state=self._state, message=str(exc), severity=Severity.ERROR))
            return self._state
        self._expected_name = name
        return await self._begin_request()

    def notify_visibility(self, hidden: bool) -> None:
        """Report that the host page was backgrounded; state is unaffected."""
        if hidden and self._state.is_active and self._state.rank >= SessionState.BUILDING_REQUEST.rank:
            self._emit_status(
                StatusUpdate(state=self._state, message=PAUSED_MESSAGE, severity=Severity.WARNING)
            )

    def reset(self) -> SessionState:
        """Return to ``Idle``, discarding the attempt and its subscription."""
        if self._state is SessionState.IDLE:
            return self._state
        self._attempt += 1
        if self._stream is not None:
            self._stream.close()
        if self._listener is not None and not self._listener.done():
            self._listener.cancel()
        self._stream = None
        self._listener = None
        self._kind = None
        self._expected_name = None
        self._spec = None
        self._request_url = None
        self._proof_name = None
        self._error = None
        self._outcome = None
        self._transition(SessionState.IDLE)
        return self._state

    async def wait_for_outcome(self) -> Optional[VerificationOutcome]:
        """Wait until the event subscription ends; return the terminal outcome.

        Returns ``None`` if the attempt was reset before it finished. There
        is no built-in timeout; wrap in :func:`asyncio.wait_for` if needed.
        """
        listener = self._listener
        if listener is not None and not listener.done():
            await asyncio.wait({listener})
        return self._outcome

    # ------------------------------------------------------------------
    # Capability events
    # ------------------------------------------------------------------

    def handle_event(self, event: LifecycleEvent) -> SessionState:
        """Apply one lifecycle event and return the resulting state.

        Events arriving after a terminal state, before the request is shown,
        or out of order are ignored.
        """
        if self._state.is_terminal or self._state not in LISTENING_STATES:
            logger.debug(
                "Session %s: ignoring %s in state %s",
                self.session_id,
                event.event_type.value,
                self._state.value,
            )
            self._audit_event(
                "event_ignored", event=event.event_type.value, state=self._state.value
            )
            return self._state

        if event.event_type is EventType.REJECT:
            self._finish(
                SessionState.REJECTED,
                *STATUS_MESSAGES[SessionState.REJECTED],
            )
        elif event.event_type is EventType.ERROR:
            self._fail(event.detail or "Unknown error")
        elif event.event_type is EventType.RESULT:
            self._finish_with_result(event)
        else:
            self._advance(event)
        return self._state

    def _advance(self, event: LifecycleEvent) -> None:
        target = _PROGRESS_STATES[event.event_type]
        if target.rank <= self._state.rank:
            logger.warning(
                "Session %s: out-of-order %s in state %s",
                self.session_id,
                event.event_type.value,
                self._state.value,
            )
            return
        self._transition(target)
        if event.event_type is EventType.PROOF_GENERATED:
            self._proof_name = event.name
            logger.info("Session %s: proof generated (%s)", self.session_id, event.name)
            self._transition(SessionState.AWAITING_RESULT)

    def _finish_with_result(self, event: LifecycleEvent) -> None:
        assert self._kind is not None
        normalized = NormalizedOutcome.from_payload(event.result, self._clock())
        verdict = evaluate(normalized, self._expected_name, self._kind, self._config.minimum_age)

        if not event.verified:
            state, message = SessionState.FAILED, UNVERIFIED_PROOF_MESSAGE
        else:
            message = outcome_message(
                self._kind, normalized, verdict, self._expected_name, self._config.minimum_age
            )
            if verdict.success:
                state = SessionState.SUCCEEDED
            elif verdict.partial:
                state = SessionState.PARTIALLY_VERIFIED
            else:
                state = SessionState.FAILED

        # Only attributes the kind requested may appear in the outcome.
        age_verified = event.verified and self._kind.requires_age and verdict.age_verified
        name_verified = event.verified and self._kind.requires_name and verdict.name_verified
        self._finish(
            state,
            message,
            Severity.SUCCESS if state is SessionState.SUCCEEDED else Severity.ERROR,
            success=state is SessionState.SUCCEEDED,
            partial=state is SessionState.PARTIALLY_VERIFIED,
            age_verified=age_verified,
            name_verified=name_verified,
            age_years=normalized.age_years if age_verified else None,
            name=self._expected_name if name_verified else None,
        )

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    async def _begin_request(self) -> SessionState:
        assert self._kind is not None
        kind = self._kind
        attempt = self._attempt
        self._transition(SessionState.BUILDING_REQUEST)

        try:
            capability = await self._capability_factory()
            metadata = self._builder.request_metadata(
                kind,
                display_name=self._config.display_name,
                logo_ref=self._config.logo_ref,
                dev_mode=self._config.dev_mode,
            )
            handle = await capability.create_request(metadata)
            spec = self._builder.build(kind, handle.disclose)
            finalized = handle.finalize()
        except (CapabilityError, NoCompatibleKey) as exc:
            if attempt == self._attempt:
                self._fail(f"Failed to generate verification request: {exc}")
            return self._state
        except Exception as exc:
            logger.exception("Session %s: capability failure while building request", self.session_id)
            if attempt == self._attempt:
                self._fail(f"Failed to generate verification request: {exc}")
            return self._state

        if attempt != self._attempt:
            logger.info("Session %s: discarding request built for a reset attempt", self.session_id)
            finalized.events.close()
            return self._state

        self._spec = spec
        self._request_url = finalized.url
        self._stream = finalized.events
        self._audit_event("request_created", keys=list(spec.keys), scope=spec.scope)

        if self._renderer is not None and self._render_target is not None:
            try:
                self._renderer.render(self._render_target, finalized.url, self._config.qr)
            except RenderError as exc:
                finalized.events.close()
                self._fail(f"Failed to render QR code: {exc}")
                return self._state

        self._transition(SessionState.AWAITING_SCAN)
        self._listener = asyncio.create_task(self._consume(finalized.events, attempt))
        return self._state

    async def _consume(self, events: ProofEventStream, attempt: int) -> None:
        async for event in events:
            if attempt != self._attempt:
                return
            self.handle_event(event)
            if self._state.is_terminal:
                return

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _fail(self, detail: str) -> None:
        logger.warning("Session %s: errored: %s", self.session_id, detail)
        self._error = detail
        self._finish(SessionState.ERRORED, f"Verification error: {detail}", Severity.ERROR)

    def _finish(
        self,
        state: SessionState,
        message: str,
        severity: Severity,
        **fields: object,
    ) -> None:
        assert self._kind is not None
        self._transition(state, message, severity)
        outcome = VerificationOutcome(
            session_id=self.session_id,
            kind=self._kind,
            state=state,
            message=message,
            error=self._error,
            proof_name=self._proof_name,
            **fields,
        )
        self._outcome = outcome
        if self._audit is not None:
            self._audit.log_outcome(
                self.session_id, self._kind.value, state.value, outcome.success, outcome.partial
            )
        for listener in list(self._outcome_listeners):
            listener(outcome)

    def _transition(
        self,
        new_state: SessionState,
        message: Optional[str] = None,
        severity: Optional[Severity] = None,
    ) -> None:
        old_state = self._state
        allowed = (
            new_state is SessionState.IDLE
            or (not old_state.is_terminal and new_state.rank > old_state.rank)
        )
        if not allowed:
            raise InvalidTransitionError(old_state, new_state)

        self._state = new_state
        logger.info("Session %s: %s -> %s", self.session_id, old_state.value, new_state.value)
        if self._audit is not None:
            self._audit.log_transition(self.session_id, old_state.value, new_state.value)

        default_message, default_severity = STATUS_MESSAGES[new_state]
        self._emit_status(
            StatusUpdate(
                state=new_state,
                message=message if message is not None else default_message,
                severity=severity if severity is not None else default_severity,
            )
        )

    def _emit_status(self, update: StatusUpdate) -> None:
        for listener in list(self._status_listeners):
            listener(update)

    def _audit_event(self, name: str, **details: object) -> None:
        if self._audit is not None:
            self._audit.log_event(name, self.session_id, **details)
