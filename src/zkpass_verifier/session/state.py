"""Session states, their ordering, and default status wording.

States advance monotonically along :data:`STATE_ORDER`; the only way back
is an explicit reset to :attr:`SessionState.IDLE` from a terminal state.
"""
from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of one verification attempt."""

    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    BUILDING_REQUEST = "building_request"
    AWAITING_SCAN = "awaiting_scan"
    REQUEST_RECEIVED = "request_received"
    GENERATING_PROOF = "generating_proof"
    PROOF_GENERATED = "proof_generated"
    AWAITING_RESULT = "awaiting_result"
    SUCCEEDED = "succeeded"
    PARTIALLY_VERIFIED = "partially_verified"
    FAILED = "failed"
    REJECTED = "rejected"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def is_active(self) -> bool:
        """``True`` for every state between Idle and a terminal state."""
        return self is not SessionState.IDLE and not self.is_terminal

    @property
    def rank(self) -> int:
        """Position along the lifecycle; all terminal states share the top rank."""
        return STATE_ORDER.index(self) if self in STATE_ORDER else len(STATE_ORDER)


class Severity(str, Enum):
    """How a status message should be presented."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


STATE_ORDER: tuple[SessionState, ...] = (
    SessionState.IDLE,
    SessionState.AWAITING_INPUT,
    SessionState.BUILDING_REQUEST,
    SessionState.AWAITING_SCAN,
    SessionState.REQUEST_RECEIVED,
    SessionState.GENERATING_PROOF,
    SessionState.PROOF_GENERATED,
    SessionState.AWAITING_RESULT,
)

TERMINAL_STATES: frozenset[SessionState] = frozenset(
    {
        SessionState.SUCCEEDED,
        SessionState.PARTIALLY_VERIFIED,
        SessionState.FAILED,
        SessionState.REJECTED,
        SessionState.ERRORED,
    }
)

# States in which lifecycle events from the capability are accepted.
LISTENING_STATES: frozenset[SessionState] = frozenset(
    {
        SessionState.AWAITING_SCAN,
        SessionState.REQUEST_RECEIVED,
        SessionState.GENERATING_PROOF,
        SessionState.PROOF_GENERATED,
        SessionState.AWAITING_RESULT,
    }
)

STATUS_MESSAGES: dict[SessionState, tuple[str, Severity]] = {
    SessionState.IDLE: ("", Severity.INFO),
    SessionState.AWAITING_INPUT: (
        "Please enter your first name to verify against your passport",
        Severity.INFO,
    ),
    SessionState.BUILDING_REQUEST: ("Creating verification request...", Severity.INFO),
    SessionState.AWAITING_SCAN: ("Scan the QR code with the ZKPassport app", Severity.SUCCESS),
    SessionState.REQUEST_RECEIVED: ("Request received on your device", Severity.INFO),
    SessionState.GENERATING_PROOF: (
        "Generating zero-knowledge proof on your device...",
        Severity.INFO,
    ),
    SessionState.PROOF_GENERATED: (
        "Zero-knowledge proof generated successfully",
        Severity.SUCCESS,
    ),
    SessionState.AWAITING_RESULT: ("Verifying proof...", Severity.INFO),
    SessionState.SUCCEEDED: ("Verification successful", Severity.SUCCESS),
    SessionState.PARTIALLY_VERIFIED: ("Partial verification", Severity.ERROR),
    SessionState.FAILED: ("Verification failed", Severity.ERROR),
    SessionState.REJECTED: (
        "Verification was rejected or cancelled by user.",
        Severity.WARNING,
    ),
    SessionState.ERRORED: ("Verification error", Severity.ERROR),
}

PAUSED_MESSAGE = "Verification paused. Return to this tab to continue."
