"""session — the verification state machine and its UI boundary.

Public API
----------
``VerificationSession``
    Drives one attempt from start to a terminal state.
``SessionState`` / ``Severity``
    Lifecycle states and status severities.
``StatusUpdate`` / ``VerificationOutcome``
    What the session emits to the UI.
``SessionRegistry``
    Session-id keyed table for hosts running several sessions.
``validate_first_name`` / ``NameValidationError``
    Requester name input validation.
"""
from __future__ import annotations

from zkpass_verifier.session.outcome import StatusUpdate, VerificationOutcome
from zkpass_verifier.session.registry import SessionNotFoundError, SessionRegistry
from zkpass_verifier.session.session import InvalidTransitionError, VerificationSession
from zkpass_verifier.session.state import TERMINAL_STATES, SessionState, Severity
from zkpass_verifier.session.validation import NameValidationError, validate_first_name

__all__ = [
    "InvalidTransitionError",
    "NameValidationError",
    "SessionNotFoundError",
    "SessionRegistry",
    "SessionState",
    "Severity",
    "StatusUpdate",
    "TERMINAL_STATES",
    "VerificationOutcome",
    "VerificationSession",
    "validate_first_name",
]
