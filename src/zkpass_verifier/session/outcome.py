"""Models exposed to the UI boundary: status updates and terminal outcomes."""
from __future__ import annotations

import urllib.parse
from typing import Optional

from pydantic import BaseModel

from zkpass_verifier.disclosure.kinds import VerificationKind
from zkpass_verifier.session.state import SessionState, Severity


class StatusUpdate(BaseModel):
    """Emitted on every state change (and for paused notices)."""

    state: SessionState
    message: str
    severity: Severity = Severity.INFO


class VerificationOutcome(BaseModel):
    """Structured result emitted once a session reaches a terminal state.

    ``age_years`` and ``name`` are only populated when the corresponding
    check passed, so the outcome can be forwarded without leaking failed
    attribute values.
    """

    session_id: str
    kind: VerificationKind
    state: SessionState
    success: bool = False
    partial: bool = False
    age_verified: bool = False
    name_verified: bool = False
    age_years: Optional[int] = None
    name: Optional[str] = None
    message: str = ""
    error: Optional[str] = None
    proof_name: Optional[str] = None

    def issuer_parameters(self) -> dict[str, str]:
        """Query parameters for the downstream issuer flow.

        Empty unless the outcome is a full success.
        """
        params: dict[str, str] = {}
        if not self.success:
            return params
        if self.name_verified and self.name is not None:
            params["verified_name"] = self.name
        if self.age_verified:
            params["verified_age"] = "true"
        return params

    def issuer_redirect_url(self, base_url: str) -> Optional[str]:
        """Return *base_url* with :meth:`issuer_parameters` appended, or ``None``."""
        params = self.issuer_parameters()
        if not params:
            return None
        separator = "&" if urllib.parse.urlparse(base_url).query else "?"
        return f"{base_url}{separator}{urllib.parse.urlencode(params)}"

