"""zkpass-verifier — selective-disclosure identity verification orchestration.

Builds a passport-backed disclosure request (age, first name or both),
hands it to an external proof capability, shows the request as a QR code
and turns the asynchronous proof outcome into a pass / partial / fail
decision.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import zkpass_verifier
>>> zkpass_verifier.__version__
'0.1.0'

Quick start
-----------
::

    from zkpass_verifier import (
        VerificationKind, VerificationSession, ScriptedProofCapability, standard_script,
    )

    capability = ScriptedProofCapability(
        script=standard_script(result={"age": 30}), autoplay=True
    )
    session = VerificationSession(capability.factory())
    await session.start(VerificationKind.AGE)
    outcome = await session.wait_for_outcome()
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Capability contract and events
# ------------------------------------------------------------------
from zkpass_verifier.capability import (
    CapabilityError,
    CapabilityUnavailable,
    FinalizedRequest,
    ProofCapability,
    RequestCreationFailed,
    RequestHandle,
    RequestMetadata,
    UnsupportedAttribute,
)
from zkpass_verifier.events import EventType, LifecycleEvent, ProofEventStream

# ------------------------------------------------------------------
# Disclosure subsystem
# ------------------------------------------------------------------
from zkpass_verifier.disclosure import (
    AttributeResolver,
    DisclosureSpec,
    NoCompatibleKey,
    RequestBuilder,
    VerificationKind,
)

# ------------------------------------------------------------------
# Results subsystem
# ------------------------------------------------------------------
from zkpass_verifier.results import (
    EligibilityVerdict,
    NormalizedOutcome,
    VerdictLabel,
    evaluate,
    extract_age,
    extract_name,
)

# ------------------------------------------------------------------
# Session subsystem
# ------------------------------------------------------------------
from zkpass_verifier.session import (
    NameValidationError,
    SessionRegistry,
    SessionState,
    Severity,
    StatusUpdate,
    VerificationOutcome,
    VerificationSession,
)

# ------------------------------------------------------------------
# Configuration, audit, rendering, developer mode
# ------------------------------------------------------------------
from zkpass_verifier.audit import SessionAuditEvent, SessionAuditLogger
from zkpass_verifier.config import QROptions, VerifierConfig, load_config
from zkpass_verifier.qr import QRCodeRenderer, QRRenderer, RenderError
from zkpass_verifier.simulation import ScriptedProofCapability, standard_script

__all__ = [
    # version
    "__version__",
    # capability
    "CapabilityError",
    "CapabilityUnavailable",
    "EventType",
    "FinalizedRequest",
    "LifecycleEvent",
    "ProofCapability",
    "ProofEventStream",
    "RequestCreationFailed",
    "RequestHandle",
    "RequestMetadata",
    "UnsupportedAttribute",
    # disclosure
    "AttributeResolver",
    "DisclosureSpec",
    "NoCompatibleKey",
    "RequestBuilder",
    "VerificationKind",
    # results
    "EligibilityVerdict",
    "NormalizedOutcome",
    "VerdictLabel",
    "evaluate",
    "extract_age",
    "extract_name",
    # session
    "NameValidationError",
    "SessionRegistry",
    "SessionState",
    "Severity",
    "StatusUpdate",
    "VerificationOutcome",
    "VerificationSession",
    # configuration / audit / rendering / developer mode
    "QROptions",
    "QRCodeRenderer",
    "QRRenderer",
    "RenderError",
    "ScriptedProofCapability",
    "SessionAuditEvent",
    "SessionAuditLogger",
    "VerifierConfig",
    "load_config",
    "standard_script",
]
