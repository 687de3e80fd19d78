"""User-facing wording for verification outcomes."""
from __future__ import annotations

from typing import Optional

from zkpass_verifier.disclosure.kinds import VerificationKind
from zkpass_verifier.results.eligibility import (
    DEFAULT_MINIMUM_AGE,
    EligibilityVerdict,
    NormalizedOutcome,
    VerdictLabel,
)

UNVERIFIED_PROOF_MESSAGE = "Verification failed - proof was not valid"


def _age_message(outcome: NormalizedOutcome, verdict: EligibilityVerdict, minimum_age: int) -> str:
    if outcome.age_years is None:
        return "Age information not found in verification result."
    if verdict.success:
        return (
            f"Age verification successful! You are verified as {minimum_age}+ "
            "without revealing personal information."
        )
    return f"Age verification failed. You must be {minimum_age}+ to proceed."


def _name_message(
    outcome: NormalizedOutcome, verdict: EligibilityVerdict, expected_name: Optional[str]
) -> str:
    if outcome.disclosed_name is None or expected_name is None:
        return "Name information not found in verification result or expected name not set."
    if verdict.success:
        return (
            f'Name verification successful! Your first name "{expected_name}" has been '
            "verified without revealing other personal information."
        )
    return (
        f'Name verification failed. The name "{expected_name}" does not match your '
        f'passport (received: "{outcome.disclosed_name}").'
    )


def _combined_message(
    verdict: EligibilityVerdict, expected_name: Optional[str], minimum_age: int
) -> str:
    if verdict.label is VerdictLabel.VERIFIED:
        return (
            f'Complete verification successful! Age ({minimum_age}+) and name "{expected_name}" '
            "verified without revealing other personal information."
        )
    if verdict.label is VerdictLabel.AGE_ONLY:
        return (
            f'Partial verification: Age verified but name "{expected_name}" does not match '
            "your passport."
        )
    if verdict.label is VerdictLabel.NAME_ONLY:
        return f"Partial verification: Name verified but you must be {minimum_age}+ to proceed."
    return f'Verification failed: Neither age nor name "{expected_name}" could be verified.'


def outcome_message(
    kind: VerificationKind,
    outcome: NormalizedOutcome,
    verdict: EligibilityVerdict,
    expected_name: Optional[str],
    minimum_age: int = DEFAULT_MINIMUM_AGE,
) -> str:
    """Return the status text shown when a verified proof has been evaluated."""
    if kind is VerificationKind.AGE:
        return _age_message(outcome, verdict, minimum_age)
    if kind is VerificationKind.NAME:
        return _name_message(outcome, verdict, expected_name)
    return _combined_message(verdict, expected_name, minimum_age)
