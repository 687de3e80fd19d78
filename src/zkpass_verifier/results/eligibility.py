"""EligibilityEvaluator — judge a normalized outcome against the request.

Two checks exist: age at or above the threshold, and a case-insensitive,
whitespace-trimmed match between the disclosed and expected first names.
Which checks count toward success depends on the
:class:`~zkpass_verifier.disclosure.kinds.VerificationKind`.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from zkpass_verifier.disclosure.kinds import VerificationKind
from zkpass_verifier.results.extractor import extract_age, extract_name

DEFAULT_MINIMUM_AGE = 18


@dataclass(frozen=True)
class NormalizedOutcome:
    """Attributes extracted from a raw result payload.

    Parameters
    ----------
    age_years:
        Whole years, non-negative, or ``None`` when absent or unreadable.
    disclosed_name:
        First name exactly as disclosed, or ``None``.
    """

    age_years: Optional[int] = None
    disclosed_name: Optional[str] = None

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], today: Optional[datetime.date] = None
    ) -> "NormalizedOutcome":
        """Run both extractors over *payload*."""
        return cls(age_years=extract_age(payload, today), disclosed_name=extract_name(payload))


class VerdictLabel(str, Enum):
    """Named outcome of an evaluation, used for user messaging.

    VERIFIED
        Every check the kind requires passed.
    AGE_ONLY
        Combined request: age passed, name did not.
    NAME_ONLY
        Combined request: name passed, age did not.
    NOT_VERIFIED
        No required check passed.
    """

    VERIFIED = "verified"
    AGE_ONLY = "age_only"
    NAME_ONLY = "name_only"
    NOT_VERIFIED = "not_verified"


@dataclass(frozen=True)
class EligibilityVerdict:
    """Outcome of :func:`evaluate`.

    ``age_verified`` and ``name_verified`` are always computed; ``label``
    reflects only the checks *kind* requires.
    """

    kind: VerificationKind
    age_verified: bool
    name_verified: bool
    label: VerdictLabel

    @property
    def success(self) -> bool:
        return self.label is VerdictLabel.VERIFIED

    @property
    def partial(self) -> bool:
        return self.label in (VerdictLabel.AGE_ONLY, VerdictLabel.NAME_ONLY)


def names_match(disclosed: Optional[str], expected: Optional[str]) -> bool:
    """Case-insensitive comparison of trimmed names; ``False`` if either is missing."""
    if disclosed is None or expected is None:
        return False
    return disclosed.strip().lower() == expected.strip().lower()


def is_of_age(age_years: Optional[int], minimum_age: int = DEFAULT_MINIMUM_AGE) -> bool:
    return age_years is not None and age_years >= minimum_age


def _label(kind: VerificationKind, age_verified: bool, name_verified: bool) -> VerdictLabel:
    if kind is VerificationKind.AGE:
        return VerdictLabel.VERIFIED if age_verified else VerdictLabel.NOT_VERIFIED
    if kind is VerificationKind.NAME:
        return VerdictLabel.VERIFIED if name_verified else VerdictLabel.NOT_VERIFIED
    if age_verified and name_verified:
        return VerdictLabel.VERIFIED
    if age_verified:
        return VerdictLabel.AGE_ONLY
    if name_verified:
        return VerdictLabel.NAME_ONLY
    return VerdictLabel.NOT_VERIFIED


def evaluate(
    outcome: NormalizedOutcome,
    expected_name: Optional[str],
    kind: VerificationKind,
    minimum_age: int = DEFAULT_MINIMUM_AGE,
) -> EligibilityVerdict:
    """Judge *outcome* for a request of *kind*.

    Parameters
    ----------
    outcome:
        Normalized attributes from the result payload.
    expected_name:
        First name supplied by the requester, or ``None``.
    kind:
        Which checks count toward success.
    minimum_age:
        Inclusive age threshold.

    Returns
    -------
    EligibilityVerdict
        Never raises; missing data yields failed checks.
    """
    age_verified = is_of_age(outcome.age_years, minimum_age)
    name_verified = names_match(outcome.disclosed_name, expected_name)
    return EligibilityVerdict(
        kind=kind,
        age_verified=age_verified,
        name_verified=name_verified,
        label=_label(kind, age_verified, name_verified),
    )
