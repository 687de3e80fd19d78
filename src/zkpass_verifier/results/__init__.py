"""results — turning a raw result payload into a verdict.

Public API
----------
``extract_age`` / ``extract_name``
    Tolerant extraction from scalar, date-string and wrapped payload values.
``NormalizedOutcome``
    The extracted attributes.
``evaluate`` / ``EligibilityVerdict`` / ``VerdictLabel``
    Age threshold and name match, with the four-way combined labelling.
``outcome_message``
    User-facing wording for a verdict.
"""
from __future__ import annotations

from zkpass_verifier.results.eligibility import (
    DEFAULT_MINIMUM_AGE,
    EligibilityVerdict,
    NormalizedOutcome,
    VerdictLabel,
    evaluate,
    is_of_age,
    names_match,
)
from zkpass_verifier.results.extractor import age_on, extract_age, extract_name
from zkpass_verifier.results.messages import UNVERIFIED_PROOF_MESSAGE, outcome_message

__all__ = [
    "DEFAULT_MINIMUM_AGE",
    "EligibilityVerdict",
    "NormalizedOutcome",
    "UNVERIFIED_PROOF_MESSAGE",
    "VerdictLabel",
    "age_on",
    "evaluate",
    "extract_age",
    "extract_name",
    "is_of_age",
    "names_match",
    "outcome_message",
]
