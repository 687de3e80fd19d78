"""VerificationKind enumeration and the per-kind request metadata table.

The kind decides which logical attributes are disclosed and which
``purpose`` / ``scope`` strings accompany the request shown to the holder.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VerificationKind(str, Enum):
    """What a verification attempt asks the holder to prove.

    AGE
        Age threshold only. No name input is collected.
    NAME
        First name only, compared with a name typed by the requester.
    AGE_AND_NAME
        Both attributes. Partial results are reported distinctly.
    """

    AGE = "age"
    NAME = "name"
    AGE_AND_NAME = "both"

    @property
    def requires_name(self) -> bool:
        """``True`` when the requester must supply an expected first name."""
        return self in (VerificationKind.NAME, VerificationKind.AGE_AND_NAME)

    @property
    def requires_age(self) -> bool:
        """``True`` when the age attribute is part of the request."""
        return self in (VerificationKind.AGE, VerificationKind.AGE_AND_NAME)


# Logical attribute names used throughout the request and result layers.
AGE_ATTRIBUTE = "age"
FIRST_NAME_ATTRIBUTE = "first name"


@dataclass(frozen=True)
class KindMetadata:
    """Human-readable purpose and machine-readable scope for one kind."""

    purpose: str
    scope: str


KIND_METADATA: dict[VerificationKind, KindMetadata] = {
    VerificationKind.AGE: KindMetadata(
        purpose="Verify age for enhanced language certificate credibility",
        scope="age-verification",
    ),
    VerificationKind.NAME: KindMetadata(
        purpose="Verify first name for personalized certificate validation",
        scope="name-verification",
    ),
    VerificationKind.AGE_AND_NAME: KindMetadata(
        purpose="Verify age and identity for complete certificate validation",
        scope="identity-verification",
    ),
}


def metadata_for(kind: VerificationKind) -> KindMetadata:
    """Return the static purpose/scope pair for *kind*."""
    return KIND_METADATA[kind]


def logical_attributes(kind: VerificationKind) -> list[str]:
    """Return the logical attributes requested for *kind*, in request order.

    Age always precedes first name.
    """
    attributes: list[str] = []
    if kind.requires_age:
        attributes.append(AGE_ATTRIBUTE)
    if kind.requires_name:
        attributes.append(FIRST_NAME_ATTRIBUTE)
    return attributes
