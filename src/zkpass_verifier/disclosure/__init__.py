"""disclosure — building the attribute disclosure request.

Public API
----------
``VerificationKind``
    Age, first name, or both.
``AttributeResolver`` / ``NoCompatibleKey``
    Ordered synonym resolution of attribute keys.
``RequestBuilder`` / ``DisclosureSpec``
    Per-kind request construction with purpose/scope metadata.
"""
from __future__ import annotations

from zkpass_verifier.disclosure.kinds import (
    AGE_ATTRIBUTE,
    FIRST_NAME_ATTRIBUTE,
    KIND_METADATA,
    KindMetadata,
    VerificationKind,
    metadata_for,
)
from zkpass_verifier.disclosure.request import DisclosureSpec, RequestBuilder
from zkpass_verifier.disclosure.resolver import (
    CANDIDATE_KEYS,
    AttributeResolver,
    NoCompatibleKey,
    resolve,
)

__all__ = [
    "AGE_ATTRIBUTE",
    "AttributeResolver",
    "CANDIDATE_KEYS",
    "DisclosureSpec",
    "FIRST_NAME_ATTRIBUTE",
    "KIND_METADATA",
    "KindMetadata",
    "NoCompatibleKey",
    "RequestBuilder",
    "VerificationKind",
    "metadata_for",
    "resolve",
]
