"""Proof capability contract — the external system that proves attributes.

The verifier never constructs or checks zero-knowledge proofs itself. It
talks to a capability through three small abstractions:

``ProofCapability``
    Entry point; creates a request for a purpose/scope pair.
``RequestHandle``
    Chainable builder; ``disclose(key)`` adds an attribute or raises
    :class:`UnsupportedAttribute` when the capability does not know *key*.
``FinalizedRequest``
    The scannable URL plus the :class:`~zkpass_verifier.events.ProofEventStream`
    that reports progress on the holder's device.

Concrete SDK bindings subclass the two ABCs. A scripted, in-process
implementation lives in :mod:`zkpass_verifier.simulation`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable

from zkpass_verifier.events import ProofEventStream


class CapabilityError(Exception):
    """Base class for failures reported by the proof capability."""


class CapabilityUnavailable(CapabilityError):
    """Raised when the capability cannot be initialized or reached."""


class RequestCreationFailed(CapabilityError):
    """Raised when the capability refuses to create a disclosure request."""


class UnsupportedAttribute(CapabilityError):
    """Raised by :meth:`RequestHandle.disclose` for an unknown attribute key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Attribute key {key!r} is not supported by this capability")
        self.key = key


@dataclass(frozen=True)
class RequestMetadata:
    """Metadata shown to the holder when the request is scanned.

    Parameters
    ----------
    purpose:
        Human-readable reason for the request.
    scope:
        Machine-readable scope string (e.g. ``"age-verification"``).
    display_name:
        Name of the verifier as presented on the holder's device.
    logo_ref:
        URL or reference to the verifier's logo.
    dev_mode:
        Forwarded to capabilities that support a developer/mock mode.
    """

    purpose: str
    scope: str
    display_name: str
    logo_ref: str = ""
    dev_mode: bool = False

    def to_dict(self) -> dict[str, object]:
        """Serialize to the camelCase mapping most SDKs expect."""
        return {
            "purpose": self.purpose,
            "scope": self.scope,
            "displayName": self.display_name,
            "logoRef": self.logo_ref,
            "devMode": self.dev_mode,
        }


@dataclass(frozen=True)
class FinalizedRequest:
    """A request ready to be displayed: its URL and its event stream."""

    url: str
    events: ProofEventStream


class RequestHandle(ABC):
    """Chainable disclosure builder returned by :meth:`ProofCapability.create_request`."""

    @abstractmethod
    def disclose(self, key: str) -> "RequestHandle":
        """Add *key* to the set of disclosed attributes.

        Returns
        -------
        RequestHandle
            ``self``, so calls may be chained.

        Raises
        ------
        UnsupportedAttribute
            If the capability does not recognise *key*. The handle is left
            unchanged in that case.
        """

    @abstractmethod
    def finalize(self) -> FinalizedRequest:
        """Seal the request and return its URL and event stream."""


class ProofCapability(ABC):
    """An initialized connection to the proof system."""

    @abstractmethod
    async def create_request(self, metadata: RequestMetadata) -> RequestHandle:
        """Open a new disclosure request.

        Raises
        ------
        RequestCreationFailed
            If the capability cannot create the request.
        """


# Zero-argument coroutine factory; raises CapabilityUnavailable on failure.
CapabilityFactory = Callable[[], Awaitable[ProofCapability]]
