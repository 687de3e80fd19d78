"""DisclosureSpec and RequestBuilder — what a verification request asks for."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from zkpass_verifier.capability import RequestMetadata
from zkpass_verifier.disclosure.kinds import VerificationKind, logical_attributes, metadata_for
from zkpass_verifier.disclosure.resolver import AttributeResolver, DiscloseProbe


@dataclass(frozen=True)
class DisclosureSpec:
    """The attribute keys a request discloses, with its purpose and scope.

    Parameters
    ----------
    kind:
        The verification kind this spec was built for.
    keys:
        Accepted attribute keys in request order. Never empty.
    purpose:
        Human-readable purpose string.
    scope:
        Scope string from the kind metadata table.
    """

    kind: VerificationKind
    keys: tuple[str, ...]
    purpose: str
    scope: str

    def __post_init__(self) -> None:
        if not self.keys:
            raise ValueError("DisclosureSpec requires at least one attribute key")

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary."""
        return {
            "kind": self.kind.value,
            "keys": list(self.keys),
            "purpose": self.purpose,
            "scope": self.scope,
        }


class RequestBuilder:
    """Builds a :class:`DisclosureSpec` for a :class:`VerificationKind`.

    Each logical attribute the kind needs is resolved through an
    :class:`~zkpass_verifier.disclosure.resolver.AttributeResolver`, in
    request order (age first, then first name). If any attribute fails to
    resolve the whole build fails with
    :class:`~zkpass_verifier.disclosure.resolver.NoCompatibleKey`.

    Parameters
    ----------
    resolver:
        Resolver to use. A default one is created when omitted.
    """

    def __init__(self, resolver: Optional[AttributeResolver] = None) -> None:
        self._resolver = resolver or AttributeResolver()

    def build(self, kind: VerificationKind, probe: DiscloseProbe) -> DisclosureSpec:
        """Resolve every attribute required by *kind* using *probe*.

        Parameters
        ----------
        kind:
            What to verify.
        probe:
            Disclosure probe, normally ``RequestHandle.disclose``.

        Returns
        -------
        DisclosureSpec

        Raises
        ------
        NoCompatibleKey
            If any required attribute has no accepted key.
        """
        keys = tuple(
            self._resolver.resolve(attribute, probe) for attribute in logical_attributes(kind)
        )
        meta = metadata_for(kind)
        return DisclosureSpec(kind=kind, keys=keys, purpose=meta.purpose, scope=meta.scope)

    @staticmethod
    def request_metadata(
        kind: VerificationKind,
        display_name: str,
        logo_ref: str = "",
        dev_mode: bool = False,
    ) -> RequestMetadata:
        """Return the :class:`RequestMetadata` sent to the capability for *kind*."""
        meta = metadata_for(kind)
        return RequestMetadata(
            purpose=meta.purpose,
            scope=meta.scope,
            display_name=display_name,
            logo_ref=logo_ref,
            dev_mode=dev_mode,
        )
