"""Attribute key resolution across capability schema versions.

Different capability releases name the same credential field differently
(``firstname`` vs ``given_name`` and so on). :class:`AttributeResolver`
walks an ordered candidate list and returns the first key the capability
accepts, so callers never see the naming variance.

Example
-------
::

    resolver = AttributeResolver()
    key = resolver.resolve("first name", handle.disclose)
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from zkpass_verifier.capability import UnsupportedAttribute
from zkpass_verifier.disclosure.kinds import AGE_ATTRIBUTE, FIRST_NAME_ATTRIBUTE

logger = logging.getLogger(__name__)

# Probe signature: attempt to disclose a key, raising UnsupportedAttribute
# when the capability rejects it.  The return value is ignored.
DiscloseProbe = Callable[[str], object]

# Candidate keys per logical attribute, in priority order. The first-name
# order follows the key names seen across capability releases.
CANDIDATE_KEYS: dict[str, tuple[str, ...]] = {
    AGE_ATTRIBUTE: ("age",),
    FIRST_NAME_ATTRIBUTE: ("firstname", "firstName", "given_name", "givenName"),
}


class NoCompatibleKey(LookupError):
    """Raised when the capability rejects every candidate key for an attribute."""

    def __init__(self, attribute: str, tried: Sequence[str]) -> None:
        super().__init__(
            f"No compatible key for attribute {attribute!r}; "
            f"capability rejected {', '.join(tried) or 'no candidates'}"
        )
        self.attribute = attribute
        self.tried: tuple[str, ...] = tuple(tried)


class AttributeResolver:
    """Resolves a logical attribute to the key the capability accepts.

    Parameters
    ----------
    candidates:
        Optional override of the logical-attribute → candidate-key table.
        Defaults to :data:`CANDIDATE_KEYS`.
    """

    def __init__(self, candidates: Optional[dict[str, Sequence[str]]] = None) -> None:
        table = CANDIDATE_KEYS if candidates is None else candidates
        self._candidates: dict[str, tuple[str, ...]] = {
            name: tuple(keys) for name, keys in table.items()
        }

    def candidates_for(self, attribute: str) -> tuple[str, ...]:
        """Return the candidate keys for *attribute* in priority order.

        Raises
        ------
        KeyError
            If *attribute* has no candidate list.
        """
        return self._candidates[attribute]

    def resolve(
        self,
        attribute: str,
        probe: DiscloseProbe,
        candidates: Optional[Sequence[str]] = None,
    ) -> str:
        """Return the first candidate key accepted by *probe*.

        Parameters
        ----------
        attribute:
            Logical attribute name, used for the candidate lookup and for
            error reporting.
        probe:
            Callable that attempts disclosure of a key and raises
            :class:`~zkpass_verifier.capability.UnsupportedAttribute` on
            rejection.
        candidates:
            Explicit candidate list; defaults to :meth:`candidates_for`.

        Returns
        -------
        str
            The accepted key.

        Raises
        ------
        NoCompatibleKey
            If every candidate is rejected.
        """
        keys = tuple(candidates) if candidates is not None else self.candidates_for(attribute)
        tried: list[str] = []
        for key in keys:
            tried.append(key)
            try:
                probe(key)
            except UnsupportedAttribute:
                logger.debug("Capability rejected key %r for %s", key, attribute)
                continue
            logger.debug("Resolved %s to key %r", attribute, key)
            return key
        raise NoCompatibleKey(attribute, tried)


def resolve(
    attribute: str,
    candidates: Sequence[str],
    probe: DiscloseProbe,
) -> str:
    """Module-level convenience wrapper around :meth:`AttributeResolver.resolve`."""
    return AttributeResolver().resolve(attribute, probe, candidates=candidates)
