"""Validation of the first name typed by the requester."""
from __future__ import annotations

import re

# Letters (ASCII and Latin-1 accented), whitespace, hyphen, apostrophe, period.
_NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÿ\s\-'.]+$")


class NameValidationError(ValueError):
    """Raised when a submitted first name is empty or has disallowed characters."""


def validate_first_name(raw: str) -> str:
    """Return *raw* trimmed, or raise :class:`NameValidationError`.

    Examples
    --------
    >>> validate_first_name("  José ")
    'José'
    """
    name = (raw or "").strip()
    if not name:
        raise NameValidationError("Please enter your first name")
    if not _NAME_PATTERN.match(name):
        raise NameValidationError(
            "First name can only contain letters, spaces, hyphens, and apostrophes"
        )
    return name
