"""ResultExtractor — normalize the capability's raw result payload.

A payload maps attribute keys to either a scalar or a nested disclosure
wrapper::

    {"age": 20}
    {"age": {"disclose": {"result": 20}}}
    {"dateOfBirth": "1990-05-05"}

Extraction never raises. Absent or malformed values come back as ``None``
and flow into the verdict as a failed check.
"""
from __future__ import annotations

import datetime
import logging
import math
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

AGE_KEYS: tuple[str, ...] = ("age", "dateOfBirth", "birthDate")
NAME_KEYS: tuple[str, ...] = ("firstname", "firstName", "given_name", "givenName", "name")
STRUCTURED_NAME_FIELDS: tuple[str, ...] = ("first", "given")

_SLASH_DATE_FORMATS: tuple[str, ...] = ("%Y/%m/%d", "%m/%d/%Y")


def unwrap_disclosed(value: Any) -> Any:
    """Return ``value["disclose"]["result"]`` when that shape is present, else *value*."""
    if isinstance(value, Mapping):
        disclose = value.get("disclose")
        if isinstance(disclose, Mapping) and "result" in disclose:
            return disclose["result"]
    return value


def age_on(birth_date: datetime.date, today: datetime.date) -> int:
    """Whole years between *birth_date* and *today*.

    The age drops by one while today's month/day precedes the birth
    month/day. On the birthday itself the new year counts.
    """
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def parse_birth_date(text: str) -> Optional[datetime.date]:
    """Parse an ISO (``YYYY-MM-DD``, optionally with a time part) or slash date."""
    text = text.strip()
    if "-" in text:
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            pass
        # Unpadded month/day, e.g. "1990-5-5".
        try:
            return datetime.datetime.strptime(text.split("T", 1)[0], "%Y-%m-%d").date()
        except ValueError:
            return None
    for fmt in _SLASH_DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def interpret_age(value: Any, today: Optional[datetime.date] = None) -> Optional[int]:
    """Convert one resolved payload value into whole years.

    Parameters
    ----------
    value:
        A number (years), a date string containing ``-`` or ``/``, or a
        numeric string.
    today:
        Reference date for date-of-birth values. Defaults to the local date.

    Returns
    -------
    int or None
        Non-negative whole years, or ``None`` when *value* cannot be read.
    """
    years: Optional[int] = None
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        years = value
    elif isinstance(value, float):
        years = int(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        text = value.strip()
        if "-" in text or "/" in text:
            birth_date = parse_birth_date(text)
            if birth_date is not None:
                years = age_on(birth_date, today or datetime.date.today())
        else:
            try:
                years = int(text)
            except ValueError:
                years = None
    if years is None or years < 0:
        return None
    return years


def extract_age(
    payload: Mapping[str, Any], today: Optional[datetime.date] = None
) -> Optional[int]:
    """Return the holder's age in whole years, or ``None``.

    Keys are checked in the order of :data:`AGE_KEYS`; each value is first
    unwrapped from the ``disclose.result`` wrapper if present. The first
    value that reads as an age wins.
    """
    if not isinstance(payload, Mapping):
        return None
    for key in AGE_KEYS:
        if key not in payload:
            continue
        raw = unwrap_disclosed(payload[key])
        years = interpret_age(raw, today)
        if years is not None:
            return years
        logger.debug("Ignoring unreadable age value under %r: %r", key, raw)
    return None


def _name_from(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        for field_name in STRUCTURED_NAME_FIELDS:
            candidate = value.get(field_name)
            if isinstance(candidate, str) and candidate:
                return candidate
        return None
    if isinstance(value, str) and value:
        return value
    return None


def extract_name(payload: Mapping[str, Any]) -> Optional[str]:
    """Return the disclosed first name, or ``None``.

    Keys are checked in the order of :data:`NAME_KEYS`. Wrapped values are
    unwrapped; a structured name object yields its ``first`` then ``given``
    field. The string is returned as disclosed, without trimming or case
    folding.
    """
    if not isinstance(payload, Mapping):
        return None
    for key in NAME_KEYS:
        if key not in payload:
            continue
        name = _name_from(unwrap_disclosed(payload[key]))
        if name is not None:
            return name
    return None
