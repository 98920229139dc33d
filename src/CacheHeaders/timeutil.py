"""Timestamp coercion and HTTP-date formatting.

Responsibilities
----------------
- Coerce Unix timestamps, ``datetime``/``date`` objects and date strings into
  timezone-aware UTC datetimes with one-second resolution.
- Render instants as RFC 7231 IMF-fixdate strings
  (``Mon, 10 Aug 2015 18:30:12 GMT``) for ``Expires``/``Last-Modified``.
- Offer a lenient parser for header input that returns ``None`` rather than
  raising, so freshness and validation code can degrade gracefully.

Design Notes
------------
- Naive datetimes are interpreted as UTC.
- ``email.utils`` handles the three HTTP-date forms (IMF-fixdate, RFC 850,
  asctime); anything else is tried as ISO 8601.
- Formatting goes through :func:`email.utils.format_datetime` so weekday and
  month names never depend on the process locale.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Optional, Union

from CacheHeaders.errors import InvalidRelativeSeconds, UnparsableTime

__all__ = (
    "TimeValue",
    "utcnow",
    "to_datetime",
    "to_timestamp",
    "format_http_date",
    "parse_http_date",
)

LOGGER = logging.getLogger(__name__)

TimeValue = Union[int, float, str, datetime, date]


def utcnow() -> datetime:
    """Return the current instant in UTC, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def _normalize(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)


def _from_string(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise UnparsableTime(value)

    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is not None:
        return parsed

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError as exc:
        raise UnparsableTime(value) from exc


def to_datetime(value: Any) -> datetime:
    """Coerce ``value`` into an aware UTC datetime.

    Args:
        value: Unix timestamp (``int``/``float``), ``datetime``, ``date`` or a
            date string (HTTP-date or ISO 8601).

    Returns:
        Timezone-aware UTC datetime without microseconds.

    Raises:
        UnparsableTime: If the value has an unsupported type or cannot be parsed.

    Examples:
        >>> to_datetime("Mon, 10 Aug 2015 18:30:12 GMT").isoformat()
        '2015-08-10T18:30:12+00:00'
        >>> to_datetime(1439231412).isoformat()
        '2015-08-10T18:30:12+00:00'
    """
    if isinstance(value, bool):
        raise UnparsableTime(value)

    if isinstance(value, datetime):
        return _normalize(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise UnparsableTime(value) from exc

    if isinstance(value, str):
        return _normalize(_from_string(value))

    raise UnparsableTime(value)


def to_timestamp(value: Any) -> int:
    """Return the Unix timestamp (seconds) of ``value``."""
    return int(to_datetime(value).timestamp())


def format_http_date(value: Any, relative: bool = False, now: Any = None) -> str:
    """Format a time value as an HTTP-date header string.

    Args:
        value: Absolute time (see :func:`to_datetime`) or, when ``relative``
            is set, an integer number of seconds from ``now``.
        relative: Interpret ``value`` as seconds relative to ``now``.
        now: Reference instant for relative values (defaults to the clock).

    Returns:
        IMF-fixdate string such as ``Mon, 10 Aug 2015 18:30:12 GMT``.

    Raises:
        UnparsableTime: If an absolute value cannot be coerced.
        InvalidRelativeSeconds: If ``relative`` is set and ``value`` is not an int.
    """
    if relative:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRelativeSeconds(value)
        reference = utcnow() if now is None else to_datetime(now)
        instant = reference + timedelta(seconds=value)
    else:
        instant = to_datetime(value)

    return format_datetime(instant, usegmt=True)


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a header date leniently, returning ``None`` when it is unusable."""
    if not value:
        return None
    try:
        return to_datetime(value)
    except UnparsableTime:
        LOGGER.debug("Ignoring unparsable HTTP date: %r", value)
        return None
