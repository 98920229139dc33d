"""RFC 7232 conditional request handling (ETag and Last-Modified).

Responsibilities
----------------
- Model entity tags (:class:`ETag`) and format them for the ``ETag`` header
- Compare a current entity tag against ``If-Match``/``If-None-Match`` lists
  using strong or weak comparison
- Compare a current modification time against ``If-Modified-Since`` /
  ``If-Unmodified-Since``
- Decide whether preconditions hold for a request and whether a response can
  be answered with ``304 Not Modified``
- Build revalidation headers from a cached response

Design Notes
------------
- Every check is a pure function of its inputs
- ``If-Match`` takes precedence over ``If-Unmodified-Since``
- Weak comparison (RFC 7232 §2.3.2) accepts the same opaque tag with the weak
  marker on either side; strong comparison requires both tags to be strong
- An unparsable request date never matches
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from CacheHeaders.config import DEFAULT_SETTINGS, CacheSettings
from CacheHeaders.messages import as_message, header_or_none
from CacheHeaders.timeutil import parse_http_date, to_datetime

__all__ = (
    "ETag",
    "format_etag",
    "has_state_validator",
    "matches_etag",
    "matches_modified",
    "has_current_state",
    "is_not_modified",
    "with_revalidation_headers",
)

LOGGER = logging.getLogger(__name__)

WEAK_PREFIX = "W/"


@dataclass(frozen=True)
class ETag:
    """Entity tag value.

    Attributes:
        opaque: Tag content without quotes or weak marker
        weak: True for a weak validator

    Examples:
        >>> str(ETag("abc", weak=True))
        'W/"abc"'
        >>> ETag.parse('W/"abc"').weak_equals(ETag.parse('"abc"'))
        True
        >>> ETag.parse('W/"abc"').strong_equals(ETag.parse('"abc"'))
        False
    """

    opaque: str
    weak: bool = False

    @classmethod
    def parse(cls, value: str) -> "ETag":
        text = value.strip()
        weak = text.startswith(WEAK_PREFIX)
        if weak:
            text = text[len(WEAK_PREFIX) :]
        return cls(opaque=text.strip('"'), weak=weak)

    def __str__(self) -> str:
        quoted = f'"{self.opaque}"'
        return WEAK_PREFIX + quoted if self.weak else quoted

    def strong_equals(self, other: "ETag") -> bool:
        return not self.weak and not other.weak and self.opaque == other.opaque

    def weak_equals(self, other: "ETag") -> bool:
        return self.opaque == other.opaque


def format_etag(value: str, weak: bool = False) -> str:
    """Quote ``value`` for the ``ETag`` header, trimming existing quotes.

    Examples:
        >>> format_etag("foo")
        '"foo"'
        >>> format_etag('"foo"', weak=True)
        'W/"foo"'
    """
    return str(ETag(opaque=value.strip('"'), weak=weak))


def has_state_validator(request: Any) -> bool:
    """Return whether the request carries ``If-Match`` or ``If-Unmodified-Since``.

    HTTP layers use this to require preconditions on unsafe methods.
    """
    message = as_message(request)
    return message.has_header("If-Match") or message.has_header("If-Unmodified-Since")


def matches_etag(current: Optional[str], candidates: str, weak_allowed: bool) -> bool:
    """Return whether ``current`` matches an ``If-Match``/``If-None-Match`` value.

    Args:
        current: Entity tag of the current representation (quoted or not,
            optionally with the ``W/`` marker)
        candidates: Raw header value; ``*`` or a comma separated tag list
        weak_allowed: Use weak comparison instead of strong comparison

    Returns:
        True on a match

    Examples:
        >>> matches_etag("foo", "*", False)
        True
        >>> matches_etag('W/"foo"', '"foo"', True)
        True
        >>> matches_etag('W/"foo"', '"foo"', False)
        False
    """
    current = (current or "").strip()

    if candidates.strip() == "*":
        return bool(current)

    tags = [candidate.strip() for candidate in candidates.split(",")]

    if current.startswith(WEAK_PREFIX):
        if not weak_allowed:
            return False
        normalized = WEAK_PREFIX + '"' + current[len(WEAK_PREFIX) :].strip('"') + '"'
        flipped = normalized[len(WEAK_PREFIX) :]
    else:
        normalized = '"' + current.strip('"') + '"'
        flipped = WEAK_PREFIX + normalized

    if normalized in tags:
        return True

    return weak_allowed and flipped in tags


def matches_modified(current_modified: Any, header_date: Optional[str]) -> bool:
    """Return whether ``current_modified`` is not later than ``header_date``.

    Args:
        current_modified: Modification time of the current representation
            (timestamp, datetime or date string); ``None`` never matches
        header_date: ``If-Modified-Since``/``If-Unmodified-Since`` value

    Raises:
        UnparsableTime: If ``current_modified`` is given but cannot be coerced
    """
    if current_modified is None or current_modified == "":
        return False

    current_instant = to_datetime(current_modified)
    header_instant = parse_http_date(header_date)
    if header_instant is None:
        return False

    return current_instant <= header_instant


def has_current_state(
    request: Any,
    current_etag: Optional[str],
    current_last_modified: Any = None,
    settings: Optional[CacheSettings] = None,
) -> bool:
    """Return whether the request's preconditions hold for the current state.

    ``If-Match`` is evaluated with strong comparison and takes precedence
    over ``If-Unmodified-Since``; without either header the state counts as
    current. For unsafe methods a matching ``If-None-Match`` (weak
    comparison) means the client's assumption is wrong, so the state is
    reported as not current.
    """
    safe_methods = (settings or DEFAULT_SETTINGS).safe_methods
    message = as_message(request)

    if_match = header_or_none(message, "If-Match")
    if_unmodified_since = header_or_none(message, "If-Unmodified-Since")
    if if_match is not None:
        result = matches_etag(current_etag, if_match, False)
    elif if_unmodified_since is not None:
        result = matches_modified(current_last_modified, if_unmodified_since)
    else:
        result = True

    if not result or message.method in safe_methods:
        return result

    if_none_match = header_or_none(message, "If-None-Match")
    if if_none_match is not None and matches_etag(current_etag, if_none_match, True):
        return False

    return True


def is_not_modified(
    request: Any,
    response: Any,
    settings: Optional[CacheSettings] = None,
) -> bool:
    """Return whether ``response`` may be replaced by ``304 Not Modified``.

    ``If-None-Match`` against the response ``ETag`` wins when both exist;
    otherwise safe methods compare ``Last-Modified`` with
    ``If-Modified-Since`` and unsafe methods never qualify.
    """
    safe_methods = (settings or DEFAULT_SETTINGS).safe_methods
    request_message = as_message(request)
    response_message = as_message(response)

    etag = header_or_none(response_message, "ETag")
    if_none_match = header_or_none(request_message, "If-None-Match")
    if etag is not None and if_none_match is not None:
        return matches_etag(etag, if_none_match, True)

    if request_message.method not in safe_methods:
        return False

    return matches_modified(
        header_or_none(response_message, "Last-Modified"),
        header_or_none(request_message, "If-Modified-Since"),
    )


def with_revalidation_headers(request: Any, cached_response: Any) -> Any:
    """Return ``request`` with validators taken from a cached response.

    Adds ``If-None-Match`` from ``ETag`` and ``If-Modified-Since`` from
    ``Last-Modified`` when the cached response carries them; the origin
    decides which one to honour.
    """
    message = as_message(request)
    cached = as_message(cached_response)

    etag = header_or_none(cached, "ETag")
    if etag is not None:
        message = message.with_header("If-None-Match", etag)

    last_modified = header_or_none(cached, "Last-Modified")
    if last_modified is not None:
        message = message.with_header("If-Modified-Since", last_modified)

    LOGGER.debug(
        "Prepared revalidation request (etag=%s, last_modified=%s)",
        etag is not None,
        last_modified is not None,
    )
    return message
