"""Freshness lifetime, age and cacheability of responses (RFC 7234 §4.2).

Responsibilities
----------------
- Derive the freshness lifetime of a response from ``s-maxage``, ``max-age``
  or ``Expires``/``Date``.
- Derive the current age from ``Age`` or ``Date``.
- Decide whether a response is fresh, storable, or still servable inside a
  ``stale-while-revalidate``/``stale-if-error`` window.

Design Notes
------------
- Freshness is a strict inequality: a zero lifetime is never fresh, even at
  age zero.
- ``s-maxage`` wins over ``max-age``; both win over ``Expires``.
- An unparsable ``Expires`` means "already expired" (lifetime ``0``); an
  unparsable ``Date`` is replaced by the evaluation instant.
- ``now`` can be injected on every call for deterministic evaluation.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from CacheHeaders.cache_control import parse_cache_control
from CacheHeaders.config import DEFAULT_SETTINGS, CacheSettings
from CacheHeaders.directives import CacheContext, DirectiveSet
from CacheHeaders.messages import HttpMessage, as_message, header_or_none
from CacheHeaders.timeutil import parse_http_date, to_datetime, utcnow

__all__ = (
    "get_lifetime",
    "get_age",
    "is_fresh",
    "is_cacheable",
    "can_serve_stale",
)

LOGGER = logging.getLogger(__name__)


def _evaluation_instant(now: Any) -> datetime:
    return utcnow() if now is None else to_datetime(now)


def _response_directives(message: HttpMessage) -> Optional[DirectiveSet]:
    if not message.has_header("Cache-Control"):
        return None
    return parse_cache_control(message.header("Cache-Control"), CacheContext.RESPONSE)


def _seconds_between(later: datetime, earlier: datetime) -> int:
    return max(0, int((later - earlier).total_seconds()))


def get_lifetime(response: Any, now: Any = None) -> Optional[int]:
    """Return how many seconds ``response`` is meant to stay fresh.

    Args:
        response: Response message (``Message`` or ``httpx.Response``).
        now: Evaluation instant used when the response carries no ``Date``.

    Returns:
        Lifetime in seconds, or ``None`` when the response has no
        ``Cache-Control`` lifetime and no ``Expires`` header.

    Examples:
        >>> from CacheHeaders.messages import Message
        >>> get_lifetime(Message.response(200, {"Cache-Control": "max-age=60, s-maxage=200"}))
        200
    """
    message = as_message(response)

    directives = _response_directives(message)
    if directives is not None:
        if directives.shared_max_age is not None:
            return directives.shared_max_age
        if directives.max_age is not None:
            return directives.max_age

    expires = header_or_none(message, "Expires")
    if expires is None:
        return None

    expires_at = parse_http_date(expires)
    if expires_at is None:
        LOGGER.debug("Treating unparsable Expires as already expired: %r", expires)
        return 0

    generated_at = parse_http_date(header_or_none(message, "Date"))
    if generated_at is None:
        generated_at = _evaluation_instant(now)
    return _seconds_between(expires_at, generated_at)


def get_age(response: Any, now: Any = None) -> Optional[int]:
    """Return how many seconds ago ``response`` was generated.

    Uses the ``Age`` header when it holds an integer, otherwise the distance
    between ``now`` and ``Date``; ``None`` when neither is available.
    """
    message = as_message(response)

    age = header_or_none(message, "Age")
    if age is not None:
        try:
            return max(0, int(age))
        except ValueError:
            LOGGER.debug("Ignoring non-integer Age header: %r", age)

    generated_at = parse_http_date(header_or_none(message, "Date"))
    if generated_at is None:
        return None
    return _seconds_between(_evaluation_instant(now), generated_at)


def is_fresh(response: Any, now: Any = None) -> Optional[bool]:
    """Return ``lifetime > age``, or ``None`` when the lifetime is unknown.

    A missing age counts as zero, so ``max-age=0`` is never fresh.
    """
    instant = _evaluation_instant(now)
    lifetime = get_lifetime(response, instant)
    if lifetime is None:
        return None
    age = get_age(response, instant) or 0
    return lifetime > age


def is_cacheable(response: Any, settings: Optional[CacheSettings] = None) -> bool:
    """Return whether ``response`` may be stored at all.

    The status must be cacheable and ``Cache-Control`` must not carry
    ``no-store`` or ``private``. Freshness is not consulted.
    """
    settings = settings or DEFAULT_SETTINGS
    message = as_message(response)

    if message.status_code not in settings.cacheable_statuses:
        return False

    directives = _response_directives(message)
    if directives is None:
        return True
    return not (directives.no_store or directives.is_private)


def can_serve_stale(response: Any, is_error: bool = False, now: Any = None) -> bool:
    """Return whether ``response`` may be served inside its stale window.

    The window is ``stale-while-revalidate`` or, when ``is_error`` is set,
    ``stale-if-error``. ``no-store``, ``no-cache`` and ``must-revalidate``
    forbid serving without validation.
    """
    message = as_message(response)
    directives = _response_directives(message) or DirectiveSet.for_response()

    if directives.no_store or directives.no_cache or directives.must_revalidate:
        return False

    instant = _evaluation_instant(now)
    lifetime = get_lifetime(message, instant)
    if lifetime is None:
        return False

    window = directives.stale_if_error if is_error else directives.stale_while_revalidate
    if window is None:
        return False

    age = get_age(message, instant) or 0
    return age < lifetime + window
