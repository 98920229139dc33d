"""
Cache Header Helpers

This module bundles the header builders and readers behind a single
:class:`CacheUtil` object. Builders return a new message with one header
replaced (``Cache-Control``, ``Expires``, ``ETag``, ``Last-Modified``);
readers delegate to the freshness and conditional request modules. Defaults
such as the cache type and ``max-age`` used by :meth:`CacheUtil.with_cache`
come from :class:`~CacheHeaders.config.CacheSettings`.

Usage:
    from CacheHeaders.messages import Message
    from CacheHeaders.util import CacheUtil

    util = CacheUtil()
    response = util.with_cache(Message.response(200), "public", 86400)
    response = util.with_etag(response, "v1")
    if util.is_not_modified(request, response):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from CacheHeaders import conditional_requests, freshness
from CacheHeaders.cache_control import get_cache_control, serialize_cache_control
from CacheHeaders.config import DEFAULT_SETTINGS, CacheSettings
from CacheHeaders.directives import CacheContext, DirectiveSet
from CacheHeaders.messages import HttpMessage, as_message
from CacheHeaders.timeutil import format_http_date

__all__ = ("CacheUtil",)

LOGGER = logging.getLogger(__name__)


class CacheUtil:
    """Build and evaluate caching headers on immutable HTTP messages.

    Attributes:
        settings: Defaults and cacheability rules used by the helpers.

    Examples:
        >>> from CacheHeaders.messages import Message
        >>> util = CacheUtil()
        >>> util.with_cache(Message.response()).header("Cache-Control")
        'private, max-age=600'
        >>> util.with_cache_prevention(Message.response()).header("Cache-Control")
        'no-cache, no-store, must-revalidate'
    """

    def __init__(self, settings: Optional[CacheSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def with_cache(
        self,
        response: Any,
        cache_type: Optional[str] = None,
        max_age: Optional[int] = None,
    ) -> HttpMessage:
        """Enable caching for ``response``.

        Args:
            response: Response to add the header to
            cache_type: ``public`` lets shared caches store the response,
                ``private`` does not (settings default: ``private``)
            max_age: Seconds to cache (settings default: 600)

        Raises:
            InvalidDirectiveType: If ``cache_type`` is neither public nor private
        """
        directives = {
            "type": self.settings.default_cache_type if cache_type is None else cache_type,
            "max-age": self.settings.default_max_age if max_age is None else max_age,
        }
        return self.with_cache_control(response, directives)

    def with_cache_prevention(self, response: Any) -> HttpMessage:
        """Prevent caching with ``no-cache, no-store, must-revalidate``."""
        return self.with_cache_control(
            response, {"no-cache": True, "no-store": True, "must-revalidate": True}
        )

    def with_expires(self, response: Any, time: Any, relative: bool = False) -> HttpMessage:
        """Set ``Expires``; prefer ``with_cache`` unless a fixed instant is known.

        Raises:
            UnparsableTime: If ``time`` cannot be coerced
            InvalidRelativeSeconds: If ``relative`` is set and ``time`` is not an int
        """
        return as_message(response).with_header("Expires", format_http_date(time, relative))

    def with_etag(self, response: Any, etag: str, weak: bool = False) -> HttpMessage:
        """Set ``ETag``; use a weak tag for semantically equivalent representations."""
        return as_message(response).with_header(
            "ETag", conditional_requests.format_etag(etag, weak)
        )

    def with_last_modified(
        self, response: Any, time: Any, relative: bool = False
    ) -> HttpMessage:
        """Set ``Last-Modified`` from a timestamp, date string or datetime."""
        return as_message(response).with_header("Last-Modified", format_http_date(time, relative))

    def with_cache_control(
        self,
        message: Any,
        directives: Union[DirectiveSet, Mapping[str, Any]],
        context: CacheContext = CacheContext.RESPONSE,
    ) -> HttpMessage:
        """Replace ``Cache-Control`` on ``message``.

        Args:
            message: Request or response
            directives: A :class:`DirectiveSet`, or a mapping such as
                ``{"type": "public", "max-age": 600}`` validated strictly
            context: Vocabulary used to validate a mapping

        Raises:
            InvalidDirectiveType: If the mapping's ``type`` is invalid
            UnknownDirective: If the mapping names an unknown directive
        """
        if not isinstance(directives, DirectiveSet):
            directives = DirectiveSet.from_mapping(directives, context)
        value = serialize_cache_control(directives)
        LOGGER.debug("Setting Cache-Control: %s", value)
        return as_message(message).with_header("Cache-Control", value)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def get_cache_control(
        self, message: Any, context: CacheContext = CacheContext.RESPONSE
    ) -> DirectiveSet:
        return get_cache_control(message, context)

    def get_lifetime(self, response: Any, now: Any = None) -> Optional[int]:
        return freshness.get_lifetime(response, now)

    def get_age(self, response: Any, now: Any = None) -> Optional[int]:
        return freshness.get_age(response, now)

    def is_fresh(self, response: Any, now: Any = None) -> Optional[bool]:
        return freshness.is_fresh(response, now)

    def is_cacheable(self, response: Any) -> bool:
        return freshness.is_cacheable(response, self.settings)

    def has_state_validator(self, request: Any) -> bool:
        return conditional_requests.has_state_validator(request)

    def has_current_state(
        self, request: Any, current_etag: Optional[str], current_last_modified: Any = None
    ) -> bool:
        return conditional_requests.has_current_state(
            request, current_etag, current_last_modified, self.settings
        )

    def is_not_modified(self, request: Any, response: Any) -> bool:
        return conditional_requests.is_not_modified(request, response, self.settings)
