"""Public API for building and evaluating HTTP caching headers.

This facade exposes the ``Cache-Control`` directive model and codec, the
freshness calculations of RFC 7234 and the conditional request checks of
RFC 7232, all operating on immutable message values.
"""

from __future__ import annotations

from .cache_control import (
    get_cache_control,
    parse_cache_control,
    parse_request_cache_control,
    parse_response_cache_control,
    serialize_cache_control,
)
from .conditional_requests import (
    ETag,
    format_etag,
    has_current_state,
    has_state_validator,
    is_not_modified,
    matches_etag,
    matches_modified,
    with_revalidation_headers,
)
from .config import DEFAULT_SETTINGS, CacheSettings, load_settings
from .directives import CacheContext, Directive, DirectiveSet
from .errors import (
    CacheHeadersError,
    InvalidDirectiveType,
    InvalidDirectiveValue,
    InvalidRelativeSeconds,
    UnknownDirective,
    UnparsableTime,
)
from .freshness import can_serve_stale, get_age, get_lifetime, is_cacheable, is_fresh
from .messages import HttpMessage, Message, as_message
from .timeutil import format_http_date, parse_http_date, to_datetime, to_timestamp
from .util import CacheUtil

__version__ = "0.1.0"

__all__ = [
    "CacheContext",
    "CacheHeadersError",
    "CacheSettings",
    "CacheUtil",
    "DEFAULT_SETTINGS",
    "Directive",
    "DirectiveSet",
    "ETag",
    "HttpMessage",
    "InvalidDirectiveType",
    "InvalidDirectiveValue",
    "InvalidRelativeSeconds",
    "Message",
    "UnknownDirective",
    "UnparsableTime",
    "as_message",
    "can_serve_stale",
    "format_etag",
    "format_http_date",
    "get_age",
    "get_cache_control",
    "get_lifetime",
    "has_current_state",
    "has_state_validator",
    "is_cacheable",
    "is_fresh",
    "is_not_modified",
    "load_settings",
    "matches_etag",
    "matches_modified",
    "parse_cache_control",
    "parse_http_date",
    "parse_request_cache_control",
    "parse_response_cache_control",
    "serialize_cache_control",
    "to_datetime",
    "to_timestamp",
    "with_revalidation_headers",
]
