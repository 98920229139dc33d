# === NAVMAP v1 ===
# {
#   "module": "CacheHeaders.cache_control",
#   "purpose": "Cache-Control header parsing and serialization.",
#   "sections": [
#     {
#       "id": "parse-cache-control",
#       "name": "parse_cache_control",
#       "anchor": "function-parse-cache-control",
#       "kind": "function"
#     },
#     {
#       "id": "serialize-cache-control",
#       "name": "serialize_cache_control",
#       "anchor": "function-serialize-cache-control",
#       "kind": "function"
#     },
#     {
#       "id": "get-cache-control",
#       "name": "get_cache_control",
#       "anchor": "function-get-cache-control",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Cache-Control header parsing and serialization.

Responsibilities
----------------
- Turn a ``Cache-Control`` header value into a :class:`DirectiveSet` for the
  request or response context.
- Render a :class:`DirectiveSet` back into a header value.
- Read the ``Cache-Control`` header straight off a message.

Design Notes
------------
- Parsing never raises: unknown flags are dropped, unknown valued tokens are
  kept as string extensions, malformed or missing integers become ``0`` with
  a debug log.
- Tokens are split naively on ``,``; commas inside quoted extension values
  are not honoured.
- Directive names are case-insensitive and stored lower-cased.
- Serialization preserves insertion order: flags bare, seconds as ``name=N``,
  extensions as ``name="value"``, joined by ``", "``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from CacheHeaders.directives import CacheContext, DirectiveSet
from CacheHeaders.messages import as_message

__all__ = (
    "parse_cache_control",
    "parse_request_cache_control",
    "parse_response_cache_control",
    "serialize_cache_control",
    "get_cache_control",
)

LOGGER = logging.getLogger(__name__)

_SECONDS_PATTERN = re.compile(r"[+-]?\d+")


def _parse_seconds(name: str, raw: str) -> int:
    match = _SECONDS_PATTERN.match(raw.strip('" '))
    if match is None:
        LOGGER.debug("Coercing invalid %s value to 0: %r", name, raw)
        return 0
    return max(0, int(match.group(0)))


def parse_cache_control(
    value: Optional[str],
    context: CacheContext = CacheContext.RESPONSE,
) -> DirectiveSet:
    """Parse a ``Cache-Control`` header value.

    Args:
        value: Raw header value (``None`` or empty yields an empty set).
        context: Which directive vocabulary to recognise.

    Returns:
        DirectiveSet holding the recognised directives and extensions.

    Examples:
        >>> cc = parse_cache_control("public, max-age=600, foo")
        >>> cc.is_public, cc.max_age, cc.names()
        (True, 600, ('public', 'max-age'))
        >>> parse_cache_control('community="UCI"').extension("community")
        'UCI'
    """
    directives = DirectiveSet(context=context)
    if not value:
        return directives

    for token in value.split(","):
        name, has_value, raw = token.partition("=")
        name = name.strip().lower()
        if not name:
            continue

        directive = context.recognizes(name)
        if directive is None:
            if has_value:
                directives = directives.with_extension(name, raw.strip())
            # Unknown flags are ignored.
            continue

        if directive.is_flag:
            directives = directives.with_directive(directive, True)
            continue

        directives = directives.with_directive(directive, _parse_seconds(name, raw))

    return directives


def parse_request_cache_control(value: Optional[str]) -> DirectiveSet:
    return parse_cache_control(value, CacheContext.REQUEST)


def parse_response_cache_control(value: Optional[str]) -> DirectiveSet:
    return parse_cache_control(value, CacheContext.RESPONSE)


def serialize_cache_control(directives: DirectiveSet) -> str:
    """Render ``directives`` as a header value (``""`` for an empty set).

    Examples:
        >>> cc = DirectiveSet.for_response().with_no_cache().with_max_age(5)
        >>> serialize_cache_control(cc.with_extension("foo", "bar"))
        'no-cache, max-age=5, foo="bar"'
    """
    parts = []
    for name, value in directives:
        if value is True:
            parts.append(name)
        elif isinstance(value, str):
            parts.append(f'{name}="{value}"')
        else:
            parts.append(f"{name}={value}")
    return ", ".join(parts)


def get_cache_control(
    message: Any,
    context: CacheContext = CacheContext.RESPONSE,
) -> DirectiveSet:
    """Parse the ``Cache-Control`` header carried by ``message``."""
    return parse_cache_control(as_message(message).header("Cache-Control"), context)
