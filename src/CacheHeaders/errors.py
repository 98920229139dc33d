"""Error taxonomy for cache header construction and validation.

Responsibilities
----------------
- Define the exceptions raised when callers misuse the directive or time
  APIs (``InvalidDirectiveType``, ``UnknownDirective``,
  ``InvalidDirectiveValue``, ``UnparsableTime``, ``InvalidRelativeSeconds``).
- Keep the offending input on the exception so HTTP layers can render a
  useful message without re-parsing.

Design Notes
------------
- All errors derive from :class:`CacheHeadersError`, itself a ``ValueError``,
  so callers that only care about "bad input" can catch the builtin.
- Header parsing never raises any of these; only explicit API calls do.
"""

from __future__ import annotations

from typing import Any

__all__ = (
    "CacheHeadersError",
    "InvalidDirectiveType",
    "UnknownDirective",
    "UnparsableTime",
    "InvalidDirectiveValue",
    "InvalidRelativeSeconds",
)


class CacheHeadersError(ValueError):
    """Base class for all cache header errors."""


class InvalidDirectiveType(CacheHeadersError):
    """Raised when the public/private discriminator is not ``public`` or ``private``."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f'Invalid cache control type "{value}", valid values are "public" and "private".'
        )
        self.value = value


class UnknownDirective(CacheHeadersError):
    """Raised when an API call names a directive outside the context vocabulary."""

    def __init__(self, name: str, *, context: str | None = None) -> None:
        message = f"Unknown cache control directive: {name}"
        if context:
            message = f"{message} (not allowed in {context} context)"
        super().__init__(message)
        self.name = name
        self.context = context


class InvalidDirectiveValue(CacheHeadersError):
    """Raised when a seconds directive is given a value that is not an integer."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(f"Invalid value for cache control directive {name}: {value!r}")
        self.name = name
        self.value = value


class UnparsableTime(CacheHeadersError):
    """Raised when a value cannot be coerced to a timestamp."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Could not create a valid date from {type(value).__name__}.")
        self.value = value


class InvalidRelativeSeconds(CacheHeadersError):
    """Raised when a relative time is not an integer number of seconds."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Relative time must be an integer number of seconds, got {type(value).__name__}."
        )
        self.value = value
