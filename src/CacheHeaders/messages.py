"""Immutable HTTP message values consumed by the cache header helpers.

Responsibilities
----------------
- Describe the small message contract the caching code relies on
  (:class:`HttpMessage`): combined header lookup, presence test, copy-on-write
  header replacement, status code and request method.
- Provide :class:`Message`, a frozen implementation of that contract backed by
  :class:`httpx.Headers` for case-insensitive, multi-value header semantics.
- Adapt ``httpx.Request``/``httpx.Response`` objects so callers that already
  hold HTTPX messages can pass them straight in.

Design Notes
------------
- Headers are stored as a tuple of ``(name, value)`` pairs; every mutator
  returns a new :class:`Message` and the original is never touched.
- Multiple occurrences of a header are combined with ``", "`` exactly as
  :meth:`httpx.Headers.get` does.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

import httpx

__all__ = (
    "HttpMessage",
    "Message",
    "as_message",
    "header_or_none",
)

HeaderPairs = Tuple[Tuple[str, str], ...]
HeaderInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], httpx.Headers, None]


@runtime_checkable
class HttpMessage(Protocol):
    """Message contract required by the freshness and validation helpers."""

    @property
    def status_code(self) -> int: ...

    @property
    def method(self) -> str: ...

    def header(self, name: str) -> str: ...

    def has_header(self, name: str) -> bool: ...

    def with_header(self, name: str, value: str) -> "HttpMessage": ...


def _to_pairs(headers: HeaderInput) -> HeaderPairs:
    if headers is None:
        return ()
    if isinstance(headers, httpx.Headers):
        encoding = headers.encoding
        return tuple((key.decode(encoding), value.decode(encoding)) for key, value in headers.raw)
    if isinstance(headers, Mapping):
        headers = headers.items()
    return tuple((str(key), str(value)) for key, value in headers)


@dataclass(frozen=True)
class Message:
    """Frozen request/response value with copy-on-write header updates.

    Attributes:
        headers: Header ``(name, value)`` pairs in insertion order.
        method: Request method (upper-cased); responses default to ``GET``.
        status_code: Response status; requests default to ``200``.

    Examples:
        >>> response = Message.response(200, {"Cache-Control": "max-age=60"})
        >>> response.header("cache-control")
        'max-age=60'
        >>> response.with_header("ETag", '"abc"').has_header("etag")
        True
        >>> response.has_header("etag")
        False
    """

    headers: HeaderPairs = ()
    method: str = "GET"
    status_code: int = 200

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _to_pairs(self.headers))
        object.__setattr__(self, "method", self.method.upper())

    @classmethod
    def request(cls, method: str = "GET", headers: HeaderInput = None) -> "Message":
        """Build a request message."""
        return cls(headers=headers, method=method)

    @classmethod
    def response(cls, status_code: int = 200, headers: HeaderInput = None) -> "Message":
        """Build a response message."""
        return cls(headers=headers, status_code=status_code)

    @classmethod
    def from_httpx(cls, message: Union[httpx.Request, httpx.Response]) -> "Message":
        """Snapshot an HTTPX request or response into an immutable message."""
        if isinstance(message, httpx.Request):
            return cls.request(message.method, message.headers)
        if isinstance(message, httpx.Response):
            try:
                method = message.request.method
            except RuntimeError:
                # Responses built without a request have no method to report.
                method = "GET"
            return cls(
                headers=_to_pairs(message.headers),
                method=method,
                status_code=message.status_code,
            )
        raise TypeError(f"Unsupported HTTPX message type: {type(message).__name__}")

    def to_httpx_headers(self) -> httpx.Headers:
        """Return a fresh :class:`httpx.Headers` copy of the header pairs."""
        return httpx.Headers(list(self.headers))

    def header(self, name: str) -> str:
        """Return the combined header value, or ``""`` when absent."""
        return self.to_httpx_headers().get(name, "")

    def has_header(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered for key, _ in self.headers)

    def with_header(self, name: str, value: str) -> "Message":
        """Return a copy where ``name`` is replaced by a single ``value``."""
        lowered = name.lower()
        pairs = tuple((key, val) for key, val in self.headers if key.lower() != lowered)
        return replace(self, headers=pairs + ((name, str(value)),))

    def without_header(self, name: str) -> "Message":
        lowered = name.lower()
        return replace(
            self,
            headers=tuple((key, val) for key, val in self.headers if key.lower() != lowered),
        )


def as_message(message: Any) -> HttpMessage:
    """Coerce HTTPX messages into :class:`Message`; pass contract objects through.

    Raises:
        TypeError: If ``message`` neither is an HTTPX message nor satisfies
            :class:`HttpMessage`.
    """
    if isinstance(message, (httpx.Request, httpx.Response)):
        return Message.from_httpx(message)
    if isinstance(message, HttpMessage):
        return message
    raise TypeError(f"Object of type {type(message).__name__} is not an HTTP message")


def header_or_none(message: HttpMessage, name: str) -> Optional[str]:
    """Return the stripped header value, or ``None`` when absent or blank."""
    if not message.has_header(name):
        return None
    value = message.header(name).strip()
    return value or None
