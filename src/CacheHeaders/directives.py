# === NAVMAP v1 ===
# {
#   "module": "CacheHeaders.directives",
#   "purpose": "Immutable Cache-Control directive sets for requests and responses.",
#   "sections": [
#     {
#       "id": "directive",
#       "name": "Directive",
#       "anchor": "class-directive",
#       "kind": "class"
#     },
#     {
#       "id": "cachecontext",
#       "name": "CacheContext",
#       "anchor": "class-cachecontext",
#       "kind": "class"
#     },
#     {
#       "id": "directiveset",
#       "name": "DirectiveSet",
#       "anchor": "class-directiveset",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Immutable Cache-Control directive sets for requests and responses.

Responsibilities
----------------
- Name the directive vocabulary of RFC 7234 §5.2 (:class:`Directive`) and
  the subset recognised on each side of an exchange (:class:`CacheContext`).
- Model one ``Cache-Control`` header as a :class:`DirectiveSet`: an ordered,
  frozen table of flags, integer seconds and string extensions.
- Offer ``with_*`` builders that return new sets and reject directives that
  are unknown for the set's context.

Design Notes
------------
- Request and response headers share a single class; the context enum
  decides which directives are accepted, so there is no subclass per side.
- Seconds are clamped to ``>= 0`` on the way in, including entries handed
  straight to the constructor; names are lower-cased there and a
  non-string value under an unrecognised name raises.
- Setting a flag to ``False`` removes it rather than storing a negative.
- ``public`` and ``private`` are mutually exclusive: enabling one drops the
  other.
- Header parsing (see :mod:`CacheHeaders.cache_control`) is permissive: it
  drops or coerces what the builders here would reject.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, FrozenSet, Iterator, List, Mapping, Optional, Tuple, Union

from CacheHeaders.errors import InvalidDirectiveType, InvalidDirectiveValue, UnknownDirective

__all__ = (
    "Directive",
    "CacheContext",
    "DirectiveValue",
    "DirectiveSet",
    "CACHE_TYPES",
)

DirectiveValue = Union[bool, int, str]

CACHE_TYPES = ("public", "private")


class Directive(str, Enum):
    """Cache-Control directives understood by this package."""

    MAX_AGE = "max-age"
    NO_CACHE = "no-cache"
    NO_STORE = "no-store"
    NO_TRANSFORM = "no-transform"
    PUBLIC = "public"
    PRIVATE = "private"
    S_MAXAGE = "s-maxage"
    STALE_WHILE_REVALIDATE = "stale-while-revalidate"
    STALE_IF_ERROR = "stale-if-error"
    MUST_REVALIDATE = "must-revalidate"
    PROXY_REVALIDATE = "proxy-revalidate"
    MAX_STALE = "max-stale"
    MIN_FRESH = "min-fresh"
    ONLY_IF_CACHED = "only-if-cached"

    @property
    def is_flag(self) -> bool:
        return self not in _SECONDS_DIRECTIVES

    @classmethod
    def lookup(cls, name: Any) -> Optional["Directive"]:
        """Return the directive called ``name`` (case-insensitive) or ``None``."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class CacheContext(str, Enum):
    """Side of the exchange a ``Cache-Control`` header belongs to."""

    REQUEST = "request"
    RESPONSE = "response"

    @property
    def allowed(self) -> FrozenSet[Directive]:
        return _ALLOWED[self]

    def recognizes(self, name: Any) -> Optional[Directive]:
        """Return the directive for ``name`` if this context accepts it."""
        directive = Directive.lookup(name)
        if directive is not None and directive in self.allowed:
            return directive
        return None


_SECONDS_DIRECTIVES = frozenset(
    {
        Directive.MAX_AGE,
        Directive.S_MAXAGE,
        Directive.STALE_WHILE_REVALIDATE,
        Directive.STALE_IF_ERROR,
        Directive.MAX_STALE,
        Directive.MIN_FRESH,
    }
)

_COMMON = frozenset(
    {Directive.MAX_AGE, Directive.NO_CACHE, Directive.NO_STORE, Directive.NO_TRANSFORM}
)

_ALLOWED = {
    CacheContext.REQUEST: _COMMON
    | {Directive.MAX_STALE, Directive.MIN_FRESH, Directive.ONLY_IF_CACHED},
    CacheContext.RESPONSE: _COMMON
    | {
        Directive.PUBLIC,
        Directive.PRIVATE,
        Directive.S_MAXAGE,
        Directive.STALE_WHILE_REVALIDATE,
        Directive.STALE_IF_ERROR,
        Directive.MUST_REVALIDATE,
        Directive.PROXY_REVALIDATE,
    },
}


def _clamp_seconds(directive: Directive, value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError) as exc:
        raise InvalidDirectiveValue(directive.value, value) from exc


def _put(entries: List[Tuple[str, DirectiveValue]], name: str, value: DirectiveValue) -> None:
    for index, (existing, _) in enumerate(entries):
        if existing == name:
            entries[index] = (name, value)
            return
    entries.append((name, value))


_EXCLUSIVE = {
    Directive.PUBLIC: Directive.PRIVATE.value,
    Directive.PRIVATE: Directive.PUBLIC.value,
}


@dataclass(frozen=True)
class DirectiveSet:
    """Frozen, ordered ``Cache-Control`` directive table.

    Attributes:
        context: Whether the set describes a request or a response header.
        entries: ``(name, value)`` pairs in insertion order. Values are
            ``True`` for flags, ``int`` seconds, or ``str`` extensions.

    Examples:
        >>> cc = DirectiveSet.for_response().with_public().with_max_age(600)
        >>> str(cc)
        'public, max-age=600'
        >>> cc.with_private().is_public
        False
        >>> DirectiveSet.for_request().with_max_stale(30).max_stale
        30
    """

    context: CacheContext = CacheContext.RESPONSE
    entries: Tuple[Tuple[str, DirectiveValue], ...] = ()

    def __post_init__(self) -> None:
        context = CacheContext(self.context)
        entries: List[Tuple[str, DirectiveValue]] = []
        for name, value in self.entries:
            key = str(getattr(name, "value", name)).strip().lower()
            if not key:
                raise ValueError("Directive name must not be empty.")
            directive = context.recognizes(key)
            if directive is None:
                if not isinstance(value, str):
                    raise UnknownDirective(key, context=context.value)
                _put(entries, key, value)
            elif directive.is_flag:
                if not value:
                    continue
                if directive in _EXCLUSIVE:
                    entries = [pair for pair in entries if pair[0] != _EXCLUSIVE[directive]]
                _put(entries, key, True)
            elif value is not None:
                _put(entries, key, _clamp_seconds(directive, value))
        object.__setattr__(self, "context", context)
        object.__setattr__(self, "entries", tuple(entries))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def for_response(cls) -> "DirectiveSet":
        return cls(context=CacheContext.RESPONSE)

    @classmethod
    def for_request(cls) -> "DirectiveSet":
        return cls(context=CacheContext.REQUEST)

    @classmethod
    def from_mapping(
        cls,
        directives: Mapping[str, Any],
        context: CacheContext = CacheContext.RESPONSE,
    ) -> "DirectiveSet":
        """Build a set from ``{"type": "public", "max-age": 600, ...}``.

        The ``type`` key selects ``public`` or ``private``; flag directives
        with a falsy value are left out.

        Raises:
            InvalidDirectiveType: If ``type`` is not ``public``/``private``.
            UnknownDirective: If a key is not recognised for ``context``.
            InvalidDirectiveValue: If a seconds value is not an integer.
        """
        result = cls(context=context)
        for name, value in directives.items():
            if name == "type":
                result = result.with_type(value)
            else:
                result = result.with_directive(name, value)
        return result

    # ------------------------------------------------------------------
    # Low-level table operations
    # ------------------------------------------------------------------

    def _store(self, name: str, value: DirectiveValue) -> "DirectiveSet":
        entries = list(self.entries)
        _put(entries, name, value)
        return replace(self, entries=tuple(entries))

    def without(self, name: str) -> "DirectiveSet":
        """Return a copy without ``name`` (no-op when absent)."""
        key = str(name).strip().lower()
        if key not in self:
            return self
        return replace(self, entries=tuple(pair for pair in self.entries if pair[0] != key))

    def _require(self, name: Any) -> Directive:
        directive = self.context.recognizes(name)
        if directive is None:
            raise UnknownDirective(str(getattr(name, "value", name)), context=self.context.value)
        return directive

    def _with_flag(self, directive: Directive, flag: Any) -> "DirectiveSet":
        if flag:
            return self._store(directive.value, True)
        return self.without(directive.value)

    # ------------------------------------------------------------------
    # Generic mutators
    # ------------------------------------------------------------------

    def with_directive(self, name: Union[str, Directive], value: Any) -> "DirectiveSet":
        """Set a recognised directive; ``False``/``None`` removes it.

        Raises:
            UnknownDirective: If ``name`` is not allowed in this context.
            InvalidDirectiveValue: If a seconds directive gets a non-integer.
        """
        directive = self._require(name)
        if directive is Directive.PUBLIC:
            return self.with_public(bool(value))
        if directive is Directive.PRIVATE:
            return self.with_private(bool(value))
        if directive.is_flag:
            return self._with_flag(directive, value)
        if value is None:
            return self.without(directive.value)
        return self._store(directive.value, _clamp_seconds(directive, value))

    def with_extension(self, name: str, value: str) -> "DirectiveSet":
        """Add a custom ``name="value"`` directive.

        Raises:
            TypeError: If the name or the value is not a string.
            ValueError: If the name is empty or is a directive of this context.
        """
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Name and value of the extension have to be a string.")
        key = name.strip().lower()
        if not key:
            raise ValueError("Extension name must not be empty.")
        if self.context.recognizes(key) is not None:
            raise ValueError(f"{key} is a {self.context.value} directive; use with_directive().")
        return self._store(key, value.strip('" '))

    # ------------------------------------------------------------------
    # Shared directives
    # ------------------------------------------------------------------

    def with_max_age(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.MAX_AGE, seconds)

    def with_no_cache(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.NO_CACHE, flag)

    def with_no_store(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.NO_STORE, flag)

    def with_no_transform(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.NO_TRANSFORM, flag)

    # ------------------------------------------------------------------
    # Response directives
    # ------------------------------------------------------------------

    def with_public(self, flag: bool = True) -> "DirectiveSet":
        """Allow shared caches to store the response; clears ``private``."""
        result = self._with_flag(self._require(Directive.PUBLIC), flag)
        if flag:
            result = result.without(Directive.PRIVATE.value)
        return result

    def with_private(self, flag: bool = True) -> "DirectiveSet":
        """Restrict storage to the requesting client; clears ``public``."""
        result = self._with_flag(self._require(Directive.PRIVATE), flag)
        if flag:
            result = result.without(Directive.PUBLIC.value)
        return result

    def with_type(self, cache_type: str) -> "DirectiveSet":
        """Select ``public`` or ``private``.

        Raises:
            InvalidDirectiveType: For any other value.
        """
        if cache_type not in CACHE_TYPES:
            raise InvalidDirectiveType(cache_type)
        if cache_type == "public":
            return self.with_public(True)
        return self.with_private(True)

    def with_shared_max_age(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.S_MAXAGE, seconds)

    def with_stale_while_revalidate(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.STALE_WHILE_REVALIDATE, seconds)

    def with_stale_if_error(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.STALE_IF_ERROR, seconds)

    def with_must_revalidate(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.MUST_REVALIDATE, flag)

    def with_proxy_revalidate(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.PROXY_REVALIDATE, flag)

    # ------------------------------------------------------------------
    # Request directives
    # ------------------------------------------------------------------

    def with_max_stale(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.MAX_STALE, seconds)

    def with_min_fresh(self, seconds: Optional[int]) -> "DirectiveSet":
        return self.with_directive(Directive.MIN_FRESH, seconds)

    def with_only_if_cached(self, flag: bool = True) -> "DirectiveSet":
        return self.with_directive(Directive.ONLY_IF_CACHED, flag)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self, name: Union[str, Directive]) -> Optional[DirectiveValue]:
        key = str(getattr(name, "value", name)).strip().lower()
        for existing, value in self.entries:
            if existing == key:
                return value
        return None

    def has(self, name: Union[str, Directive]) -> bool:
        return self.get(name) is not None

    def extension(self, name: str) -> Optional[str]:
        value = self.get(name)
        return value if isinstance(value, str) else None

    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.entries)

    def _seconds(self, directive: Directive) -> Optional[int]:
        value = self.get(directive)
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def _flag(self, directive: Directive) -> bool:
        return self.get(directive) is True

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[Tuple[str, DirectiveValue]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        from CacheHeaders.cache_control import serialize_cache_control

        return serialize_cache_control(self)

    @property
    def max_age(self) -> Optional[int]:
        return self._seconds(Directive.MAX_AGE)

    @property
    def no_cache(self) -> bool:
        return self._flag(Directive.NO_CACHE)

    @property
    def no_store(self) -> bool:
        return self._flag(Directive.NO_STORE)

    @property
    def no_transform(self) -> bool:
        return self._flag(Directive.NO_TRANSFORM)

    @property
    def is_public(self) -> bool:
        return self._flag(Directive.PUBLIC)

    @property
    def is_private(self) -> bool:
        return self._flag(Directive.PRIVATE)

    @property
    def shared_max_age(self) -> Optional[int]:
        return self._seconds(Directive.S_MAXAGE)

    @property
    def stale_while_revalidate(self) -> Optional[int]:
        return self._seconds(Directive.STALE_WHILE_REVALIDATE)

    @property
    def stale_if_error(self) -> Optional[int]:
        return self._seconds(Directive.STALE_IF_ERROR)

    @property
    def must_revalidate(self) -> bool:
        return self._flag(Directive.MUST_REVALIDATE)

    @property
    def proxy_revalidate(self) -> bool:
        return self._flag(Directive.PROXY_REVALIDATE)

    @property
    def max_stale(self) -> Optional[int]:
        return self._seconds(Directive.MAX_STALE)

    @property
    def min_fresh(self) -> Optional[int]:
        return self._seconds(Directive.MIN_FRESH)

    @property
    def only_if_cached(self) -> bool:
        return self._flag(Directive.ONLY_IF_CACHED)
