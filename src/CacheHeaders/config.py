# === NAVMAP v1 ===
# {
#   "module": "CacheHeaders.config",
#   "purpose": "Settings model and loader with file/env/override precedence.",
#   "sections": [
#     {
#       "id": "cachesettings",
#       "name": "CacheSettings",
#       "anchor": "class-cachesettings",
#       "kind": "class"
#     },
#     {
#       "id": "load-settings",
#       "name": "load_settings",
#       "anchor": "function-load-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Settings Model and Loader

Holds the tunables of the cache helpers in a single frozen Pydantic v2 model:
- default ``public``/``private`` type and ``max-age`` used by ``with_cache``
- status codes whose responses may be cached
- methods treated as safe for conditional GET fallbacks

Settings compose in three levels, later levels winning:
1. **File level** (YAML/JSON)
2. **Environment level**: ``CACHEHDR_*`` variables
3. **Override level**: mapping passed by the caller

  CACHEHDR_DEFAULT_MAX_AGE=3600          →  default_max_age=3600
  CACHEHDR_CACHEABLE_STATUSES='[200]'    →  cacheable_statuses=[200]
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar, List, Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = (
    "CacheSettings",
    "DEFAULT_SETTINGS",
    "DEFAULT_CACHEABLE_STATUSES",
    "load_settings",
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_CACHEABLE_STATUSES = (200, 203, 204, 300, 301, 404, 405, 410, 414, 501)


class CacheSettings(BaseModel):
    """Tunables shared by the cache header helpers."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", frozen=True)

    default_cache_type: Literal["public", "private"] = Field(
        default="private", description="Cache type used by with_cache when none is given"
    )
    default_max_age: int = Field(
        default=600, description="max-age in seconds used by with_cache when none is given"
    )
    cacheable_statuses: List[int] = Field(
        default=list(DEFAULT_CACHEABLE_STATUSES),
        description="Status codes whose responses may be stored",
    )
    safe_methods: List[str] = Field(
        default=["GET", "HEAD"],
        description="Methods that fall back to If-Modified-Since checks",
    )

    @field_validator("default_max_age")
    @classmethod
    def validate_max_age(cls, v: int) -> int:
        if v < 0:
            raise ValueError("default_max_age must be >= 0")
        return v

    @field_validator("cacheable_statuses")
    @classmethod
    def validate_statuses(cls, v: List[int]) -> List[int]:
        for status in v:
            if not 100 <= status <= 599:
                raise ValueError(f"Invalid HTTP status code: {status}")
        return v

    @field_validator("safe_methods")
    @classmethod
    def normalize_methods(cls, v: List[str]) -> List[str]:
        return [method.strip().upper() for method in v if method.strip()]


DEFAULT_SETTINGS = CacheSettings()


def _read_file(path: str | Path) -> dict[str, Any]:
    """
    Read a YAML or JSON settings file.

    Raises:
        ValueError: If the file is missing, unreadable or malformed
    """
    p = Path(path)
    if not p.exists():
        raise ValueError(f"Settings file not found: {path}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"Cannot read settings file {path}: {e}") from e

    suffix = p.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    elif suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .yaml or .json")

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


def _coerce_env_value(value: str) -> Any:
    """Read an environment value as a YAML scalar or flow collection.

    Blank values and text YAML cannot parse are kept as the raw string, so
    ``CACHEHDR_DEFAULT_CACHE_TYPE=public`` stays ``"public"`` while
    ``CACHEHDR_CACHEABLE_STATUSES=[200, 404]`` becomes a list.
    """
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    return value if parsed is None else parsed


def _merge_env_overrides(data: dict[str, Any], env_prefix: str) -> dict[str, Any]:
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue
        key = env_key[len(env_prefix) :].lower()
        data[key] = _coerce_env_value(env_value)
        _LOGGER.debug(f"Environment override: {env_key} → {key} = {data[key]!r}")
    return data


def load_settings(
    path: str | Path | None = None,
    env_prefix: str = "CACHEHDR_",
    overrides: Mapping[str, Any] | None = None,
) -> CacheSettings:
    """
    Load CacheSettings from file, environment and overrides.

    **Precedence:** file < environment < overrides

    Args:
        path: YAML/JSON settings file (optional)
        env_prefix: Environment variable prefix (default: CACHEHDR_)
        overrides: Explicit values that win over everything else

    Returns:
        Validated, frozen CacheSettings

    Raises:
        ValueError: If the file cannot be read or the values are invalid
    """
    data: dict[str, Any] = {}

    if path:
        data = _read_file(path)
        _LOGGER.info(f"Loaded cache settings from {path}")

    data = _merge_env_overrides(data, env_prefix)

    if overrides:
        data.update(overrides)

    try:
        return CacheSettings.model_validate(data)
    except ValueError as e:
        _LOGGER.error(f"Cache settings validation failed: {e}")
        raise
