"""Locate, parse and cache the mailqueries configuration file.

What:
  Find ``config.yaml``, parse it with PyYAML, validate it against
  :class:`~mailqueries.config.schema.RuntimeConfig` and keep the result in a
  process-wide cache.

Why:
  Bookmarks and maildir shortcuts are read on every aggregation. Re-reading
  the file each time would make the refresh loop depend on disk latency, yet
  operators still need a way to pick up edits without restarting.

How:
  Resolve candidate paths from an explicit argument, the
  ``MAILQUERIES_CONFIG_PATH`` environment variable and well-known defaults.
  The first existing file is parsed with :func:`yaml.safe_load`, validated
  with :meth:`RuntimeConfig.model_validate` and cached. ``reload=True`` and
  :func:`reset_runtime_config` bypass or clear the cache.

Interfaces:
  - :func:`load_runtime_config` / :func:`get_runtime_config` /
    :func:`reset_runtime_config`.
  - :func:`parse_config`: validate YAML text without touching the cache.
  - :class:`ConfigLoadError` / :class:`RuntimeConfigError`.

Invariants:
  - Only validated models leave this module.
  - Errors name the offending file so operators know what to fix.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from .schema import RuntimeConfig, ValidationError


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class RuntimeConfigError(ConfigLoadError):
    """Raised when ``config.yaml`` cannot be found, parsed or validated."""


_CONFIG_ENV = "MAILQUERIES_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("config.yaml"),
    Path("~/.config/mailqueries/config.yaml"),
    Path("/etc/mailqueries/config.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Path, RuntimeConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order.

    Explicit argument first, then ``MAILQUERIES_CONFIG_PATH``, then the
    defaults. ``~`` is expanded and duplicates are skipped.
    """

    seen: set[Path] = set()
    candidates = []
    if path is not None:
        candidates.append(path)
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(_DEFAULT_LOCATIONS)
    for candidate in candidates:
        candidate = candidate.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def parse_config(text: str, source: Any = "<string>") -> RuntimeConfig:
    """Validate YAML ``text`` into a :class:`RuntimeConfig`.

    Args:
      text: Raw YAML document.
      source: Label used in error messages (usually the file path).

    Raises:
      RuntimeConfigError: On YAML syntax errors, a non-mapping document, or
        schema violations.
    """

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise RuntimeConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RuntimeConfigError(f"{source} must contain a mapping at the top-level")
    try:
        return RuntimeConfig.model_validate(payload)
    except (_PydanticValidationError, ValidationError) as exc:
        raise RuntimeConfigError(f"Invalid configuration in {source}: {exc}") from exc


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    return parse_config(text, path)


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
) -> RuntimeConfig:
    """Resolve, parse, and cache the runtime configuration.

    What:
      Return the validated configuration, loading it on first use.

    Why:
      Providers consult the configuration on every aggregation; the cache
      keeps that cheap while ``reload`` lets long-running loops pick up edits.

    How:
      Serve the cached model unless ``reload`` is set or a different explicit
      path is requested; otherwise walk :func:`_candidate_paths` and load the
      first file that exists.

    Args:
      path: Optional explicit location of ``config.yaml``.
      reload: When ``True`` forces a fresh load bypassing the cache.

    Raises:
      RuntimeConfigError: If no configuration file can be located or validated.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_path, cached_config = _RUNTIME_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    searched: list[str] = []
    for candidate in _candidate_paths(requested_path):
        if not candidate.exists():
            searched.append(str(candidate))
            continue
        config = _load_runtime_from_path(candidate)
        _RUNTIME_CACHE = (candidate, config)
        return config

    listing = ", ".join(searched) if searched else "<none>"
    raise RuntimeConfigError(f"Unable to locate config.yaml (searched: {listing})")


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, loading it on demand."""

    return load_runtime_config()


def reset_runtime_config() -> None:
    """Clear the runtime configuration cache."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None
