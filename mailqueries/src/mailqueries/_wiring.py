"""Helper utilities bridging the CLI with runtime subsystems.

What:
  Build the execution service and the update coordinator from a runtime
  configuration, resolve the watch interval and compute retry delays.

Why:
  Keeping construction and timing rules out of the command bodies keeps the
  CLI thin and lets tests swap the coordinator without touching Typer.

How:
  Pure functions taking the validated :class:`~mailqueries.config.schema.RuntimeConfig`.

Interfaces:
  ``build_service``, ``build_coordinator``, ``resolve_interval``,
  ``exponential_backoff``.

Invariants & Safety:
  - ``exponential_backoff`` clamps values between the configured base and cap
    and stays finite for any number of consecutive failures.
  - ``build_service`` refuses to run without an ``imap`` section instead of
    silently reporting zero counts.
"""
from __future__ import annotations

from typing import Optional

from .config.loader import RuntimeConfigError
from .config.providers import RuntimeDefinitionProvider
from .config.schema import RuntimeConfig, ValidationError
from .core.coordinator import UpdateCoordinator
from .core.service import QueryService
from .imap.client import ImapConfig
from .imap.service import ImapQueryService

_MAX_BACKOFF_EXPONENT = 32


def build_service(runtime: RuntimeConfig) -> QueryService:
    """Return the IMAP query service described by ``runtime``.

    Raises:
      RuntimeConfigError: If the configuration has no usable ``imap`` section.
    """

    if runtime.imap is None:
        raise RuntimeConfigError("config.yaml has no imap section; cannot run queries")
    try:
        return ImapQueryService(ImapConfig.from_settings(runtime.imap))
    except ValidationError as exc:
        raise RuntimeConfigError(str(exc)) from exc


def build_coordinator(
    runtime: RuntimeConfig, *, service: Optional[QueryService] = None
) -> UpdateCoordinator:
    """Wire providers, service and coordinator together.

    ``service`` defaults to :func:`build_service`; pass a bare
    :class:`QueryService` for commands that never submit queries.
    """

    if service is None:
        service = build_service(runtime)
    return UpdateCoordinator(RuntimeDefinitionProvider(), service)


def resolve_interval(runtime: RuntimeConfig, override: Optional[int]) -> int:
    """Return the watch interval: positive override, else config, min 1."""

    if override is not None and override > 0:
        return override
    return max(runtime.refresh.interval_s, 1)


def exponential_backoff(
    *,
    base: int = 5,
    factor: float = 2.0,
    cap: int = 300,
    failures: int = 0,
) -> int:
    """Return an exponential backoff delay for ``failures`` retries.

    What:
      Calculate ``base * factor**failures`` clamped to ``[base, cap]``.

    Why:
      IMAP servers that refuse connections should not be hammered every
      interval, but the loop must recover once they come back.

    Args:
      base: Smallest delay returned.
      factor: Multiplicative growth factor.
      cap: Maximum delay permitted.
      failures: Number of consecutive failures (zero-indexed).

    Returns:
      Delay in whole seconds.
    """

    delay = base * (factor ** min(max(failures, 0), _MAX_BACKOFF_EXPONENT))
    if delay < base:
        delay = base
    if delay > cap:
        delay = cap
    return int(delay)
