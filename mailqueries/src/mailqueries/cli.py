"""mailqueries command-line interface.

What:
  Provide a Typer-based entry point that prints bookmark and maildir counters
  once (``show``), lists the queries a refresh would send (``queries``) or
  keeps refreshing them in a loop (``watch``).

Why:
  Operators want to check their saved searches from a terminal or a status
  bar script without embedding the library. Wiring the commands to the same
  coordinator used by applications guarantees identical numbers.

How:
  Load the runtime configuration, build the coordinator through
  :mod:`mailqueries._wiring`, request a refresh (the IMAP service answers
  synchronously) and print the aggregated items. ``watch`` keeps one
  coordinator alive, so deltas are measured against the first cycle, reloads
  the configuration every cycle and backs off exponentially after failures.

Interfaces:
  ``app`` (Typer application), ``show``, ``queries``, ``watch``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - ``watch`` survives transient failures and exits with ``0`` on
    ``KeyboardInterrupt``.
"""
from __future__ import annotations

import json
import logging
import time
from typing import List, Optional

import typer
from imapclient.exceptions import IMAPClientError

from ._wiring import build_coordinator, exponential_backoff, resolve_interval
from .config.loader import ConfigLoadError, load_runtime_config
from .config.schema import RuntimeConfig
from .core.coordinator import UpdateCoordinator
from .core.definitions import Category, parse_category
from .core.display import format_baseline, format_item
from .core.errors import QueryItemsError
from .core.items import QueryItem
from .core.service import QueryService
from .imap.search import UnsupportedQueryError


app = typer.Typer(help="Saved mail search counters")

LOGGER = logging.getLogger("mailqueries.cli")

# Failures of a single refresh round: bad definitions or an unreachable server.
_REFRESH_ERRORS = (
    ConfigLoadError,
    QueryItemsError,
    UnsupportedQueryError,
    IMAPClientError,
    OSError,
    RuntimeError,
)

_CONFIG_HELP = "Path to config.yaml (defaults to MAILQUERIES_CONFIG_PATH or standard locations)"


def _load_runtime(config_path: Optional[str], *, reload: bool = False) -> RuntimeConfig:
    try:
        return load_runtime_config(config_path, reload=reload)
    except ConfigLoadError as exc:
        LOGGER.error("runtime_load_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _render(items: List[QueryItem], *, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([item.as_record() for item in items], indent=2))
        return
    for item in items:
        if not item.hide:
            typer.echo(format_item(item))


def _parse_category(category: Optional[str]) -> Optional[Category]:
    if category is None:
        return None
    try:
        return parse_category(category)
    except QueryItemsError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _refresh(coordinator: UpdateCoordinator, category: Optional[Category]) -> List[QueryItem]:
    coordinator.request_refresh()
    return coordinator.query_items(category)


@app.command("show")
def show(
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Only show 'bookmarks' or 'maildirs'"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON records"),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Run the saved searches once and print their counters."""

    selected = _parse_category(category)
    runtime = _load_runtime(config_path)
    try:
        coordinator = build_coordinator(runtime)
        items = _refresh(coordinator, selected)
    except _REFRESH_ERRORS as exc:
        LOGGER.error("show_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _render(items, as_json=as_json)


@app.command("queries")
def queries(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print the normalised queries a refresh would submit."""

    runtime = _load_runtime(config_path)
    try:
        coordinator = build_coordinator(runtime, service=QueryService())
        visible = coordinator.visible_queries()
    except QueryItemsError as exc:
        LOGGER.error("queries_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for query in visible:
        typer.echo(query)


@app.command("watch")
def watch(
    interval: Optional[int] = typer.Option(None, help="Override refresh interval in seconds"),
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Only show 'bookmarks' or 'maildirs'"
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Refresh the counters periodically, keeping the first cycle as baseline.

    What:
      Loop forever: reload the configuration, refresh, print, sleep.

    Why:
      A long-lived coordinator is what makes the ``(+N)`` deltas meaningful;
      a one-shot ``show`` always reports zero change.

    How:
      Build the coordinator once, reuse it for every cycle, and on failure
      sleep for :func:`exponential_backoff` instead of the interval.
    """

    selected = _parse_category(category)
    runtime = _load_runtime(config_path)
    try:
        coordinator = build_coordinator(runtime)
    except ConfigLoadError as exc:
        LOGGER.error("watch_setup_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    base_interval = resolve_interval(runtime, interval)
    failures = 0
    typer.echo(f"Watching saved searches every {base_interval} seconds")

    try:
        while True:
            try:
                runtime = load_runtime_config(config_path, reload=True)
                items = _refresh(coordinator, selected)
            except Exception as exc:
                failures += 1
                delay = exponential_backoff(
                    base=runtime.refresh.backoff_base_s,
                    cap=runtime.refresh.backoff_cap_s,
                    failures=failures - 1,
                )
                LOGGER.error("watch_cycle_failed backoff=%s error=%s", delay, exc)
                typer.echo(f"refresh failed ({exc}); retrying in {delay}s", err=True)
                time.sleep(delay)
                continue

            failures = 0
            typer.echo(f"-- {format_baseline(coordinator.baseline_taken_at)}")
            _render(items, as_json=False)
            LOGGER.info("watch_cycle_completed items=%s", len(items))
            time.sleep(base_interval)
    except KeyboardInterrupt:
        LOGGER.info("watch_stopped")
        raise typer.Exit(code=0) from None


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
