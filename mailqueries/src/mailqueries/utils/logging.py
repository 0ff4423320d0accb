"""Structured JSON logging for mailqueries components.

What:
  Offer a tiny facade over Python streams so every component (aggregator,
  coordinator, IMAP service) emits single-line JSON events with a consistent
  shape and with credentials masked.

Why:
  Refresh cycles run unattended inside ``watch`` loops. Grepping for
  ``baseline_seeded`` or ``results_delivered`` in a line-oriented log is the
  quickest way to explain why a counter moved, and the IMAP service handles
  account credentials that must never reach a log file.

How:
  :class:`JsonLogger` stores a stream (the current ``sys.stderr`` when
  unset), a component label and a minimum severity (``MAILQUERIES_LOG_LEVEL``
  when unset). Each call builds the canonical payload (``ts``, ``lvl``, ``msg``,
  ``component``), merges a redacted copy of the keyword context and writes it
  with :func:`json.dump`. Entries below the threshold are dropped.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`.

Invariants & Safety:
  - Payloads always carry an ISO8601 UTC timestamp, severity and component.
  - ``password``, ``username`` and ``token`` values are replaced with
    ``[redacted]``, including inside nested dictionaries.
  - Streams are flushed after every entry.
"""
from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
LEVEL_ENV = "MAILQUERIES_LOG_LEVEL"
_SEVERITY = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}
_SENSITIVE_KEYS = frozenset({"password", "username", "token"})


def _threshold_from_env() -> str:
    value = os.environ.get(LEVEL_ENV, "INFO").upper()
    return value if value in _SEVERITY else "INFO"


@dataclass
class JsonLogger:
    """Structured JSON logger with credential redaction.

    What:
      Emit one JSON object per line for each event, tagged with the component
      that produced it.

    Why:
      A single schema keeps test assertions and log tooling simple and puts
      the redaction rules in one place.

    How:
      :meth:`log` does the work; :meth:`debug`, :meth:`info`, :meth:`warning`
      and :meth:`error` forward keyword arguments as structured context.
    """

    stream: Any = None
    component: str = "mailqueries"
    level: Optional[str] = None

    def enabled_for(self, level: str) -> bool:
        threshold = self.level.upper() if self.level else _threshold_from_env()
        return _SEVERITY.get(level.upper(), 20) >= _SEVERITY.get(threshold, 20)

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Write a structured entry when ``level`` passes the threshold.

        Args:
          level: Severity name (``"debug"``, ``"info"``, ``"warn"``, ``"error"``).
          message: Event name, conventionally ``snake_case``.
          extra: Context fields, redacted before serialisation.
        """

        if not self.enabled_for(level):
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        stream = self.stream if self.stream is not None else sys.stderr
        json.dump(payload, stream, separators=(",", ":"), default=str)
        stream.write("\n")
        stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with credential fields masked."""

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def get_logger(component: str) -> JsonLogger:
    """Construct a :class:`JsonLogger` bound to ``component``.

    The threshold follows ``MAILQUERIES_LOG_LEVEL`` at the time of each call.
    """

    return JsonLogger(component=component)
