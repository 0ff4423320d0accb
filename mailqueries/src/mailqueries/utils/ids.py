"""Identifiers for refresh requests.

What:
  Generate identifiers that tie a ``refresh_requested`` log entry to the
  watch cycle that issued it.

Why:
  Deliveries can arrive long after the request on slow IMAP accounts.
  Sortable identifiers make it easy to line up requests and cycles when
  reading the JSON log.

How:
  Combine an ISO8601 UTC timestamp with a short random hex suffix.

Interfaces:
  :func:`new_request_id`.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timezone


def new_request_id() -> str:
    """Return a unique, time-sortable identifier.

    Example: ``2024-01-01T00:00:00+00:00#1a2b3c``.
    """

    timestamp = datetime.now(timezone.utc).isoformat()
    return f"{timestamp}#{secrets.token_hex(3)}"
