"""Render query item counts for people.

What:
  Format the unread/total counters of a :class:`~mailqueries.core.items.QueryItem`
  and one-line summaries used by the CLI.

Why:
  Every view shows the same ``unread(+delta)/count`` string; keeping it next
  to the aggregate avoids subtly different renderings of the same numbers.

How:
  Plain string formatting. Items flagged ``hide_unread`` render an empty
  counter while keeping their raw numbers on the item itself.

Interfaces:
  :func:`format_unread`, :func:`format_item`, :func:`format_baseline`.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from .items import QueryItem


def format_unread(item: QueryItem) -> str:
    """Return ``unread[(±delta)]/count``, or ``""`` when unread is hidden."""

    if item.hide_unread:
        return ""
    delta = f"({item.delta_unread:+d})" if item.delta_unread else ""
    return f"{item.unread}{delta}/{item.count}"


def format_item(item: QueryItem) -> str:
    """Return a single line: favorite marker, key, name and counts."""

    marker = "*" if item.favorite else " "
    key = f"[{item.key}]" if item.key else "   "
    name = item.name if item.name is not None else item.query
    counts = format_unread(item)
    return f"{marker} {key} {name}" + (f"  {counts}" if counts else "")


def format_baseline(taken_at: Optional[datetime]) -> str:
    if taken_at is None:
        return "no baseline yet"
    return f"changes since {taken_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}"
