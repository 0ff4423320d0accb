"""Unit tests for count rendering."""
from __future__ import annotations

from datetime import datetime, timezone

from mailqueries.core.display import format_baseline, format_item, format_unread
from mailqueries.core.items import QueryItem


def _item(**overrides) -> QueryItem:
    fields = dict(
        name="Inbox", query="flag:unread", key="u", count=12, unread=5,
        delta_count=2, delta_unread=2,
    )
    fields.update(overrides)
    return QueryItem(**fields)


def test_unread_with_positive_delta() -> None:
    assert format_unread(_item()) == "5(+2)/12"


def test_unread_with_negative_delta() -> None:
    assert format_unread(_item(unread=1, delta_unread=-2)) == "1(-2)/12"


def test_unread_without_delta() -> None:
    assert format_unread(_item(delta_unread=0)) == "5/12"


def test_hide_unread_renders_empty_but_keeps_value() -> None:
    item = _item(unread=7, hide_unread=True)

    assert format_unread(item) == ""
    assert item.unread == 7
    assert format_item(item) == "  [u] Inbox"


def test_format_item_marks_favorite_and_falls_back_to_query() -> None:
    line = format_item(_item(name=None, key=None, favorite=True, delta_unread=0))

    assert line == "*     flag:unread  5/12"


def test_format_baseline() -> None:
    assert format_baseline(None) == "no baseline yet"
    taken = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    assert format_baseline(taken) == "changes since 2024-05-01 09:30:00 UTC"
