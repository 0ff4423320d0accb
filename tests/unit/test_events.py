"""Unit tests for :class:`ChangeNotifier`."""
from __future__ import annotations

import pytest

from mailqueries.core.events import ChangeNotifier


def test_listeners_run_in_registration_order() -> None:
    notifier = ChangeNotifier()
    calls = []
    notifier.subscribe(lambda: calls.append("a"))
    notifier.subscribe(lambda: calls.append("b"))

    notifier.notify()

    assert calls == ["a", "b"]
    assert len(notifier) == 2


def test_unsubscribe_callable_removes_listener() -> None:
    notifier = ChangeNotifier()
    calls = []
    remove = notifier.subscribe(lambda: calls.append("a"))

    remove()
    remove()
    notifier.notify()

    assert calls == []
    assert len(notifier) == 0


def test_listener_may_unsubscribe_itself_during_notify() -> None:
    notifier = ChangeNotifier()
    calls = []

    def once() -> None:
        calls.append("once")
        notifier.unsubscribe(once)

    notifier.subscribe(once)
    notifier.subscribe(lambda: calls.append("always"))

    notifier.notify()
    notifier.notify()

    assert calls == ["once", "always", "always"]


def test_listener_errors_propagate() -> None:
    notifier = ChangeNotifier()
    later = []

    def failing() -> None:
        raise RuntimeError("view crashed")

    notifier.subscribe(failing)
    notifier.subscribe(lambda: later.append(1))

    with pytest.raises(RuntimeError):
        notifier.notify()
    assert later == []
