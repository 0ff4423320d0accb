"""Synchronous change notification for aggregated query items.

What:
  Provide :class:`ChangeNotifier`, the observer registry that tells views the
  bookmark or maildir items were invalidated.

Why:
  Sidebars, status lines and the CLI all redraw from the same aggregate. They
  need one event, delivered in the thread of control that invalidated the
  cache, rather than polling.

How:
  Listeners are zero-argument callables kept in registration order.
  :meth:`ChangeNotifier.notify` iterates over a snapshot of the list so a
  listener may unsubscribe itself while being called.

Interfaces:
  :class:`ChangeNotifier`.

Invariants & Safety:
  - Every registered listener is called once per notification.
  - Exceptions raised by a listener propagate to the code that triggered the
    notification; listeners registered after it are not called for that event.
"""
from __future__ import annotations

from typing import Callable, List

Listener = Callable[[], None]


class ChangeNotifier:
    """Registry of listeners interested in query item changes."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove ``listener``; unknown listeners are ignored."""

        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()
