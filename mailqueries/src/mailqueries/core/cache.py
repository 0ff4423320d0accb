"""Per-category memoisation of aggregated query items.

What:
  Keep the last computed :class:`~mailqueries.core.items.QueryItem` list for
  each category until it is explicitly invalidated.

Why:
  Views ask for the items far more often than results arrive. Recomputing on
  every read would renormalise every definition (and call legacy suppliers)
  for no benefit, while a time-based expiry could mix old and new counts.

How:
  One slot per :class:`~mailqueries.core.definitions.Category`. :meth:`ItemCache.get`
  fills an empty slot by calling the compute function; :meth:`ItemCache.invalidate`
  empties every slot and notifies observers. A failed computation leaves its
  slot empty.

Interfaces:
  :class:`ItemCache`.

Invariants & Safety:
  - A populated slot always holds the complete result of the most recent
    computation since the last invalidation.
  - The compute function runs at most once per category per invalidation
    cycle, provided it succeeds.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from ..utils.logging import get_logger
from .definitions import Category
from .events import ChangeNotifier
from .items import QueryItem

LOGGER = get_logger("mailqueries.cache")


class ItemCache:
    """Lazy, explicitly invalidated item cache.

    Args:
      compute: Builds the items of one category.
      notifier: Observers told about every invalidation.
    """

    def __init__(
        self,
        compute: Callable[[Category], List[QueryItem]],
        notifier: Optional[ChangeNotifier] = None,
    ) -> None:
        self._compute = compute
        self.notifier = notifier if notifier is not None else ChangeNotifier()
        self._slots: Dict[Category, Optional[Tuple[QueryItem, ...]]] = {
            category: None for category in Category
        }

    def is_populated(self, category: Category) -> bool:
        return self._slots[category] is not None

    def get(self, category: Category) -> List[QueryItem]:
        """Return the items of ``category``, computing them when needed."""

        cached = self._slots[category]
        if cached is None:
            cached = tuple(self._compute(category))
            self._slots[category] = cached
        return list(cached)

    def invalidate(self) -> None:
        """Empty every slot and notify observers."""

        dropped = [category.value for category, slot in self._slots.items() if slot is not None]
        for category in self._slots:
            self._slots[category] = None
        LOGGER.debug("items_invalidated", dropped=dropped)
        self.notifier.notify()
