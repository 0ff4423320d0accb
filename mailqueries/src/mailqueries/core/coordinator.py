"""Refresh cycle and public read API for query items.

What:
  Drive the refresh/invalidate cycle: send the visible queries to the
  execution service, react to each delivery of live results, and expose the
  aggregated bookmark and maildir items to callers.

Why:
  Seeding the baseline, invalidating the cache and notifying observers have
  to happen in a precise order for every delivery. Owning all mutable state
  (baseline, cache, observers) in one object makes that order explicit and
  gives tests and embedding applications a single handle with a documented
  lifecycle instead of module-level globals.

How:
  The coordinator is a two-state machine derived from the baseline store:

  - ``NO_BASELINE``: the next delivery seeds the baseline, which invalidates
    the cache and notifies observers.
  - ``HAS_BASELINE``: deliveries only invalidate the cache (and notify).

  After either transition both categories are recomputed eagerly so views
  reading right after the notification find a warm cache. :meth:`reset`
  returns to ``NO_BASELINE``.

Interfaces:
  :class:`CoordinatorState`, :class:`UpdateCoordinator`.

Invariants & Safety:
  - Single-threaded: every mutation happens inside :meth:`UpdateCoordinator.on_results`,
    :meth:`UpdateCoordinator.reset` or a lazy cache fill; no locks are taken.
  - The baseline is never replaced while in ``HAS_BASELINE``.
  - Each delivery produces exactly one change notification.
"""
from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Union

from ..utils.ids import new_request_id
from ..utils.logging import get_logger
from .baseline import BaselineStore
from .cache import ItemCache
from .definitions import Category, parse_category
from .events import ChangeNotifier
from .items import ItemAggregator, QueryItem
from .normalize import resolve_query
from .results import LiveResult

if TYPE_CHECKING:  # pragma: no cover
    from ..config.providers import DefinitionProvider
    from .service import QueryService

LOGGER = get_logger("mailqueries.coordinator")


class CoordinatorState(str, enum.Enum):
    NO_BASELINE = "no-baseline"
    HAS_BASELINE = "has-baseline"


class UpdateCoordinator:
    """Owner of the baseline, the item cache and the change observers.

    Args:
      provider: Source of bookmark and maildir definitions.
      service: Search execution backend.
      baseline: Optional pre-built baseline store (tests inject a clock).
      notifier: Optional observer registry shared with other components.
    """

    def __init__(
        self,
        provider: "DefinitionProvider",
        service: "QueryService",
        *,
        baseline: Optional[BaselineStore] = None,
        notifier: Optional[ChangeNotifier] = None,
    ) -> None:
        self.provider = provider
        self.service = service
        self.baseline = baseline if baseline is not None else BaselineStore()
        self.notifier = notifier if notifier is not None else ChangeNotifier()
        self.aggregator = ItemAggregator(provider, service, self.baseline)
        self.cache = ItemCache(self.aggregator.items_for, self.notifier)
        self.baseline.attach(self.cache.invalidate)

    # State -------------------------------------------------------------
    @property
    def state(self) -> CoordinatorState:
        if self.baseline.current() is None:
            return CoordinatorState.NO_BASELINE
        return CoordinatorState.HAS_BASELINE

    @property
    def baseline_taken_at(self) -> Optional[datetime]:
        return self.baseline.taken_at

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener; returns its unsubscribe callable."""

        return self.notifier.subscribe(listener)

    def unsubscribe(self, listener: Callable[[], None]) -> None:
        self.notifier.unsubscribe(listener)

    # Refresh cycle -----------------------------------------------------
    def visible_queries(self) -> List[str]:
        """Return the normalised queries of every visible definition.

        Definitions flagged ``hide`` or ``hide_unread`` are skipped. Bookmarks
        come first; duplicates are dropped keeping the first occurrence.

        Raises:
          ConfigurationError: If a visible definition cannot be normalised.
        """

        queries: List[str] = []
        seen = set()
        for category in (Category.BOOKMARK, Category.MAILDIR):
            for definition in self.aggregator.definitions(category):
                if not definition.visible:
                    continue
                query = resolve_query(definition, category)
                if query not in seen:
                    seen.add(query)
                    queries.append(query)
        return queries

    def request_refresh(self) -> str:
        """Submit one batched request for the visible queries.

        The service's response is handled by :meth:`on_results`.

        Returns:
          Identifier of the request, as written to the log.
        """

        queries = self.visible_queries()
        request_id = new_request_id()
        LOGGER.info("refresh_requested", request_id=request_id, queries=len(queries))
        self.service.submit(queries, self.on_results)
        return request_id

    def on_results(self, results: Sequence[LiveResult]) -> None:
        """Handle a delivery of live results.

        What:
          Apply the state transition for a delivery and repopulate the cache.

        Why:
          The first delivery defines the reference point for every delta;
          later deliveries must keep measuring against it.

        How:
          Seed the baseline when none exists (seeding invalidates the cache),
          otherwise invalidate the cache directly. Then request the items of
          both categories so the cache is warm again.

        Args:
          results: The delivered live results.

        Raises:
          ConfigurationError: If recomputing a category fails.
        """

        if self.state is CoordinatorState.NO_BASELINE:
            self.baseline.seed(results)
        else:
            self.cache.invalidate()
        self._recompute()

    def reset(self, *, refresh: bool = False) -> None:
        """Clear the baseline and the cache, returning to ``NO_BASELINE``.

        Args:
          refresh: Also submit a new request so the next delivery re-seeds
            the baseline right away.
        """

        self.baseline.reset()
        self.cache.invalidate()
        if refresh:
            self.request_refresh()

    def _recompute(self) -> None:
        for category in Category:
            self.cache.get(category)

    # Read API ----------------------------------------------------------
    def query_items(self, category: Union[Category, str, None] = None) -> List[QueryItem]:
        """Return the aggregated items.

        Args:
          category: ``"bookmarks"``, ``"maildirs"`` (or the :class:`Category`
            members); ``None`` returns bookmark items followed by maildir items.

        Raises:
          InvalidArgumentError: If ``category`` is not recognised.
          ConfigurationError: If a definition cannot be normalised.
        """

        if category is None:
            return self.cache.get(Category.BOOKMARK) + self.cache.get(Category.MAILDIR)
        return self.cache.get(parse_category(category))

    def favorite_item(self) -> Optional[QueryItem]:
        """Return the bookmark item marked favorite, if any bookmark exists."""

        for item in self.cache.get(Category.BOOKMARK):
            if item.favorite:
                return item
        return None
