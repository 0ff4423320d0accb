"""Aggregate query definitions with live and baseline counts.

What:
  Build one display-ready :class:`QueryItem` per query definition by joining
  it against the latest live results and the baseline snapshot, and make sure
  exactly one bookmark item is marked favorite.

Why:
  Views should never repeat the join logic or argue about what a delta means.
  The aggregate is the one place that decides the query string, the display
  name, the counts and the change since the baseline.

How:
  :class:`ItemAggregator` resolves each definition's query through
  :mod:`mailqueries.core.normalize`, looks it up in a :class:`ResultIndex`
  built over the live results and another over the baseline, and computes the
  deltas. A query with no baseline entry uses its current counts as baseline,
  so a newly added bookmark shows no spurious spike. :func:`ensure_favorite`
  post-processes the bookmark category.

Interfaces:
  :class:`QueryItem`, :class:`ItemAggregator`, :func:`ensure_favorite`.

Invariants & Safety:
  - Output preserves input order and holds exactly one item per definition.
  - Aggregation is all-or-nothing: a definition that fails to normalise aborts
    the whole category with :class:`~mailqueries.core.errors.ConfigurationError`.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from ..utils.logging import get_logger
from .baseline import BaselineStore
from .definitions import Category, QueryDefinition
from .normalize import ensure_text, resolve_query
from .results import ResultIndex

if TYPE_CHECKING:  # pragma: no cover
    from ..config.providers import DefinitionProvider
    from .service import QueryService

LOGGER = get_logger("mailqueries.items")


@dataclass(frozen=True)
class QueryItem:
    """A query definition merged with its live and baseline counts."""

    name: Optional[str]
    query: str
    key: Optional[str]
    count: int
    unread: int
    delta_count: int
    delta_unread: int
    favorite: bool = False
    hide: bool = False
    hide_unread: bool = False

    def as_record(self) -> Dict[str, Any]:
        """Return the mapping handed to downstream consumers.

        Flags are only present when true, so consumers can tell an unset flag
        from one that was never configured.
        """

        record: Dict[str, Any] = {
            "name": self.name,
            "query": self.query,
            "key": self.key,
            "count": self.count,
            "unread": self.unread,
            "delta-count": self.delta_count,
            "delta-unread": self.delta_unread,
        }
        for flag, label in (
            (self.favorite, "favorite"),
            (self.hide, "hide"),
            (self.hide_unread, "hide-unread"),
        ):
            if flag:
                record[label] = True
        return record


def ensure_favorite(items: Sequence[QueryItem]) -> List[QueryItem]:
    """Guarantee that one item is favorite when ``items`` is not empty.

    When no item is favorite yet the first one becomes favorite. An existing
    favorite is left alone, as is an empty sequence.
    """

    result = list(items)
    if result and not any(item.favorite for item in result):
        result[0] = dataclasses.replace(result[0], favorite=True)
    return result


class ItemAggregator:
    """Join definitions with live results and the baseline snapshot.

    What:
      Produce the :class:`QueryItem` list for a category.

    Why:
      The cache needs a single pure entry point per category it can call
      lazily, and tests need :meth:`build` without providers.

    How:
      :meth:`items_for` reads the definitions freshly from the provider and
      delegates to :meth:`build`; bookmark items additionally pass through
      :func:`ensure_favorite`.

    Args:
      provider: Source of bookmark and maildir definitions.
      service: Execution service exposing the latest live results.
      baseline: Store holding the baseline snapshot.
    """

    def __init__(
        self,
        provider: "DefinitionProvider",
        service: "QueryService",
        baseline: BaselineStore,
    ) -> None:
        self.provider = provider
        self.service = service
        self.baseline = baseline

    def definitions(self, category: Category) -> List[QueryDefinition]:
        if category is Category.BOOKMARK:
            return list(self.provider.bookmarks())
        return list(self.provider.maildirs())

    def build(
        self, definitions: Sequence[QueryDefinition], category: Category
    ) -> List[QueryItem]:
        """Return one item per definition, in order.

        Raises:
          ConfigurationError: If any definition's query cannot be resolved.
        """

        live = ResultIndex(self.service.latest_results())
        snapshot = self.baseline.current()
        reference = ResultIndex(snapshot.results if snapshot is not None else ())
        items: List[QueryItem] = []
        for definition in definitions:
            query = resolve_query(definition, category)
            name = definition.name
            if name is None and category is Category.MAILDIR:
                name = ensure_text(definition.maildir, what="maildir")
            current = live.find(query)
            count = current.count if current is not None else 0
            unread = current.unread if current is not None else 0
            previous = reference.find(query)
            baseline_count = previous.count if previous is not None else count
            baseline_unread = previous.unread if previous is not None else unread
            items.append(
                QueryItem(
                    name=name,
                    query=query,
                    key=definition.key,
                    count=count,
                    unread=unread,
                    delta_count=count - baseline_count,
                    delta_unread=unread - baseline_unread,
                    favorite=bool(definition.favorite),
                    hide=bool(definition.hide),
                    hide_unread=bool(definition.hide_unread),
                )
            )
        return items

    def items_for(self, category: Category) -> List[QueryItem]:
        items = self.build(self.definitions(category), category)
        if category is Category.BOOKMARK:
            items = ensure_favorite(items)
        LOGGER.debug("items_built", category=category.value, items=len(items))
        return items
