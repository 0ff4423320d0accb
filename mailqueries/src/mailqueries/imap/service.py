"""Execution service that evaluates queries against an IMAP account.

What:
  Implement :class:`~mailqueries.core.service.QueryService` on top of
  :class:`~mailqueries.imap.client.ImapSearchClient`: for every submitted
  query report the number of matching messages and how many of them are
  unseen.

Why:
  Users without a local mail index still want bookmark and folder counters.
  IMAP ``SEARCH`` answers both numbers without downloading any message.

How:
  :meth:`ImapQueryService.execute` opens one session per batch, translates
  each query with :func:`~mailqueries.imap.search.translate_query`, runs two
  counts per query and hands the collected results to
  :meth:`~mailqueries.core.service.QueryService.deliver`. Delivery happens
  once the whole batch is done, so a failure delivers nothing.

Interfaces:
  :class:`ImapQueryService`.
"""
from __future__ import annotations

from typing import Callable, List, Optional

from ..core.service import QueryService
from .client import ImapConfig, ImapSearchClient
from .search import translate_query

ClientFactory = Callable[[ImapConfig], ImapSearchClient]


class ImapQueryService(QueryService):
    """Query service backed by IMAP ``SEARCH``.

    Args:
      config: Account parameters.
      client_factory: Builds the session; tests substitute a fake backend.
    """

    def __init__(self, config: ImapConfig, client_factory: Optional[ClientFactory] = None) -> None:
        super().__init__()
        self.config = config
        self._client_factory = client_factory if client_factory is not None else ImapSearchClient

    def execute(self, queries: List[str]) -> None:
        payload = []
        with self._client_factory(self.config) as client:
            for query in queries:
                plan = translate_query(query, self.config.default_mailbox)
                payload.append(
                    {
                        "query": query,
                        "count": client.count(plan.mailbox, plan.criteria),
                        "unread": client.count(plan.mailbox, plan.unread_criteria),
                    }
                )
        self.logger.debug("imap_batch_completed", queries=len(queries), host=self.config.host)
        self.deliver(payload)
