"""Contract between the core and the search execution backend.

What:
  Define :class:`QueryService`, the base class of every backend that runs the
  saved searches and reports their counts.

Why:
  The core never executes searches itself. It needs a synchronous view of the
  most recent results and a way to submit a batch of queries and be called
  back when the answer arrives; anything beyond that (sockets, IMAP sessions,
  timeouts) belongs to the backend.

How:
  :meth:`QueryService.submit` records the callback and hands the batch to
  :meth:`QueryService.execute`, implemented by subclasses. Whenever a response
  is available the subclass calls :meth:`QueryService.deliver`, which stores
  the results as the latest ones and then runs the callback of the oldest
  outstanding request.

Interfaces:
  :class:`QueryService`, ``ResultsCallback``.

Invariants & Safety:
  - :meth:`QueryService.latest_results` is updated before the callback runs,
    so it observes the results it is being told about.
  - A response with no outstanding request only updates the latest results.
  - Responses are processed in arrival order; a later response simply
    replaces an earlier one.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Sequence

from ..utils.logging import get_logger
from .results import LiveResult, parse_results

ResultsCallback = Callable[[List[LiveResult]], None]


class QueryService:
    """Base class for search execution backends."""

    def __init__(self) -> None:
        self._latest: List[LiveResult] = []
        self._pending: List[ResultsCallback] = []
        self.logger = get_logger(f"mailqueries.service.{type(self).__name__}")

    def latest_results(self) -> List[LiveResult]:
        return list(self._latest)

    def submit(self, queries: Sequence[str], callback: ResultsCallback) -> None:
        """Issue one batched request for ``queries``.

        ``callback`` receives the parsed results once :meth:`deliver` runs.
        """

        self._pending.append(callback)
        try:
            self.execute(list(queries))
        except Exception:
            if callback in self._pending:
                self._pending.remove(callback)
            raise

    def execute(self, queries: List[str]) -> None:
        """Run ``queries`` and eventually call :meth:`deliver`."""

        raise NotImplementedError

    def deliver(self, payload: Iterable[Any]) -> List[LiveResult]:
        """Record a response and answer the oldest outstanding request."""

        results = parse_results(payload)
        self._latest = results
        callback = self._pending.pop(0) if self._pending else None
        self.logger.info(
            "results_delivered", results=len(results), outstanding=len(self._pending)
        )
        if callback is not None:
            callback(list(results))
        return results
