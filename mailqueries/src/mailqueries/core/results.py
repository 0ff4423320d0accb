"""Live result records and lookup by query string.

What:
  Define :class:`LiveResult`, the per-query counts returned by the search
  backend, convert raw backend payloads into it, and look results up by their
  canonical query string.

Why:
  Both the current results and the baseline snapshot are flat sequences that
  are only addressable by exact query text. Keeping the lookup in one place
  guarantees the aggregator treats both datasets identically.

How:
  :func:`find_result` is the linear scan (first match wins). :class:`ResultIndex`
  hashes a dataset by query once and answers lookups in constant time with the
  same first-match semantics, which the aggregator uses when it joins many
  definitions against the same dataset.

Interfaces:
  :class:`LiveResult`, :func:`parse_results`, :func:`find_result`,
  :class:`ResultIndex`.

Invariants & Safety:
  - Counts are never negative; :func:`parse_results` rejects such payloads.
  - When a dataset holds duplicate queries the earliest entry is returned.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class LiveResult:
    """Counts reported by the search backend for one query."""

    query: str
    count: int = 0
    unread: int = 0

    def __post_init__(self) -> None:
        if self.count < 0 or self.unread < 0:
            raise ValueError(f"negative counts for query {self.query!r}")


def parse_results(payload: Iterable[Any]) -> List[LiveResult]:
    """Convert a backend response into :class:`LiveResult` records.

    Entries may already be :class:`LiveResult` instances or mappings with
    ``query``, ``count`` and ``unread`` keys; missing counts default to zero.

    Raises:
      ValueError: If an entry lacks a query or carries negative counts.
    """

    results: List[LiveResult] = []
    for entry in payload:
        if isinstance(entry, LiveResult):
            results.append(entry)
            continue
        if not isinstance(entry, Mapping) or not isinstance(entry.get("query"), str):
            raise ValueError(f"malformed live result entry: {entry!r}")
        results.append(
            LiveResult(
                query=entry["query"],
                count=int(entry.get("count") or 0),
                unread=int(entry.get("unread") or 0),
            )
        )
    return results


def find_result(query: str, dataset: Sequence[LiveResult]) -> Optional[LiveResult]:
    """Return the first entry of ``dataset`` whose query equals ``query``."""

    for result in dataset:
        if result.query == query:
            return result
    return None


class ResultIndex:
    """Hash index over a result dataset, preserving first-match semantics."""

    def __init__(self, dataset: Iterable[LiveResult] = ()) -> None:
        self._by_query: Dict[str, LiveResult] = {}
        for result in dataset:
            self._by_query.setdefault(result.query, result)

    def __len__(self) -> int:
        return len(self._by_query)

    def find(self, query: str) -> Optional[LiveResult]:
        return self._by_query.get(query)
