"""Baseline snapshot of live results used as the reference for deltas.

What:
  Hold the single snapshot of live results (and the moment it was taken)
  against which unread and total deltas are measured.

Why:
  Users want to see how many messages arrived "since I started looking". The
  reference point must be captured once, on the first delivery of results,
  and must survive every later refresh until someone explicitly resets it.

How:
  :class:`BaselineStore` owns an optional :class:`BaselineSnapshot`. Seeding
  copies the results into a tuple, stamps the current time and invalidates the
  attached item cache so no item computed against the old (or missing)
  baseline survives. Resetting clears the snapshot.

Interfaces:
  :class:`BaselineSnapshot`, :class:`BaselineStore`.

Invariants & Safety:
  - The snapshot is an immutable copy; later deliveries cannot alter it.
  - The store never re-seeds on its own; the coordinator decides when.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple

from ..utils.logging import get_logger
from .results import LiveResult

LOGGER = get_logger("mailqueries.baseline")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BaselineSnapshot:
    """Live results frozen at ``taken_at``."""

    results: Tuple[LiveResult, ...]
    taken_at: datetime


class BaselineStore:
    """Owner of the baseline snapshot.

    Args:
      clock: Returns the current time; defaults to UTC wall clock.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._snapshot: Optional[BaselineSnapshot] = None
        self._invalidate: Optional[Callable[[], None]] = None

    def attach(self, invalidate: Callable[[], None]) -> None:
        """Register the cache invalidation triggered by :meth:`seed`."""

        self._invalidate = invalidate

    def current(self) -> Optional[BaselineSnapshot]:
        return self._snapshot

    @property
    def taken_at(self) -> Optional[datetime]:
        return self._snapshot.taken_at if self._snapshot is not None else None

    def seed(self, results: Iterable[LiveResult]) -> BaselineSnapshot:
        """Replace the snapshot with a copy of ``results``.

        What:
          Store the results and the current time as the new baseline.

        Why:
          Items cached before seeding were computed without a baseline and
          would report stale deltas.

        How:
          Freeze the results into a tuple, stamp it, then call the attached
          invalidation hook (which notifies observers).

        Returns:
          The new snapshot.
        """

        snapshot = BaselineSnapshot(results=tuple(results), taken_at=self._clock())
        self._snapshot = snapshot
        LOGGER.info(
            "baseline_seeded",
            entries=len(snapshot.results),
            taken_at=snapshot.taken_at.isoformat(),
        )
        if self._invalidate is not None:
            self._invalidate()
        return snapshot

    def reset(self) -> None:
        """Forget the snapshot; the next delivery will seed a new one."""

        if self._snapshot is not None:
            LOGGER.info("baseline_reset", taken_at=self._snapshot.taken_at.isoformat())
        self._snapshot = None
