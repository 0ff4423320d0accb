"""Sources of bookmark and maildir query definitions.

What:
  Define the provider interface the aggregation core reads definitions from,
  plus two implementations: one backed by the runtime configuration file and
  one holding definitions in memory.

Why:
  The core never stores definitions; it asks for them on every aggregation so
  that edits made elsewhere are picked up on the next refresh. Embedding
  applications that still build queries lazily need a way to hand over
  callables, which a YAML file cannot express.

How:
  :class:`DefinitionProvider` is a :class:`typing.Protocol`.
  :class:`RuntimeDefinitionProvider` converts the validated config models on
  each call; :class:`StaticDefinitionProvider` returns copies of the lists it
  was built with.

Interfaces:
  :class:`DefinitionProvider`, :class:`RuntimeDefinitionProvider`,
  :class:`StaticDefinitionProvider`.

Invariants & Safety:
  - Reads are side-effect free from the core's perspective.
  - Returned lists are fresh copies; callers may not mutate provider state.
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Protocol

from ..core.definitions import QueryDefinition
from .loader import get_runtime_config
from .schema import RuntimeConfig


class DefinitionProvider(Protocol):
    """Read accessors for the two definition categories."""

    def bookmarks(self) -> List[QueryDefinition]:
        ...

    def maildirs(self) -> List[QueryDefinition]:
        ...


class RuntimeDefinitionProvider:
    """Definitions taken from the (cached) runtime configuration.

    Args:
      loader: Returns the current :class:`RuntimeConfig`; defaults to
        :func:`~mailqueries.config.loader.get_runtime_config`.
    """

    def __init__(self, loader: Optional[Callable[[], RuntimeConfig]] = None) -> None:
        self._loader = loader if loader is not None else get_runtime_config

    def bookmarks(self) -> List[QueryDefinition]:
        return [entry.to_definition() for entry in self._loader().bookmarks]

    def maildirs(self) -> List[QueryDefinition]:
        return [entry.to_definition() for entry in self._loader().maildirs]


class StaticDefinitionProvider:
    """In-memory definitions, replaceable at runtime."""

    def __init__(
        self,
        bookmarks: Iterable[QueryDefinition] = (),
        maildirs: Iterable[QueryDefinition] = (),
    ) -> None:
        self._bookmarks = list(bookmarks)
        self._maildirs = list(maildirs)

    def bookmarks(self) -> List[QueryDefinition]:
        return list(self._bookmarks)

    def maildirs(self) -> List[QueryDefinition]:
        return list(self._maildirs)

    def replace(
        self,
        *,
        bookmarks: Optional[Iterable[QueryDefinition]] = None,
        maildirs: Optional[Iterable[QueryDefinition]] = None,
    ) -> None:
        if bookmarks is not None:
            self._bookmarks = list(bookmarks)
        if maildirs is not None:
            self._maildirs = list(maildirs)
