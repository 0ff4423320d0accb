"""Query definitions as seen by the aggregation core.

What:
  Describe the immutable inputs of the core: the two query categories, the
  two-case query source variant, and the :class:`QueryDefinition` record fed
  by the bookmark and maildir providers.

Why:
  Providers hand over saved searches in slightly different shapes. Bookmarks
  carry a literal query (or, in legacy setups, a callable producing one) while
  maildir shortcuts only name a folder. Normalising both into one record keeps
  the aggregator free of provider-specific branches.

How:
  :class:`Category` enumerates the categories. :class:`LiteralQuery` and
  :class:`SupplierQuery` form the tagged query variant; :func:`as_query_source`
  wraps raw values into it. :class:`QueryDefinition` is a frozen dataclass so
  the core can never mutate provider state.

Interfaces:
  :class:`Category`, :func:`parse_category`, :class:`LiteralQuery`,
  :class:`SupplierQuery`, :func:`as_query_source`, :class:`QueryDefinition`.

Invariants & Safety:
  - Only the two query source variants exist; anything else handed to
    :func:`as_query_source` is kept as a literal and rejected later by the
    normaliser with a :class:`~mailqueries.core.errors.ConfigurationError`.
  - Definitions are never modified after construction.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .errors import InvalidArgumentError


class Category(str, enum.Enum):
    """Category of query definitions."""

    BOOKMARK = "bookmarks"
    MAILDIR = "maildirs"


def parse_category(value: Union[Category, str]) -> Category:
    """Resolve ``value`` into a :class:`Category`.

    Raises:
      InvalidArgumentError: If ``value`` names no known category.
    """

    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"unknown query item category: {value!r}") from exc


@dataclass(frozen=True)
class LiteralQuery:
    """Query given verbatim, possibly as bytes from a non-UTF-8 source."""

    value: Any


@dataclass(frozen=True)
class SupplierQuery:
    """Deprecated form: a zero-argument callable returning the query."""

    supplier: Callable[[], Any]


QuerySource = Union[LiteralQuery, SupplierQuery]


def as_query_source(value: Any) -> Optional[QuerySource]:
    """Wrap a raw provider value in the query source variant.

    ``None`` stays ``None`` (maildir shortcuts have no query). Callables become
    :class:`SupplierQuery`; every other value becomes :class:`LiteralQuery`.
    """

    if value is None or isinstance(value, (LiteralQuery, SupplierQuery)):
        return value
    if callable(value):
        return SupplierQuery(value)
    return LiteralQuery(value)


@dataclass(frozen=True)
class QueryDefinition:
    """A saved search or maildir shortcut supplied by a provider.

    Attributes:
      name: Display name; maildir shortcuts fall back to their path.
      query: Query source for bookmarks, ``None`` for maildir shortcuts.
      maildir: Folder path for maildir shortcuts.
      key: Optional shortcut identifier.
      favorite: Whether the user picked this entry as the favorite.
      hide: Hidden from views; also excluded from refresh requests.
      hide_unread: Counts are not shown; also excluded from refresh requests.
    """

    name: Optional[str] = None
    query: Optional[QuerySource] = None
    maildir: Optional[Any] = None
    key: Optional[str] = None
    favorite: bool = False
    hide: bool = False
    hide_unread: bool = False

    @classmethod
    def bookmark(cls, query: Any, **fields: Any) -> "QueryDefinition":
        """Build a bookmark definition from a raw query value."""

        return cls(query=as_query_source(query), **fields)

    @classmethod
    def shortcut(cls, maildir: Any, **fields: Any) -> "QueryDefinition":
        """Build a maildir shortcut definition."""

        return cls(maildir=maildir, **fields)

    @property
    def visible(self) -> bool:
        return not (self.hide or self.hide_unread)
