"""Exception types raised by the query item core.

What:
  Define the small error taxonomy surfaced by aggregation and by the public
  read API.

Why:
  A malformed query definition is a configuration bug that must reach the
  caller unchanged, while an unknown category is a programming error at the
  call site. Distinct types let the CLI and embedding applications react to
  each without string matching.

How:
  Both errors derive from :class:`QueryItemsError`. :class:`InvalidArgumentError`
  also subclasses :class:`ValueError` so generic argument checks keep working.

Interfaces:
  :class:`QueryItemsError`, :class:`ConfigurationError`,
  :class:`InvalidArgumentError`.
"""
from __future__ import annotations


class QueryItemsError(Exception):
    """Base class for errors raised by :mod:`mailqueries.core`."""


class ConfigurationError(QueryItemsError):
    """A query definition cannot be resolved into a UTF-8 query string."""


class InvalidArgumentError(QueryItemsError, ValueError):
    """The caller asked for a category that does not exist."""
