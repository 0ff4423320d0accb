"""Turn query definitions into canonical UTF-8 query strings.

What:
  Resolve the query source of a :class:`~mailqueries.core.definitions.QueryDefinition`
  into the exact string used both for refresh requests and for matching live
  results, and derive the implicit query of maildir shortcuts.

Why:
  Live results are matched by exact string equality, so the string sent to the
  search backend and the string looked up afterwards must be produced by the
  same function. Query text may come from filesystem names that are not valid
  UTF-8, and older configurations still hand over a callable instead of a
  literal.

How:
  :func:`normalize` unwraps the two-case query variant, invokes deprecated
  suppliers once, and passes the result through :func:`ensure_text`, which
  decodes bytes and re-validates strings carrying surrogate escapes.
  :func:`maildir_query` builds ``maildir:"<path>"`` from a shortcut path.

Interfaces:
  :func:`normalize`, :func:`ensure_text`, :func:`maildir_query`,
  :func:`resolve_query`.

Invariants & Safety:
  - The functions are pure apart from invoking a legacy supplier.
  - Every failure surfaces as :class:`~mailqueries.core.errors.ConfigurationError`;
    nothing is retried or swallowed.
"""
from __future__ import annotations

from typing import Any, Optional

from ..utils.logging import get_logger
from .definitions import Category, LiteralQuery, QueryDefinition, SupplierQuery
from .errors import ConfigurationError

LOGGER = get_logger("mailqueries.normalize")


def ensure_text(value: Any, *, what: str = "query") -> str:
    """Return ``value`` as a valid UTF-8 string.

    Bytes are decoded as UTF-8. Strings that contain surrogate escapes (as
    produced by :func:`os.fsdecode` for undecodable file names) are encoded
    back to their raw bytes and decoded again, so a name that really is UTF-8
    is recovered and one that is not is rejected.

    Raises:
      ConfigurationError: If ``value`` is not text or cannot be decoded.
    """

    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            value.encode("utf-8")
            return value
        except UnicodeEncodeError:
            try:
                raw = value.encode("utf-8", "surrogateescape")
            except UnicodeEncodeError as exc:
                raise ConfigurationError(f"{what} is not valid UTF-8: {exc}") from exc
    else:
        raise ConfigurationError(f"{what} must be a string, got {type(value).__name__}")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"{what} is not valid UTF-8: {exc}") from exc


def normalize(definition: Optional[QueryDefinition]) -> str:
    """Resolve the query string of a bookmark-style definition.

    What:
      Return the canonical query for ``definition``.

    Why:
      Refresh requests and result lookups must agree on the exact text.

    How:
      Literal queries go straight to :func:`ensure_text`. Supplier queries are
      invoked once; exceptions they raise are wrapped so the caller still sees
      a :class:`ConfigurationError`.

    Args:
      definition: Definition to resolve.

    Returns:
      The UTF-8 query string.

    Raises:
      ConfigurationError: If the definition or its query is missing, the
        supplier fails, or the resolved value is not decodable text.
    """

    if definition is None:
        raise ConfigurationError("query definition is missing")
    source = definition.query
    if source is None:
        raise ConfigurationError(f"definition {definition.name!r} has no query")
    if isinstance(source, SupplierQuery):
        LOGGER.warning("legacy_query_supplier", name=definition.name)
        try:
            value = source.supplier()
        except Exception as exc:
            raise ConfigurationError(
                f"query supplier for {definition.name!r} failed: {exc}"
            ) from exc
    elif isinstance(source, LiteralQuery):
        value = source.value
    else:
        raise ConfigurationError(f"unsupported query source {type(source).__name__}")
    return ensure_text(value)


def maildir_query(path: Any) -> str:
    """Return the implicit query of a maildir shortcut."""

    if path is None:
        raise ConfigurationError("maildir shortcut has no maildir path")
    return f'maildir:"{ensure_text(path, what="maildir")}"'


def resolve_query(definition: QueryDefinition, category: Category) -> str:
    """Return the query of ``definition`` according to its category."""

    if definition is None:
        raise ConfigurationError("query definition is missing")
    if category is Category.MAILDIR:
        return maildir_query(definition.maildir)
    return normalize(definition)
