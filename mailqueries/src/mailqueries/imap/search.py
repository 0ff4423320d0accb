"""Translate mu-style query strings into IMAP search criteria.

What:
  Map the query language used by bookmarks and maildir shortcuts
  (``maildir:"/Archive" flag:unread from:alice``) onto a mailbox name plus the
  criteria list consumed by ``imapclient`` search operations.

Why:
  The IMAP execution service must count the same messages a local mail
  indexer would. Keeping the translation in one pure function makes the
  supported subset explicit and easy to test without a server.

How:
  Split the query with :func:`shlex.split` (so quoted paths survive), then
  walk the terms: ``maildir:`` chooses the mailbox, ``flag:``, ``from:``,
  ``to:``, ``cc:``, ``subject:`` and ``date:`` become IMAP keys, ``not``
  negates the next term, ``and`` is implicit and any other word becomes a
  ``TEXT`` search.

Interfaces:
  :class:`SearchPlan`, :func:`translate_query`.

Invariants & Safety:
  - An empty criteria list is replaced by ``ALL``.
  - ``or`` and multiple ``maildir:`` terms are rejected with
    :class:`UnsupportedQueryError` rather than silently miscounted.
"""
from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

_FLAGS = {
    "unread": ["UNSEEN"],
    "new": ["UNSEEN"],
    "read": ["SEEN"],
    "seen": ["SEEN"],
    "flagged": ["FLAGGED"],
    "replied": ["ANSWERED"],
    "draft": ["DRAFT"],
    "trashed": ["DELETED"],
}
_ADDRESS_FIELDS = {"from": "FROM", "f": "FROM", "to": "TO", "t": "TO", "cc": "CC", "c": "CC"}
_SUBJECT_FIELDS = {"subject", "s"}
_RELATIVE_DATE = re.compile(r"^(\d+)([dw])$")


class UnsupportedQueryError(ValueError):
    """Raised when a query uses syntax the IMAP backend cannot express."""


@dataclass
class SearchPlan:
    """Mailbox and criteria for one query."""

    mailbox: str
    criteria: List[object] = field(default_factory=list)

    @property
    def unread_criteria(self) -> List[object]:
        return [*self.criteria, "UNSEEN"]


def _since(expression: str, today: date) -> date:
    start = expression.split("..", 1)[0]
    if start == "today":
        return today
    match = _RELATIVE_DATE.match(start)
    if match is None:
        raise UnsupportedQueryError(f"unsupported date range: {expression!r}")
    amount, unit = int(match.group(1)), match.group(2)
    return today - timedelta(days=amount * (7 if unit == "w" else 1))


def _term(token: str, today: date) -> List[object]:
    prefix, sep, value = token.partition(":")
    prefix = prefix.lower()
    if not sep:
        return ["TEXT", token]
    if prefix == "flag" or prefix == "g":
        try:
            return list(_FLAGS[value.lower()])
        except KeyError:
            raise UnsupportedQueryError(f"unsupported flag: {value!r}") from None
    if prefix in _ADDRESS_FIELDS:
        return [_ADDRESS_FIELDS[prefix], value]
    if prefix in _SUBJECT_FIELDS:
        return ["SUBJECT", value]
    if prefix in {"date", "d"}:
        return ["SINCE", _since(value, today)]
    return ["TEXT", token]


def translate_query(
    query: str,
    default_mailbox: str = "INBOX",
    *,
    today: Optional[date] = None,
) -> SearchPlan:
    """Convert ``query`` into a :class:`SearchPlan`.

    Args:
      query: Canonical query string.
      default_mailbox: Mailbox searched when the query names no maildir.
      today: Reference date for relative ``date:`` ranges.

    Raises:
      UnsupportedQueryError: On ``or``, duplicate ``maildir:`` terms, a
        dangling ``not`` or an unknown flag/date form.
    """

    today = today or date.today()
    try:
        tokens = shlex.split(query)
    except ValueError as exc:
        raise UnsupportedQueryError(f"cannot tokenize query {query!r}: {exc}") from exc
    mailbox: Optional[str] = None
    criteria: List[object] = []
    negate = False
    for token in tokens:
        lowered = token.lower()
        if lowered == "and":
            continue
        if lowered == "or":
            raise UnsupportedQueryError("OR queries are not supported")
        if lowered == "not":
            negate = not negate
            continue
        if lowered.startswith("maildir:") or lowered.startswith("m:"):
            if mailbox is not None:
                raise UnsupportedQueryError(f"query names more than one maildir: {query!r}")
            mailbox = token.partition(":")[2].strip("/") or default_mailbox
            continue
        term = _term(token, today)
        criteria.extend(["NOT", *term] if negate else term)
        negate = False
    if negate:
        raise UnsupportedQueryError(f"dangling NOT in {query!r}")
    return SearchPlan(mailbox=mailbox or default_mailbox, criteria=criteria or ["ALL"])
