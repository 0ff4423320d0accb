"""Test doubles for the execution service and the IMAP server.

What:
  Provide :class:`FakeQueryService`, a query service whose responses are
  delivered by the test, and :class:`FakeImapBackend`, an in-memory
  replacement for :class:`imapclient.IMAPClient`.

Why:
  The coordinator reacts to asynchronous deliveries; tests need to control
  exactly when a response arrives and what it contains. The IMAP service must
  be exercised without a network.

How:
  :class:`FakeQueryService` records submitted batches and exposes
  :meth:`FakeQueryService.respond`. :class:`FakeImapBackend` keeps messages
  per mailbox and evaluates the subset of ``SEARCH`` keys the translator
  emits.

Interfaces:
  :class:`FakeQueryService`, :class:`FakeImapBackend`, :class:`FakeMessage`,
  ``FIXED_NOW``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from mailqueries.core.service import QueryService

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


class FakeQueryService(QueryService):
    """Query service answering only when the test says so."""

    def __init__(self, auto_response: Optional[Iterable[Any]] = None) -> None:
        super().__init__()
        self.submitted: List[List[str]] = []
        self.auto_response = list(auto_response) if auto_response is not None else None

    def execute(self, queries: List[str]) -> None:
        self.submitted.append(list(queries))
        if self.auto_response is not None:
            self.deliver(self.auto_response)

    def respond(self, payload: Iterable[Any]) -> None:
        self.deliver(payload)


@dataclass
class FakeMessage:
    """Message metadata the fake ``SEARCH`` understands."""

    uid: int
    flags: Set[str] = field(default_factory=set)
    sender: str = "alice@example.org"
    to: str = "bob@example.org"
    subject: str = "hello"
    received: date = field(default_factory=date.today)
    body: str = ""


class FakeImapBackend:
    """Minimal IMAP server emulation for counting tests."""

    def __init__(self, delimiter: str = "/") -> None:
        self.delimiter = delimiter
        self.mailboxes: Dict[str, List[FakeMessage]] = {"INBOX": []}
        self.logged_in: Optional[Tuple[str, str]] = None
        self.logged_out = False
        self.selected: Optional[str] = None
        self.selects: List[Tuple[str, bool]] = []
        self.searches: List[Tuple[str, List[object]]] = []
        self.charsets: List[Optional[str]] = []
        self._uid = 1

    # Test setup ---------------------------------------------------------
    def add(self, mailbox: str, *, flags: Sequence[str] = (), **fields: Any) -> FakeMessage:
        message = FakeMessage(uid=self._uid, flags=set(flags), **fields)
        self._uid += 1
        self.mailboxes.setdefault(mailbox, []).append(message)
        return message

    # IMAPClient surface -------------------------------------------------
    def login(self, username: str, password: str) -> None:
        self.logged_in = (username, password)

    def logout(self) -> None:
        self.logged_out = True

    def list_folders(self):
        return [([], self.delimiter, name) for name in sorted(self.mailboxes)]

    def select_folder(self, name: str, readonly: bool = False) -> None:
        if name not in self.mailboxes:
            raise KeyError(name)
        self.selected = name
        self.selects.append((name, readonly))

    def search(self, criteria: List[object], charset: Optional[str] = None) -> List[int]:
        assert self.selected is not None, "search without selected folder"
        if charset is None:
            # IMAPClient encodes criteria as US-ASCII unless a charset is given.
            for criterion in criteria:
                if isinstance(criterion, str):
                    criterion.encode("ascii")
        self.searches.append((self.selected, list(criteria)))
        self.charsets.append(charset)
        return [
            message.uid
            for message in self.mailboxes[self.selected]
            if self._matches(message, list(criteria))
        ]

    # Criteria evaluation ------------------------------------------------
    def _matches(self, message: FakeMessage, criteria: List[object]) -> bool:
        while criteria:
            ok, criteria = self._evaluate(message, criteria)
            if not ok:
                return False
        return True

    def _evaluate(self, message: FakeMessage, criteria: List[object]) -> Tuple[bool, List[object]]:
        key, rest = str(criteria[0]).upper(), criteria[1:]
        if key == "NOT":
            ok, rest = self._evaluate(message, rest)
            return not ok, rest
        if key == "ALL":
            return True, rest
        flag_keys = {
            "UNSEEN": ("\\Seen", False),
            "SEEN": ("\\Seen", True),
            "FLAGGED": ("\\Flagged", True),
            "ANSWERED": ("\\Answered", True),
            "DRAFT": ("\\Draft", True),
            "DELETED": ("\\Deleted", True),
        }
        if key in flag_keys:
            flag, expected = flag_keys[key]
            return (flag in message.flags) == expected, rest
        value, rest = rest[0], rest[1:]
        if key == "FROM":
            return str(value).lower() in message.sender.lower(), rest
        if key == "TO":
            return str(value).lower() in message.to.lower(), rest
        if key == "CC":
            return False, rest
        if key == "SUBJECT":
            return str(value).lower() in message.subject.lower(), rest
        if key == "SINCE":
            return message.received >= value, rest
        if key == "TEXT":
            haystack = f"{message.subject} {message.body}".lower()
            return str(value).lower() in haystack, rest
        raise ValueError(f"unsupported search key {key}")
