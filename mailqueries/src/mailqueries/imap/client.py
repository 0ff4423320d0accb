"""Read-only IMAP session used to count query matches.

What:
  Wrap the third-party ``imapclient`` library in a context manager that logs
  in, learns the server's folder delimiter and counts the messages matching
  a criteria list in a given mailbox.

Why:
  Counting must never change the account: no folder creation, no flag
  updates, no implicit ``\\Seen`` from fetching. Centralising the session
  also keeps mailbox naming quirks and command rates under control when a
  refresh evaluates dozens of queries back to back.

How:
  :meth:`ImapSearchClient.__enter__` connects and lists folders.
  :meth:`ImapSearchClient.count` normalises the mailbox path, returns ``0``
  for mailboxes the server does not have, selects existing ones read-only
  (only when the selection changes) and returns the size of a ``SEARCH``
  result. :meth:`ImapSearchClient._throttle` caps the number of search
  commands per minute.

Interfaces:
  :class:`ImapConfig`, :class:`ImapSearchClient`.

Invariants & Safety:
  - Folders are always selected with ``readonly=True``.
  - At most 500 search commands run within any 60 second window.
"""
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Set

from imapclient import IMAPClient

from ..config.schema import ImapSettings

_RATE_LIMIT = 500
_RATE_WINDOW_S = 60.0


def _search_charset(criteria: List[object]) -> Optional[str]:
    for criterion in criteria:
        if isinstance(criterion, str) and not criterion.isascii():
            return "UTF-8"
    return None


@dataclass
class ImapConfig:
    """Connection parameters for the IMAP account.

    Attributes:
      host: IMAP hostname.
      username: Login credential.
      password: Password or app-specific token.
      port: IMAP port (defaults to 993).
      ssl: Whether to use TLS.
      default_mailbox: Mailbox searched by queries without ``maildir:``.
    """

    host: str
    username: str
    password: str
    port: int = 993
    ssl: bool = True
    default_mailbox: str = "INBOX"

    @classmethod
    def from_settings(cls, settings: ImapSettings) -> "ImapConfig":
        return cls(
            host=settings.host,
            username=settings.username,
            password=settings.resolve_password(),
            port=settings.port,
            ssl=settings.ssl,
            default_mailbox=settings.default_mailbox,
        )


class ImapSearchClient:
    """Context manager exposing read-only, rate-limited message counts."""

    def __init__(self, config: ImapConfig) -> None:
        self._config = config
        self._client: Optional[IMAPClient] = None
        self._delimiter: str = "/"
        self._mailboxes: Set[str] = set()
        self._selected: Optional[str] = None
        self._searches: Deque[float] = deque()

    def __enter__(self) -> "ImapSearchClient":
        self._client = IMAPClient(self._config.host, port=self._config.port, ssl=self._config.ssl)
        self._client.login(self._config.username, self._config.password)
        self._refresh_mailboxes()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._client is None:
            return
        try:
            self._client.logout()
        finally:
            self._client = None
            self._selected = None

    @property
    def client(self) -> IMAPClient:
        """Return the connected ``IMAPClient``.

        Raises:
          RuntimeError: If accessed outside the ``with`` block.
        """

        if self._client is None:
            raise RuntimeError("IMAP client not connected")
        return self._client

    @property
    def config(self) -> ImapConfig:
        return self._config

    def _refresh_mailboxes(self) -> None:
        """Cache folder names and the delimiter reported by ``LIST``."""

        self._mailboxes.clear()
        for _flags, delimiter, name in self.client.list_folders():
            if delimiter:
                decoded = delimiter.decode() if isinstance(delimiter, bytes) else str(delimiter)
                if decoded:
                    self._delimiter = decoded
            decoded_name = name.decode() if isinstance(name, bytes) else str(name)
            self._mailboxes.add(decoded_name)

    def normalize_path(self, mailbox: str) -> str:
        """Rewrite a ``/`` separated path with the server delimiter.

        Empty segments are dropped and ``INBOX`` is matched case-insensitively,
        as IMAP requires.
        """

        segments: List[str] = [chunk.strip() for chunk in mailbox.split("/") if chunk.strip()]
        if segments and segments[0].upper() == "INBOX":
            segments[0] = "INBOX"
        return self._delimiter.join(segments)

    def has_mailbox(self, mailbox: str) -> bool:
        normalized = self.normalize_path(mailbox)
        if normalized == "INBOX":
            return any(name.upper() == "INBOX" for name in self._mailboxes)
        return normalized in self._mailboxes

    def _throttle(self) -> None:
        """Raise when the per-minute search budget is exhausted."""

        now = time.monotonic()
        while self._searches and now - self._searches[0] > _RATE_WINDOW_S:
            self._searches.popleft()
        if len(self._searches) >= _RATE_LIMIT:
            raise RuntimeError("IMAP search rate limit exceeded")
        self._searches.append(now)

    def count(self, mailbox: str, criteria: List[object]) -> int:
        """Return the number of messages in ``mailbox`` matching ``criteria``.

        Mailboxes unknown to the server count as empty. Criteria carrying
        non-ASCII text are sent with ``CHARSET UTF-8``.
        """

        if not self.has_mailbox(mailbox):
            return 0
        normalized = self.normalize_path(mailbox)
        if self._selected != normalized:
            self.client.select_folder(normalized, readonly=True)
            self._selected = normalized
        self._throttle()
        return len(self.client.search(criteria, charset=_search_charset(criteria)))
