"""Unit tests for the IMAP-backed query service.

What:
  Run :class:`ImapQueryService` and :class:`ImapSearchClient` against
  :class:`FakeImapBackend`.

Why:
  The service must count read-only, treat unknown folders as empty and hand
  every result of a batch to the coordinator in one delivery.

How:
  Patch ``IMAPClient`` with the fake backend via the ``imap_backend`` fixture
  and wire a real :class:`UpdateCoordinator` on top of the service.
"""
from __future__ import annotations

import pytest

from mailqueries.config.providers import StaticDefinitionProvider
from mailqueries.core.coordinator import UpdateCoordinator
from mailqueries.core.definitions import QueryDefinition
from mailqueries.core.results import LiveResult
from mailqueries.imap.client import ImapConfig, ImapSearchClient
from mailqueries.imap.service import ImapQueryService
from mailqueries.imap.search import UnsupportedQueryError

CONFIG = ImapConfig(host="localhost", username="user", password="pass")


def _populate(backend) -> None:
    backend.add("INBOX", flags=["\\Seen"], sender="boss@example.org")
    backend.add("INBOX", sender="boss@example.org", subject="report")
    backend.add("INBOX", flags=["\\Flagged"], sender="friend@example.org")
    backend.add("Archive", flags=["\\Seen"])
    backend.add("Archive")


def test_count_selects_read_only(imap_backend) -> None:
    _populate(imap_backend)

    with ImapSearchClient(CONFIG) as client:
        assert client.count("INBOX", ["ALL"]) == 3
        assert client.count("INBOX", ["UNSEEN"]) == 2
        assert client.count("/Archive/", ["ALL"]) == 2
    assert imap_backend.selects == [("INBOX", True), ("Archive", True)]


def test_unknown_mailbox_counts_as_empty(imap_client) -> None:
    client, backend = imap_client

    assert client.count("Missing", ["ALL"]) == 0
    assert backend.searches == []


def test_inbox_matching_is_case_insensitive(imap_client) -> None:
    client, _ = imap_client

    assert client.normalize_path("inbox/Sub") == "INBOX/Sub"
    assert client.has_mailbox("inbox")


def test_session_logs_in_and_out(imap_backend) -> None:
    with ImapSearchClient(CONFIG) as client:
        assert imap_backend.logged_in == ("user", "pass")
        assert client.config is CONFIG
    assert imap_backend.logged_out


def test_client_property_outside_session() -> None:
    with pytest.raises(RuntimeError):
        ImapSearchClient(CONFIG).client


def test_service_delivers_batch(imap_backend) -> None:
    _populate(imap_backend)
    service = ImapQueryService(CONFIG)
    received = []

    service.submit(["flag:unread", 'maildir:"/Archive"', "from:boss"], received.append)

    assert received == [
        [
            LiveResult("flag:unread", 2, 2),
            LiveResult('maildir:"/Archive"', 2, 1),
            LiveResult("from:boss", 2, 1),
        ]
    ]
    assert service.latest_results() == received[0]


def test_service_failure_delivers_nothing(imap_backend) -> None:
    service = ImapQueryService(CONFIG)
    received = []

    with pytest.raises(UnsupportedQueryError):
        service.submit(["flag:unread OR flag:flagged"], received.append)

    assert received == []
    assert service.latest_results() == []
    assert imap_backend.logged_out


def test_coordinator_over_imap(imap_backend) -> None:
    _populate(imap_backend)
    provider = StaticDefinitionProvider(
        bookmarks=[QueryDefinition.bookmark("flag:unread", name="Unread")],
        maildirs=[QueryDefinition.shortcut("/Archive")],
    )
    coordinator = UpdateCoordinator(provider, ImapQueryService(CONFIG))

    coordinator.request_refresh()
    imap_backend.add("INBOX")
    coordinator.request_refresh()

    unread, archive = coordinator.query_items()
    assert (unread.count, unread.unread, unread.delta_unread) == (3, 3, 1)
    assert (archive.name, archive.count, archive.delta_count) == ("/Archive", 2, 0)


def test_non_ascii_criteria_are_sent_as_utf8(imap_backend) -> None:
    imap_backend.add("INBOX", subject="Réunion mardi")
    imap_backend.add("INBOX", subject="lunch", body="café à 10h")
    imap_backend.add("INBOX", subject="status")
    service = ImapQueryService(CONFIG)

    results = []
    service.submit(["subject:réunion", "café", "subject:status"], results.append)

    assert [(r.query, r.count) for r in results[0]] == [
        ("subject:réunion", 1),
        ("café", 1),
        ("subject:status", 1),
    ]
    assert imap_backend.charsets == ["UTF-8", "UTF-8", "UTF-8", "UTF-8", None, None]
