"""Pytest fixtures for unit tests.

What:
  Make ``tests/unit`` importable and expose fixtures for the fake query
  service, a coordinator wired to in-memory definitions, and an IMAP search
  client backed by :class:`FakeImapBackend`.

Why:
  Most unit tests need the same small world: a couple of bookmarks, a
  maildir shortcut, a service whose responses the test controls, and a clock
  that does not move.

Interfaces:
  ``service``, ``provider``, ``coordinator``, ``imap_backend``,
  ``imap_client`` (pytest fixtures).
"""

import sys
from pathlib import Path

import pytest

from mailqueries.config.providers import StaticDefinitionProvider
from mailqueries.core.baseline import BaselineStore
from mailqueries.core.coordinator import UpdateCoordinator
from mailqueries.core.definitions import QueryDefinition
from mailqueries.imap.client import ImapConfig, ImapSearchClient

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from fakes import FIXED_NOW, FakeImapBackend, FakeQueryService


@pytest.fixture
def service() -> FakeQueryService:
    return FakeQueryService()


@pytest.fixture
def provider() -> StaticDefinitionProvider:
    return StaticDefinitionProvider(
        bookmarks=[
            QueryDefinition.bookmark("flag:unread", name="Inbox", key="u"),
            QueryDefinition.bookmark("flag:flagged", name="Flagged", key="f", hide_unread=True),
        ],
        maildirs=[
            QueryDefinition.shortcut("/Archive", key="a"),
            QueryDefinition.shortcut("/Spam", name="Spam", hide=True),
        ],
    )


@pytest.fixture
def coordinator(provider, service) -> UpdateCoordinator:
    return UpdateCoordinator(provider, service, baseline=BaselineStore(clock=lambda: FIXED_NOW))


@pytest.fixture
def imap_backend(monkeypatch: pytest.MonkeyPatch) -> FakeImapBackend:
    backend = FakeImapBackend()
    monkeypatch.setattr(
        "mailqueries.imap.client.IMAPClient", lambda host, port, ssl: backend
    )
    return backend


@pytest.fixture
def imap_client(imap_backend):
    """Yield a connected :class:`ImapSearchClient` and its fake backend."""

    config = ImapConfig(host="localhost", username="user", password="pass")
    with ImapSearchClient(config) as client:
        yield client, imap_backend
