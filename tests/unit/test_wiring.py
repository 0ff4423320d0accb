"""Unit tests for CLI construction helpers."""
from __future__ import annotations

import pytest

from mailqueries._wiring import (
    build_coordinator,
    build_service,
    exponential_backoff,
    resolve_interval,
)
from mailqueries.config.loader import RuntimeConfigError, get_runtime_config
from mailqueries.config.schema import RuntimeConfig
from mailqueries.core.service import QueryService
from mailqueries.imap.service import ImapQueryService


def test_build_service_uses_imap_settings() -> None:
    service = build_service(get_runtime_config())

    assert isinstance(service, ImapQueryService)
    assert service.config.host == "imap.example.org"
    assert service.config.password == "secret"


def test_build_service_requires_imap_section() -> None:
    with pytest.raises(RuntimeConfigError, match="no imap section"):
        build_service(RuntimeConfig())


def test_build_service_reports_missing_password_variable(monkeypatch) -> None:
    monkeypatch.delenv("MQ_MISSING_PASSWORD", raising=False)
    runtime = RuntimeConfig.model_validate(
        {"imap": {"host": "h", "username": "u", "password_env": "MQ_MISSING_PASSWORD"}}
    )

    with pytest.raises(RuntimeConfigError, match="MQ_MISSING_PASSWORD"):
        build_service(runtime)


def test_build_coordinator_accepts_explicit_service() -> None:
    service = QueryService()

    coordinator = build_coordinator(get_runtime_config(), service=service)

    assert coordinator.service is service
    assert len(coordinator.query_items("bookmarks")) == 3


def test_resolve_interval() -> None:
    runtime = get_runtime_config()

    assert resolve_interval(runtime, None) == 60
    assert resolve_interval(runtime, 0) == 60
    assert resolve_interval(runtime, 15) == 15


@pytest.mark.parametrize(
    "failures, expected",
    [(0, 5), (1, 10), (3, 40), (10, 300), (-2, 5)],
)
def test_exponential_backoff(failures: int, expected: int) -> None:
    assert exponential_backoff(base=5, cap=300, failures=failures) == expected


def test_exponential_backoff_after_long_outage() -> None:
    assert exponential_backoff(base=5, cap=300, failures=10_000) == 300
