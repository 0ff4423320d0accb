"""Pytest configuration shared by every suite.

What:
  Put the in-repo source tree on ``sys.path`` and point the configuration
  loader at the canned ``tests/data/config.yaml``.

Why:
  The loader keeps the parsed configuration in a process-wide cache. Without
  resetting it around each test, suites would depend on execution order.

How:
  Prepend ``mailqueries/src`` when present, then use an autouse fixture that
  sets ``MAILQUERIES_CONFIG_PATH``, silences informational JSON logs and
  clears the cache before and after each test.

Interfaces:
  :func:`runtime_config` (pytest fixture), ``CONFIG_PATH``.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mailqueries" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mailqueries.config.loader import reset_runtime_config

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "config.yaml"


@pytest.fixture(autouse=True)
def runtime_config(monkeypatch: pytest.MonkeyPatch):
    """Apply the canned configuration file for every test."""

    monkeypatch.setenv("MAILQUERIES_CONFIG_PATH", str(CONFIG_PATH))
    monkeypatch.setenv("MAILQUERIES_LOG_LEVEL", "ERROR")
    reset_runtime_config()
    try:
        yield
    finally:
        reset_runtime_config()
