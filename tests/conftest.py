"""Shared fixtures for kevents tests."""

import pytest

from kevents import KEvents


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep KEVENTS_* variables and stray .env files out of emitter config."""
    for name in ("KEVENTS_NAME", "KEVENTS_DEBUG", "KEVENTS_MAX_TRACE_EVENTS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def emitter() -> KEvents:
    return KEvents()
