"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import pytest

from tests.fixtures import FakeDirectoryAPI


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep a developer's ROSTER_SYNC_* variables out of the tests."""
    monkeypatch.delenv("ROSTER_SYNC_API_URL", raising=False)
    monkeypatch.delenv("ROSTER_SYNC_TIMEOUT", raising=False)
    monkeypatch.setattr("roster_sync.cli.config.load_dotenv", lambda *a, **k: False)
    monkeypatch.setattr("roster_sync.directory_client.auth.load_dotenv", lambda *a, **k: False)


@pytest.fixture
def scenario_api():
    """Directory with john in Default and bob in Admins (id 5)."""
    return FakeDirectoryAPI(
        {"Admins": ["bob@example.com"]},
        default_members=["john@example.com"],
        group_ids={"Admins": 5},
    )
