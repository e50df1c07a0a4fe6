"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from wingetkit.adapters.mock import MockAdapter


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def read_fixture(fixtures_dir: Path):
    """Return a loader for captured winget output."""

    def _read(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def mock_adapter() -> MockAdapter:
    """A mock winget adapter with no responses configured."""
    return MockAdapter(adapter_name="mock-winget")


@pytest.fixture(autouse=True)
def _no_winget_env(monkeypatch):
    """Keep the developer's WINGETKIT_* environment out of tests."""
    for var in ("WINGETKIT_WINGET", "WINGETKIT_LOG_LEVEL", "WINGETKIT_LOG_FILE", "WINGETKIT_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)
