"""
Pytest Configuration and Shared Fixtures

Provides temporary data directories, settings, store and app fixtures,
and a controllable clock for rolling log tests.
"""

import logging
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Test environment setup
os.environ["CONFIG_SERVER_ENVIRONMENT"] = "test"

from config_server.app import create_app
from config_server.config.settings import (
    MonitoringSettings,
    Settings,
    StorageSettings,
    reload_settings,
)
from config_server.data.storage import ResourceStore


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that go through the HTTP app"
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach our root handlers after each test so none outlives its temp dir."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if type(handler).__module__.startswith("_pytest"):
            continue
        root_logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset cached settings after each test."""
    yield
    reload_settings()


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Create temporary data directory."""
    path = temp_dir / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def log_dir(temp_dir: Path) -> Path:
    """Create temporary log directory."""
    path = temp_dir / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 30, 15, 120000))


# =============================================================================
# Store and App Fixtures
# =============================================================================

@pytest.fixture
def store(data_dir: Path) -> ResourceStore:
    """Resource store rooted at a fresh data directory."""
    return ResourceStore(data_dir)


@pytest.fixture
def test_settings(data_dir: Path) -> Settings:
    """Settings pointing at the temporary data directory."""
    return Settings(
        environment="test",
        storage=StorageSettings(data_dir=data_dir),
        monitoring=MonitoringSettings(console_enabled=False),
    )


@pytest.fixture
def app(test_settings: Settings):
    """Create FastAPI app for testing."""
    return create_app(test_settings)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
