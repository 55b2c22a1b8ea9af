"""Pytest configuration and fixtures."""
import os
import tempfile
from pathlib import Path

import pytest

# Keep logs and storage of the imported app out of the working tree during tests
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="usage_backend_tests_"))
os.environ["LOG_DIR"] = str(_TEST_ROOT / "logs")
os.environ["STORAGE_DIR"] = str(_TEST_ROOT / "storage")
os.environ["STATIC_DIR"] = str(_TEST_ROOT / "public")

from usage_backend.config import Settings, get_settings
from usage_backend.storage import InMemoryRecordStore, JsonFileRecordStore


@pytest.fixture
def settings() -> Settings:
    """Settings with the default retention limit."""
    return Settings()


@pytest.fixture
async def record_store(tmp_path):
    """JSON-file record store in a fresh temporary directory."""
    store = JsonFileRecordStore(tmp_path / "storage")
    await store.initialize()
    return store


@pytest.fixture
def memory_store():
    """In-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
async def test_app(record_store):
    """App wired to the temporary record store."""
    from usage_backend.main import app
    from usage_backend.dependencies import get_record_store

    app.dependency_overrides[get_record_store] = lambda: record_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make env changes made by a test visible to ``get_settings``."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
