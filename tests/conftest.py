from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import sys

import pytest
from loguru import logger

from reportsys.storage import DirectoryBackend, LocalDataStore, MemoryBackend, Session


class FakeClock:
    """Advances one minute per call so every created_at is distinct."""

    def __init__(self, start=datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(minutes=1)
        return current


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    def __init__(self, text="## 📊 Team achievements\n- Shipped the release\n"):
        self.models = FakeModels(text)


@pytest.fixture(autouse=True)
def reset_logger():
    # CLI runs point loguru at CliRunner's temporary stderr
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return LocalDataStore(backend, session=Session(backend), clock=FakeClock())


@pytest.fixture
def dir_store(tmp_path):
    backend = DirectoryBackend(tmp_path / "store")
    return LocalDataStore(backend, clock=FakeClock())


@pytest.fixture
def fake_client():
    return FakeGenaiClient()
