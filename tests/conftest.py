import logging
import os
from pathlib import Path

import pytest

from cacheserde.core.cache_engine import CacheEngine
from cacheserde.infrastructure.config import settings
from cacheserde.infrastructure.filesystem.local_store import LocalFileStore
from cacheserde.infrastructure.serialization.json_serializer import JsonSerializer


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch):
    """Keeps tests away from the real HOME, .env files and CACHESERDE_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in list(os.environ):
        if name.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(name)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Root directory for cache entries in a test."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def store() -> LocalFileStore:
    return LocalFileStore()


@pytest.fixture
def events():
    """Collects every domain event emitted by the engine fixture."""
    return []


@pytest.fixture
def engine(store: LocalFileStore, events) -> CacheEngine:
    return CacheEngine(store, JsonSerializer(), on_event=events.append)


@pytest.fixture
def restore_root_logger():
    """Restores the root logger's handlers and level after setup_logging tests."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
