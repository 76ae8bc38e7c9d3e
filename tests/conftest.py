"""Pytest configuration: every test gets its own database and XDG directories."""

from pathlib import Path

import pytest
from loguru import logger

from musiq.core import database


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config, data and database locations at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("MUSIQ_DB_PATH", str(tmp_path / "music.db"))
    monkeypatch.delenv("MUSIQ_LOG_LEVEL", raising=False)
    # Keep ./config.toml lookups away from the repository checkout
    monkeypatch.chdir(tmp_path)
    database.set_database_path(None)

    yield tmp_path

    database.set_database_path(None)
    logger.remove()


@pytest.fixture
def db_path(isolated_env) -> Path:
    """Path of the temporary database file."""
    return isolated_env / "music.db"
