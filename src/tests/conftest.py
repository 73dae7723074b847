"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from jot.core.settings import ConfigStore
from jot.core.store import ThreadStore
from jot.host.dispatcher import Dispatcher


@pytest.fixture
def config_file(tmp_path):
    """Config file location inside a temporary home."""
    return tmp_path / "home" / ".jot" / "config.json"


@pytest.fixture
def config_store(config_file):
    """Config store that starts out unconfigured."""
    return ConfigStore(config_file)


@pytest.fixture
def vault(tmp_path):
    """Create an empty vault directory."""
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def unconfigured_store(config_store):
    """Thread store with no vault configured."""
    return ThreadStore(config_store)


@pytest.fixture
def store(config_store, vault):
    """Thread store configured against the temporary vault."""
    thread_store = ThreadStore(config_store)
    thread_store.set_config(str(vault))
    return thread_store


@pytest.fixture
def comments_dir(store) -> Path:
    """The configured comments folder (``<vault>/Jot``)."""
    return store.config_store.comments_dir()


@pytest.fixture
def dispatcher(store):
    """Dispatcher over the configured store."""
    return Dispatcher(store)


@pytest.fixture
def sample_note():
    """A hand-written thread note with two dated comments."""
    return (
        "---\n"
        'url: "https://example.com/article"\n'
        "title: An Article\n"
        'created_at: "2024-01-15T10:30:00.000Z"\n'
        'updated_at: "2024-01-16T08:05:00.000Z"\n'
        "---\n"
        "## Notes\n"
        "\n"
        "### 2024-01-15 10:30\n"
        "First comment\n"
        "\n"
        "### 2024-01-16 08:05\n"
        "Second comment\n"
    )
