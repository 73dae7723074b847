"""Tests for the config store."""

import json

import pytest

from jot.core.errors import ErrorCode, InvalidInputError, PathNotFoundError
from jot.core.settings import ConfigStore
from jot.core.types import HostConfig


class TestConfigStoreRead:
    """Tests for ConfigStore.read()."""

    def test_missing_file(self, config_store):
        """No config file means not configured."""
        assert config_store.read() is None
        assert config_store.comments_dir() is None
        assert config_store.index_path() is None

    @pytest.mark.parametrize("content", ["{broken", "[]", '{"commentFolder": "Jot"}'])
    def test_unreadable_file(self, config_store, config_file, content):
        """A corrupt or incomplete config reads as not configured."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text(content)

        assert config_store.read() is None

    def test_default_folder(self, config_store, config_file, vault):
        """commentFolder defaults to Jot."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text(json.dumps({"vaultPath": str(vault)}))

        assert config_store.read() == HostConfig(vault_path=str(vault))
        assert config_store.comments_dir() == vault / "Jot"


class TestConfigStoreSetConfig:
    """Tests for ConfigStore.set_config()."""

    @pytest.mark.parametrize("vault_path", ["", "   ", None])
    def test_empty_vault_path(self, config_store, config_file, vault_path):
        """An empty vault path is rejected before anything is written."""
        with pytest.raises(InvalidInputError) as exc_info:
            config_store.set_config(vault_path)

        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert not config_file.exists()

    def test_nonexistent_vault_path(self, config_store, config_file, tmp_path):
        """A missing vault directory is rejected and no config is saved."""
        with pytest.raises(PathNotFoundError) as exc_info:
            config_store.set_config(str(tmp_path / "nowhere"))

        assert exc_info.value.code == ErrorCode.PATH_NOT_FOUND
        assert not config_file.exists()

    def test_vault_path_is_a_file(self, config_store, config_file, tmp_path):
        """A regular file is not a vault and nothing is saved."""
        not_a_dir = tmp_path / "notes.txt"
        not_a_dir.write_text("hello")

        with pytest.raises(PathNotFoundError) as exc_info:
            config_store.set_config(str(not_a_dir))

        assert exc_info.value.code == ErrorCode.PATH_NOT_FOUND
        assert not config_file.exists()
        assert config_store.read() is None

    def test_folder_failure_saves_nothing(self, config_store, config_file, vault):
        """If the comments folder can't be created, the config isn't saved."""
        (vault / "Jot").write_text("in the way")

        with pytest.raises(OSError):
            config_store.set_config(str(vault))

        assert not config_file.exists()

    def test_saves_and_prepares_folder(self, config_store, config_file, vault):
        """Saving creates the comments folder and an empty index."""
        config = config_store.set_config(str(vault))

        assert config == HostConfig(vault_path=str(vault), comment_folder="Jot")
        assert json.loads(config_file.read_text()) == {
            "vaultPath": str(vault),
            "commentFolder": "Jot",
        }
        assert (vault / "Jot").is_dir()
        assert json.loads((vault / "Jot" / ".jot-index.json").read_text()) == {
            "entries": {}
        }
        assert config_store.index_path() == vault / "Jot" / ".jot-index.json"

    def test_custom_folder(self, config_store, vault):
        """A custom comment folder is honored."""
        config_store.set_config(str(vault), "Web Notes")

        assert config_store.read().comment_folder == "Web Notes"
        assert (vault / "Web Notes").is_dir()

    def test_blank_folder_uses_default(self, config_store, vault):
        """A blank folder name falls back to Jot."""
        assert config_store.set_config(str(vault), "  ").comment_folder == "Jot"

    def test_existing_index_preserved(self, config_store, vault):
        """Re-saving the config doesn't wipe an existing index."""
        index_file = vault / "Jot" / ".jot-index.json"
        index_file.parent.mkdir()
        index_file.write_text('{"entries": {"https://a.test/": {"filename": "a.md"}}}')

        config_store.set_config(str(vault))

        assert "https://a.test/" in index_file.read_text()

    def test_explicit_path(self, tmp_path):
        """A config file path can be given explicitly."""
        store = ConfigStore(tmp_path / "custom.json")

        assert store.config_file == tmp_path / "custom.json"
