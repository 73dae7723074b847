"""Config store - the per-user JSON file that says where the vault is."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from jot.core.config import CONFIG_FILE, DEFAULT_COMMENT_FOLDER
from jot.core.errors import InvalidInputError, PathNotFoundError
from jot.core.types import HostConfig
from jot.storage.index_repo import ThreadIndex
from jot.vault.layout import ensure_comments_dir, get_comments_dir, get_index_path

logger = logging.getLogger(__name__)


class ConfigStore:
    """Reads and writes ``config.json`` ({vaultPath, commentFolder})."""

    def __init__(self, config_file: Path | str | None = None):
        """
        Initialize config store.

        Args:
            config_file: Path to config file (defaults to ~/.jot/config.json)
        """
        self.config_file = Path(config_file) if config_file else CONFIG_FILE

    def read(self) -> HostConfig | None:
        """Read config, or None if missing or unreadable."""
        if not self.config_file.exists():
            return None
        try:
            raw = json.loads(self.config_file.read_text(encoding="utf-8"))
            return HostConfig.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return None

    def write(self, config: HostConfig) -> None:
        """Persist config, creating the config directory if needed."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(
            json.dumps(config.to_wire(), indent=2), encoding="utf-8"
        )

    def comments_dir(self) -> Path | None:
        """Folder holding thread notes, or None when not configured."""
        return get_comments_dir(self.read())

    def index_path(self) -> Path | None:
        """Index file inside the comments folder, or None when not configured."""
        comments_dir = self.comments_dir()
        return get_index_path(comments_dir) if comments_dir else None

    def set_config(
        self, vault_path: str | None, comment_folder: str | None = None
    ) -> HostConfig:
        """
        Validate and save the vault location.

        Creates the comments folder and an empty index if absent.

        Args:
            vault_path: Existing directory to store notes under
            comment_folder: Subfolder name (defaults to "Jot")

        Returns:
            The saved config

        Raises:
            InvalidInputError: If vault_path is empty
            PathNotFoundError: If vault_path is not an existing directory
        """
        if not vault_path or not vault_path.strip():
            raise InvalidInputError("vaultPath is required")

        vault_dir = Path(vault_path).expanduser()
        if not vault_dir.exists():
            raise PathNotFoundError("Vault path does not exist")
        if not vault_dir.is_dir():
            raise PathNotFoundError("Vault path is not a directory")

        config = HostConfig(
            vault_path=vault_path,
            comment_folder=(comment_folder or "").strip() or DEFAULT_COMMENT_FOLDER,
        )
        comments_dir = ensure_comments_dir(get_comments_dir(config))
        ThreadIndex(get_index_path(comments_dir)).ensure_exists()
        self.write(config)

        logger.info("Vault configured at %s", comments_dir)
        return config
