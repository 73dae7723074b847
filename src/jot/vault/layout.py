"""Vault layout and path helpers.

Threads live in a single flat folder inside the user's vault::

    <vault>/<comment folder>/*.md             one note per thread
    <vault>/<comment folder>/.jot-index.json  URL -> filename index
"""

from pathlib import Path

from jot.core.config import INDEX_FILENAME
from jot.core.types import HostConfig


def get_comments_dir(config: HostConfig | None) -> Path | None:
    """
    Get the folder that holds thread notes.

    Args:
        config: Host config, or None when the host is not configured

    Returns:
        Path to comments folder, or None when not configured
    """
    if config is None or not config.vault_path:
        return None
    return Path(config.vault_path).expanduser() / config.comment_folder


def get_index_path(comments_dir: Path) -> Path:
    """Get the index file path for a comments folder."""
    return comments_dir / INDEX_FILENAME


def ensure_comments_dir(comments_dir: Path) -> Path:
    """Create the comments folder if missing. Safe to call multiple times."""
    comments_dir.mkdir(parents=True, exist_ok=True)
    return comments_dir


def is_note_filename(name: str) -> bool:
    """Whether a directory entry name looks like a thread note."""
    return name.endswith(".md") and not name.startswith(".") and name != INDEX_FILENAME


def list_note_files(comments_dir: Path) -> list[Path]:
    """
    List markdown notes directly inside the comments folder.

    Hidden files, the index and subfolders are ignored.

    Returns:
        Sorted list of note paths (empty if the folder is missing)
    """
    if not comments_dir.is_dir():
        return []
    return sorted(
        path
        for path in comments_dir.iterdir()
        if is_note_filename(path.name) and path.is_file()
    )
