"""Thread store - URL-keyed comment threads backed by vault notes.

The store resolves URLs through the index to note files, reads and writes
those notes, and keeps the index in step with the folder. Users may add,
edit or delete notes outside the app at any time; ``get_all_threads``
reconciles the index against the folder on every call so nothing else has
to trigger a rescan.
"""

import logging
from pathlib import Path

from jot.core.errors import InvalidInputError, NotConfiguredError, NotFoundError
from jot.core.settings import ConfigStore
from jot.core.types import Comment, HostConfig, IndexEntry, Thread, ThreadMetadata
from jot.storage.index_repo import ThreadIndex
from jot.vault.dates import now_ms
from jot.vault.filenames import FilenameAllocator
from jot.vault.frontmatter import normalize_field_value
from jot.vault.layout import ensure_comments_dir, get_index_path, list_note_files
from jot.vault.notes import (
    delete_note,
    read_note,
    read_thread,
    thread_from_note,
    write_thread,
)
from jot.vault.urls import normalize_url

logger = logging.getLogger(__name__)

# Pseudo-URL scheme for notes that carry no url in their frontmatter
ORPHAN_URL_PREFIX = "file://"


def _require(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{name} is required")
    return value


class ThreadStore:
    """Orchestrates config, index and note files for thread operations."""

    def __init__(self, config_store: ConfigStore | None = None):
        """
        Initialize thread store.

        Args:
            config_store: Config store (defaults to ~/.jot/config.json)
        """
        self.config_store = config_store or ConfigStore()

    # --- Config ---

    def get_config(self) -> HostConfig | None:
        """Get the saved config, or None if not configured."""
        return self.config_store.read()

    def set_config(
        self, vault_path: str | None, comment_folder: str | None = None
    ) -> HostConfig:
        """Validate and save the vault location. See ConfigStore.set_config."""
        return self.config_store.set_config(vault_path, comment_folder)

    # --- Helpers ---

    def _comments_dir(self) -> Path | None:
        return self.config_store.comments_dir()

    def _require_comments_dir(self) -> Path:
        comments_dir = self._comments_dir()
        if comments_dir is None:
            raise NotConfiguredError()
        return comments_dir

    @staticmethod
    def _index(comments_dir: Path) -> ThreadIndex:
        return ThreadIndex(get_index_path(comments_dir))

    @staticmethod
    def _try_read_thread(
        thread_id: str, path: Path, title_fallback: str | None = None
    ) -> Thread | None:
        """Read a thread, logging and returning None if the file is unusable."""
        try:
            return read_thread(thread_id, path, title_fallback)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Skipping unreadable note %s: %s", path.name, e)
            return None

    # --- Reads ---

    def has_comments(self, url: str) -> bool:
        """
        Check whether a URL has comments, from the index alone.

        Returns:
            False on any failure, including when not configured
        """
        try:
            comments_dir = self._comments_dir()
            if comments_dir is None:
                return False
            entry = self._index(comments_dir).lookup(normalize_url(url))
        except Exception:
            logger.warning("hasComments lookup failed for %s", url, exc_info=True)
            return False
        return bool(entry and entry.has_comments)

    def get_thread(self, url: str) -> Thread | None:
        """
        Get the thread for a URL.

        Returns:
            Thread, or None if not indexed, not configured or unreadable
        """
        comments_dir = self._comments_dir()
        if comments_dir is None:
            return None

        key = normalize_url(url)
        entry = self._index(comments_dir).lookup(key)
        if entry is None:
            return None
        return self._try_read_thread(key, comments_dir / entry.filename)

    def get_all_threads(self) -> list[Thread]:
        """
        Get every thread, reconciling the index with the folder.

        1. Indexed entries whose file is gone are pruned; the rest are loaded.
        2. Notes in the folder the index doesn't know about are adopted and
           indexed under their frontmatter URL (or a ``file://`` pseudo-URL).
        3. The index is saved if either step changed it. A failed save is
           logged and the collected threads are still returned.

        Returns:
            Threads sorted by updatedAt, newest first
        """
        comments_dir = self._comments_dir()
        if comments_dir is None or not comments_dir.is_dir():
            return []

        index = self._index(comments_dir)
        entries = index.load()
        threads: list[Thread] = []
        seen: set[str] = set()
        dirty = False

        for key, entry in list(entries.items()):
            seen.add(entry.filename)
            path = comments_dir / entry.filename
            if not path.is_file():
                logger.info("Pruning index entry for missing note %s", entry.filename)
                del entries[key]
                dirty = True
                continue
            thread = self._try_read_thread(key, path)
            if thread is not None:
                threads.append(thread)

        try:
            note_files = list_note_files(comments_dir)
        except OSError as e:
            logger.warning("Could not scan %s: %s", comments_dir, e)
            note_files = []

        for path in note_files:
            if path.name in seen:
                continue
            thread = self._adopt_note(path, entries)
            if thread is None:
                continue
            threads.append(thread)
            entries[thread.id] = IndexEntry(
                filename=path.name, has_comments=bool(thread.comments)
            )
            seen.add(path.name)
            dirty = True
            logger.info("Indexed untracked note %s as %s", path.name, thread.id)

        if dirty:
            try:
                index.save(entries)
            except OSError as e:
                logger.warning("Could not save reconciled index: %s", e)

        threads.sort(key=lambda t: t.updated_at, reverse=True)
        return threads

    def _adopt_note(self, path: Path, entries: dict[str, IndexEntry]) -> Thread | None:
        """Build a thread for a note the index doesn't reference."""
        try:
            frontmatter, body, mtime_ms = read_note(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable note %s: %s", path.name, e)
            return None

        url = normalize_field_value(frontmatter.get("url"))
        key = normalize_url(url or f"{ORPHAN_URL_PREFIX}{path.name}")
        if key in entries:
            # Another note already owns this URL, e.g. a copied file
            logger.warning(
                "Not indexing %s: %s already maps to %s",
                path.name,
                key,
                entries[key].filename,
            )
            return None

        try:
            return thread_from_note(
                key, frontmatter, body, mtime_ms, title_fallback=path.stem
            )
        except ValueError as e:
            logger.warning("Skipping unparseable note %s: %s", path.name, e)
            return None

    # --- Mutations ---

    def append_comment(
        self, url: str, body: str, metadata: ThreadMetadata | None = None
    ) -> Thread:
        """
        Append a comment to a URL's thread, creating the thread if needed.

        Metadata fields that are provided and non-empty overwrite the thread's.

        Returns:
            The updated thread

        Raises:
            InvalidInputError: If url or body is empty (checked before any I/O)
            NotConfiguredError: If no vault is configured
        """
        _require(url, "url")
        _require(body, "body")
        comments_dir = ensure_comments_dir(self._require_comments_dir())

        key = normalize_url(url)
        index = self._index(comments_dir)
        entry = index.lookup(key)
        now = now_ms()

        thread = None
        if entry is not None:
            path = comments_dir / entry.filename
            if path.exists():
                thread = read_thread(key, path)
            else:
                logger.info("Recreating missing note %s", entry.filename)
        else:
            title = metadata.title if metadata else None
            filename = FilenameAllocator(comments_dir).allocate(url, title)
            entry = IndexEntry(filename=filename)
            path = comments_dir / filename
            if path.exists():
                # The allocator only reuses a file that already holds this URL
                thread = read_thread(key, path)

        if thread is None:
            thread = Thread(id=key, url=key, created_at=now, updated_at=now)

        if metadata is not None:
            for field in ("title", "favicon_url", "preview_image_url"):
                value = getattr(metadata, field)
                if value and value.strip():
                    setattr(thread, field, value.strip())

        existing_ids = {c.id for c in thread.comments}
        created_at = now
        while str(created_at) in existing_ids:
            created_at += 1
        thread.comments.append(
            Comment(id=str(created_at), body=body.strip(), created_at=created_at)
        )
        thread.updated_at = created_at

        write_thread(path, thread)
        index.upsert(key, IndexEntry(filename=entry.filename, has_comments=True))
        logger.debug("Appended comment %s to %s", created_at, entry.filename)
        return thread

    def delete_comment(self, url: str, comment_id: str) -> Thread:
        """
        Delete one comment from a URL's thread.

        A thread left with no comments is still written; callers decide
        whether to delete it with delete_thread.

        Returns:
            The updated thread

        Raises:
            NotFoundError: If the thread or the comment does not exist
        """
        _require(url, "url")
        _require(comment_id, "commentId")
        comments_dir = self._require_comments_dir()

        key = normalize_url(url)
        index = self._index(comments_dir)
        entry = index.lookup(key)
        if entry is None:
            raise NotFoundError("Thread not found")

        path = comments_dir / entry.filename
        thread = self._try_read_thread(key, path)
        if thread is None:
            raise NotFoundError("Thread not found")

        remaining = [c for c in thread.comments if c.id != str(comment_id)]
        if len(remaining) == len(thread.comments):
            raise NotFoundError("Comment not found")

        thread.comments = remaining
        thread.updated_at = now_ms()

        write_thread(path, thread)
        index.upsert(
            key, IndexEntry(filename=entry.filename, has_comments=bool(remaining))
        )
        return thread

    def delete_thread(self, url: str) -> None:
        """
        Delete a URL's note and index entry. Deleting a missing thread is a no-op.

        Raises:
            NotConfiguredError: If no vault is configured
        """
        _require(url, "url")
        comments_dir = self._require_comments_dir()

        key = normalize_url(url)
        index = self._index(comments_dir)
        entry = index.lookup(key)
        if entry is None:
            return

        if delete_note(comments_dir / entry.filename):
            logger.info("Deleted note %s", entry.filename)
        index.remove(key)
