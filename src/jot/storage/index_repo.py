"""Thread index repository - URL -> note filename lookups.

The index is a JSON side file next to the notes::

    {
      "entries": {
        "https://example.com/": {"filename": "example.com-page.md", "hasComments": true}
      }
    }

It is an acceleration structure, not the source of truth: the markdown files
are. Readers treat a missing or corrupt index as empty and never fail on it.
Every write rewrites the whole file through a temp file and ``os.replace``.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from jot.core.types import IndexEntry

logger = logging.getLogger(__name__)


class ThreadIndex:
    """Repository for the per-folder thread index file."""

    def __init__(self, path: Path | str):
        """
        Initialize thread index.

        Args:
            path: Path to the index JSON file
        """
        self.path = Path(path)

    def load(self) -> dict[str, IndexEntry]:
        """Load all entries; missing, corrupt or ill-shaped data reads as empty."""
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Treating unreadable index %s as empty: %s", self.path, e)
            return {}

        entries = raw.get("entries") if isinstance(raw, dict) else None
        if not isinstance(entries, dict):
            logger.warning("Index %s has no entries map, treating as empty", self.path)
            return {}

        result: dict[str, IndexEntry] = {}
        for url, data in entries.items():
            try:
                result[url] = IndexEntry.model_validate(data)
            except ValidationError:
                logger.warning("Skipping malformed index entry for %s", url)
        return result

    def save(self, entries: dict[str, IndexEntry]) -> None:
        """Rewrite the index file with the given entries."""
        data = {"entries": {url: entry.to_wire() for url, entry in entries.items()}}
        temp_path = self.path.with_name(self.path.name + ".tmp")
        temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(temp_path, self.path)

    def ensure_exists(self) -> None:
        """Create an empty index if none exists yet."""
        if not self.path.exists():
            self.save({})

    def lookup(self, url: str) -> IndexEntry | None:
        """Get the entry for a normalized URL, or None."""
        return self.load().get(url)

    def upsert(self, url: str, entry: IndexEntry) -> None:
        """Insert or replace the entry for a normalized URL."""
        entries = self.load()
        entries[url] = entry
        self.save(entries)

    def remove(self, url: str) -> bool:
        """
        Remove the entry for a normalized URL.

        Returns:
            True if an entry was removed, False if none existed
        """
        entries = self.load()
        if url not in entries:
            return False
        del entries[url]
        self.save(entries)
        return True
