"""Filename allocation for new thread notes."""

import base64
import logging
import re
import zlib
from pathlib import Path
from urllib.parse import urlsplit

from jot.vault.dates import now_ms
from jot.vault.frontmatter import parse_frontmatter
from jot.vault.urls import filename_domain, normalize_url

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 50
DEFAULT_SLUG = "page"
SUFFIX_LENGTH = 6

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Lowercase, collapse non-alphanumeric runs to hyphens, trim and cap."""
    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    return slug[:max_length]


def url_suffix(url: str) -> str:
    """Short filename-safe tag derived from a CRC-32 of the URL."""
    digest = zlib.crc32(url.encode("utf-8")).to_bytes(4, "big")
    encoded = base64.b64encode(digest).decode("ascii")[:SUFFIX_LENGTH]
    return re.sub(r"[+/=]", "x", encoded)


class FilenameAllocator:
    """Derives stable, human-readable filenames for thread notes.

    ``example.com-some-article-title.md`` for a titled page, the URL path slug
    otherwise. A name already used by a different URL gets a short suffix.
    """

    def __init__(self, comments_dir: Path):
        """
        Initialize allocator.

        Args:
            comments_dir: Folder the notes are written to
        """
        self.comments_dir = Path(comments_dir)

    def allocate(self, url: str, title: str | None = None) -> str:
        """
        Pick a filename for the thread at ``url``.

        Never raises: any unexpected failure falls back to a timestamped name
        so that appending a comment still succeeds.

        Args:
            url: Page URL
            title: Page title, preferred over the URL path for the slug

        Returns:
            Bare filename (no directory)
        """
        try:
            return self._allocate(url, title)
        except Exception:
            logger.warning(
                "Falling back to timestamped filename for %s", url, exc_info=True
            )
            return f"comment-{now_ms()}.md"

    def _allocate(self, url: str, title: str | None) -> str:
        domain = filename_domain(url)
        if title and title.strip():
            slug = slugify(title)
        else:
            slug = slugify(urlsplit(url.strip()).path)
        base = f"{domain}-{slug or DEFAULT_SLUG}"

        wanted = normalize_url(url)
        candidates = [f"{base}.md", f"{base}-{url_suffix(wanted)}.md"]
        for filename in candidates:
            if self._is_free_for(filename, wanted):
                return filename

        counter = 2
        while True:
            filename = f"{base}-{url_suffix(wanted)}-{counter}.md"
            if self._is_free_for(filename, wanted):
                return filename
            counter += 1

    def _is_free_for(self, filename: str, normalized_url: str) -> bool:
        """A name is usable if nothing exists there or it already holds this URL."""
        path = self.comments_dir / filename
        if not path.exists():
            return True
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        frontmatter, _ = parse_frontmatter(content)
        existing = frontmatter.get("url")
        return bool(existing) and normalize_url(existing) == normalized_url
