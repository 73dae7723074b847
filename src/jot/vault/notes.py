"""Thread notes - one markdown file per thread.

Note format::

    ---
    url: "https://example.com/article"
    title: An article
    favicon: "https://example.com/favicon.ico"
    created_at: "2024-01-15T10:30:00.000Z"
    updated_at: "2024-01-16T08:05:12.345Z"
    ---
    ## Notes

    ### 2024-01-15 10:30
    First comment
"""

import os
from pathlib import Path

from jot.core.types import Thread
from jot.vault.comments import parse_comments, serialize_comments
from jot.vault.dates import FRONTMATTER_DATE_STRATEGIES, format_iso, parse_timestamp
from jot.vault.frontmatter import (
    normalize_field_value,
    parse_frontmatter,
    serialize_markdown,
)


def file_mtime_ms(path: Path) -> int:
    """File modification time in epoch milliseconds."""
    return path.stat().st_mtime_ns // 1_000_000


def read_note(path: Path) -> tuple[dict[str, str], str, int]:
    """
    Read a note from disk.

    Returns:
        (frontmatter, body, mtime_ms)

    Raises:
        OSError, UnicodeDecodeError: If the file can't be read as UTF-8
    """
    content = path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(content)
    return frontmatter, body, file_mtime_ms(path)


def thread_from_note(
    thread_id: str,
    frontmatter: dict[str, str],
    body: str,
    mtime_ms: int,
    title_fallback: str | None = None,
) -> Thread:
    """
    Build a Thread from parsed note parts.

    Placeholder values ("n/a", "none", ...) read as missing. Dates fall back
    to the file modification time.
    """
    created_at = parse_timestamp(
        frontmatter.get("created_at"), FRONTMATTER_DATE_STRATEGIES
    )
    updated_at = parse_timestamp(
        frontmatter.get("updated_at"), FRONTMATTER_DATE_STRATEGIES
    )
    return Thread(
        id=thread_id,
        url=normalize_field_value(frontmatter.get("url")) or thread_id,
        title=normalize_field_value(frontmatter.get("title")) or title_fallback,
        favicon_url=normalize_field_value(frontmatter.get("favicon")),
        preview_image_url=normalize_field_value(frontmatter.get("preview_image")),
        created_at=created_at if created_at is not None else mtime_ms,
        updated_at=updated_at if updated_at is not None else mtime_ms,
        comments=parse_comments(body, mtime_ms),
    )


def read_thread(
    thread_id: str, path: Path, title_fallback: str | None = None
) -> Thread:
    """Load the thread stored at ``path`` under the given id."""
    frontmatter, body, mtime_ms = read_note(path)
    return thread_from_note(thread_id, frontmatter, body, mtime_ms, title_fallback)


def render_thread(thread: Thread) -> str:
    """Render a thread as note content."""
    fields = {
        "url": thread.url,
        "title": thread.title,
        "favicon": thread.favicon_url,
        "preview_image": thread.preview_image_url,
        "created_at": format_iso(thread.created_at),
        "updated_at": format_iso(thread.updated_at),
    }
    return serialize_markdown(fields, serialize_comments(thread.comments))


def write_thread(path: Path, thread: Thread) -> None:
    """
    Write a thread note, replacing the file in one step.

    The temp file is dot-prefixed so folder scans never pick it up.
    """
    temp_path = path.with_name(f".{path.name}.tmp")
    temp_path.write_text(render_thread(thread), encoding="utf-8")
    os.replace(temp_path, path)


def delete_note(path: Path) -> bool:
    """
    Delete a note.

    Returns:
        True if deleted, False if not found
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
