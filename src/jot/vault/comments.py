"""Comment sections in a thread note body.

A body holds any number of sections, each introduced by a level-3 heading
that normally carries the comment's timestamp::

    ## Notes

    ### 2024-01-15 10:30
    First comment

    ### 2024-01-16 08:05
    Second comment

Text before the first heading (including the ``## Notes`` title) is not a
comment. Headings that don't parse as a date still start a comment.
"""

import re

from jot.core.types import Comment
from jot.vault.dates import format_heading, now_ms, parse_timestamp

NOTES_HEADING = "## Notes"

# "### " followed by text, but not "####"
_HEADING = re.compile(r"^###\s+(.*?)\s*$")

# Spacing between undated comments so they keep distinct ids
UNDATED_STEP_MS = 1000


def split_sections(body: str) -> list[tuple[str, str]]:
    """Split a body into (heading text, section text) pairs in file order."""
    sections: list[tuple[str, list[str]]] = []
    for line in body.splitlines():
        match = _HEADING.match(line)
        if match:
            sections.append((match.group(1), []))
        elif sections:
            sections[-1][1].append(line)
    return [(heading, "\n".join(lines)) for heading, lines in sections]


def parse_comments(body: str, file_mtime_ms: int | None = None) -> list[Comment]:
    """
    Extract comments from a note body.

    Args:
        body: Body text after the frontmatter
        file_mtime_ms: File modification time, base for undated comments

    Returns:
        Comments in file order. Empty sections are skipped. A comment whose
        heading has no recognizable date gets ``(mtime or now) - n * 1s``
        where n counts undated comments seen so far in this body.
    """
    comments: list[Comment] = []
    used: set[int] = set()
    fallback_index = 0
    base = file_mtime_ms

    for heading, text in split_sections(body):
        text = text.strip()
        if not text:
            continue

        created_at = parse_timestamp(heading)
        if created_at is None:
            if base is None:
                base = now_ms()
            created_at = base - fallback_index * UNDATED_STEP_MS
            fallback_index += 1

        # Two comments written in the same minute share a heading
        while created_at in used:
            created_at -= 1
        used.add(created_at)

        comments.append(Comment(id=str(created_at), body=text, created_at=created_at))

    return comments


def serialize_comments(comments: list[Comment]) -> str:
    """Render comments as a ``## Notes`` section, one heading per comment."""
    if not comments:
        return ""

    lines = [NOTES_HEADING, ""]
    for comment in comments:
        lines.append(f"### {format_heading(comment.created_at)}")
        lines.append(comment.body)
        lines.append("")
    return "\n".join(lines)
