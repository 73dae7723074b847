"""Frontmatter parsing and writing for thread notes.

Notes are edited by hand and by other tools. A file whose fence cannot be
found is read as all body, and a malformed line only loses that line.
Values are flat ``key: value`` strings; nested YAML is not supported.
"""

import re
from typing import Any

# Fence patterns, strictest first. Group 1 is the block, group 2 the body.
FENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Standard, optional \r before each newline
    re.compile(r"\A---\r?\n(?:(.*?)\r?\n)?---\r?\n(.*)\Z", re.S),
    # Closing fence with trailing spaces or at end of file
    re.compile(r"\A---\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.S),
    # Minimal: anything after the closing fence is body
    re.compile(r"\A---\r?\n(?:(.*?)\r?\n)?---(.*)\Z", re.S),
)

_LINE_SPLIT = re.compile(r"\r?\n")

# Values humans (or agents) write when they mean "no value"
PLACEHOLDER_VALUES = frozenset(
    {
        "n/a", "na", "n.a.", "n.a",
        "none", "(none)", "[none]",
        "null", "(null)", "[null]",
        "undefined", "(undefined)",
        "empty", "(empty)", "[empty]", "-empty-",
        "missing", "(missing)", "[missing]",
        "unknown", "(unknown)", "[unknown]",
        "-", "--", "---",
        "?", "???",
        "tbd", "todo", "fixme",
    }
)  # fmt: skip


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """
    Locate the frontmatter block using the first fence pattern that matches.

    Returns:
        (block, body) or None if the content has no recognizable frontmatter
    """
    for pattern in FENCE_PATTERNS:
        match = pattern.match(content)
        if match:
            return match.group(1) or "", match.group(2) or ""
    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].replace('\\"', '"').replace("\\'", "'")
    return value


def parse_block(block: str) -> dict[str, str]:
    """Parse ``key: value`` lines, skipping anything that doesn't fit."""
    fields: dict[str, str] = {}
    for line in _LINE_SPLIT.split(block):
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = _unquote(value.strip())
    return fields


def parse_frontmatter(content: str) -> tuple[dict[str, str], str]:
    """
    Parse frontmatter from note content.

    Args:
        content: Full note content including frontmatter

    Returns:
        (frontmatter, body) - Empty frontmatter and the whole content as body
        when no fence is found
    """
    split = split_frontmatter(content)
    if split is None:
        return {}, content
    block, body = split
    return parse_block(block), body


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        # One field per line
        value = " ".join(value.splitlines())
        if ":" in value or '"' in value or "'" in value:
            return '"' + value.replace('"', '\\"') + '"'
        return value
    return str(value)


def write_frontmatter(fields: dict[str, Any]) -> str:
    """
    Write frontmatter fields to a fenced block.

    None values are omitted; field order follows the mapping.

    Returns:
        Frontmatter string with --- delimiters and no trailing newline
    """
    lines = ["---"]
    for key, value in fields.items():
        if value is None:
            continue
        lines.append(f"{key}: {_format_value(value)}")
    lines.append("---")
    return "\n".join(lines)


def serialize_markdown(fields: dict[str, Any], body: str) -> str:
    """Join a frontmatter block and a body into note content."""
    return write_frontmatter(fields) + "\n" + body


def normalize_field_value(value: Any) -> Any:
    """
    Map empty and placeholder strings to None.

    Non-string values pass through unchanged; strings are trimmed.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    trimmed = value.strip()
    if not trimmed or trimmed.lower() in PLACEHOLDER_VALUES:
        return None
    return trimmed
