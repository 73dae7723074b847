"""Lenient timestamp parsing for comment headings and frontmatter dates.

Headings in hand-edited notes come in many shapes, so parsing is an ordered
list of independent strategies; the first one that yields a datetime wins.
Naive values are read as UTC, matching how headings are written.
"""

import re
import time
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

DateStrategy = Callable[[str], datetime | None]

_DATETIME_MINUTES = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})(?:\s+|T)(\d{2}):(\d{2})(?::(\d{2}))?"
)
_DATE_ONLY = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_US_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")

_FREE_TEXT_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%a, %b %d, %Y",
    "%A, %B %d, %Y",
    "%b %d, %Y %H:%M",
    "%B %d, %Y %H:%M",
    "%b %d, %Y %I:%M %p",
    "%B %d, %Y %I:%M %p",
)


def _utc(*args: int) -> datetime | None:
    try:
        return datetime(*args, tzinfo=UTC)
    except ValueError:
        return None


def parse_datetime_minutes(text: str) -> datetime | None:
    """``YYYY-MM-DD HH:MM`` or ``YYYY-MM-DDTHH:MM``, seconds optional."""
    match = _DATETIME_MINUTES.search(text)
    if not match:
        return None
    year, month, day, hour, minute, second = match.groups()
    return _utc(
        int(year), int(month), int(day), int(hour), int(minute), int(second or 0)
    )


def parse_date_only(text: str) -> datetime | None:
    """``YYYY-MM-DD`` with nothing else on the line."""
    match = _DATE_ONLY.fullmatch(text.strip())
    if not match:
        return None
    return _utc(*(int(part) for part in match.groups()))


def parse_us_date(text: str) -> datetime | None:
    """``MM/DD/YYYY`` (leading zeros optional)."""
    match = _US_DATE.search(text)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    return _utc(year, month, day)


def parse_free_text(text: str) -> datetime | None:
    """ISO 8601, RFC 2822 and common named-month forms."""
    value = text.strip()
    if not value:
        return None

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = None
    if parsed is not None:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is not None:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    for fmt in _FREE_TEXT_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


DATE_STRATEGIES: tuple[DateStrategy, ...] = (
    parse_datetime_minutes,
    parse_date_only,
    parse_us_date,
    parse_free_text,
)

# Frontmatter dates are machine-written ISO strings that may carry an offset
FRONTMATTER_DATE_STRATEGIES: tuple[DateStrategy, ...] = (
    parse_free_text,
    parse_datetime_minutes,
    parse_date_only,
    parse_us_date,
)


def to_millis(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds."""
    return round(value.timestamp() * 1000)


def parse_timestamp(
    text: str | None, strategies: tuple[DateStrategy, ...] = DATE_STRATEGIES
) -> int | None:
    """
    Parse free-form text into epoch milliseconds.

    Args:
        text: Heading or frontmatter value
        strategies: Parsers to try in order

    Returns:
        Epoch milliseconds from the first strategy that succeeds, or None
    """
    if not text:
        return None
    for strategy in strategies:
        parsed = strategy(text)
        if parsed is not None:
            return to_millis(parsed)
    return None


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def format_heading(timestamp_ms: int) -> str:
    """Format a timestamp as a minute-precision comment heading (UTC)."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).strftime(
        "%Y-%m-%d %H:%M"
    )


def format_iso(timestamp_ms: int) -> str:
    """Format a timestamp as ISO 8601 with milliseconds, e.g. ``2024-01-15T10:30:00.000Z``."""
    seconds, millis = divmod(timestamp_ms, 1000)
    value = datetime.fromtimestamp(seconds, tz=UTC).replace(microsecond=millis * 1000)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
