"""Jot core library - config, errors, typed models and the thread store."""

from jot.core.errors import (
    ErrorCode,
    InvalidInputError,
    JotError,
    NotConfiguredError,
    NotFoundError,
    PathNotFoundError,
)
from jot.core.types import Comment, HostConfig, IndexEntry, Thread, ThreadMetadata

__all__ = [
    # Errors
    "ErrorCode",
    "JotError",
    "InvalidInputError",
    "NotConfiguredError",
    "NotFoundError",
    "PathNotFoundError",
    # Types
    "Comment",
    "HostConfig",
    "IndexEntry",
    "Thread",
    "ThreadMetadata",
]
