"""Storage layer for jot - the JSON thread index."""

from jot.storage.index_repo import ThreadIndex

__all__ = ["ThreadIndex"]
