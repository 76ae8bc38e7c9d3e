"""
Library domain models.

Value objects returned by store reads and song queries.
"""

from typing import NamedTuple


class Song(NamedTuple):
    """A stored song, identified by its filesystem path."""
    id: int
    path: str


class SongTag(NamedTuple):
    """One tag value attached to a song."""
    tag_name: str
    value: int  # 0-9
