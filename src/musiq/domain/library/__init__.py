"""Library domain - songs, tags and tag values.

This domain handles:
- Song and Tag value objects
- Idempotent creation of songs and tags
- Tag value upserts
- Cascading removal of songs and tags
"""

# Models
from .models import Song, SongTag

# Store operations
from .crud import (
    add_song,
    add_tag,
    tag_song,
    remove_song,
    remove_tag,
    get_song,
    get_song_tags,
    list_tags,
    list_songs,
)

__all__ = [
    # Models
    "Song",
    "SongTag",
    # Store operations
    "add_song",
    "add_tag",
    "tag_song",
    "remove_song",
    "remove_tag",
    "get_song",
    "get_song_tags",
    "list_tags",
    "list_songs",
]
