"""
Song and tag management for musiq.

Every function opens its own connection; multi-statement operations run in
one transaction through get_db_connection().
"""

import sqlite3
from typing import List, Optional

from loguru import logger

from musiq.core.database import get_db_connection
from musiq.core.exceptions import (
    ConstraintViolationError,
    SongNotFoundError,
    TagNotFoundError,
)

from .models import Song, SongTag


def _get_song_id(conn: sqlite3.Connection, path: str) -> Optional[int]:
    row = conn.execute("SELECT id FROM songs WHERE path = ?", (path,)).fetchone()
    return row["id"] if row else None


def _get_tag_id(conn: sqlite3.Connection, name: str) -> Optional[int]:
    row = conn.execute("SELECT id FROM tags WHERE name = ?", (name,)).fetchone()
    return row["id"] if row else None


def add_song(path: str) -> None:
    """Add a song by path. Adding an existing path is a no-op."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            "INSERT INTO songs (path) VALUES (?) ON CONFLICT (path) DO NOTHING",
            (path,),
        )
        if cursor.rowcount:
            logger.debug(f"Added song: {path}")


def add_tag(name: str) -> None:
    """Add a tag by name. Adding an existing tag is a no-op."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            "INSERT INTO tags (name) VALUES (?) ON CONFLICT (name) DO NOTHING",
            (name,),
        )
        if cursor.rowcount:
            logger.debug(f"Added tag: {name}")


def tag_song(song_path: str, tag_name: str, value: int) -> None:
    """Set a song's value for a tag, overwriting any previous value.

    The song and the tag must already exist; neither is created here.

    Args:
        song_path: Path of a stored song
        tag_name: Name of a stored tag
        value: Integer between 0 and 9

    Raises:
        SongNotFoundError: If no song has this path
        TagNotFoundError: If no tag has this name
        ConstraintViolationError: If value is not an integer in [0, 9]
    """
    # bool is an int subclass; floats would be stored without truncation
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstraintViolationError(
            f"Tag value must be an integer between 0 and 9, got {value!r}"
        )

    with get_db_connection() as conn:
        song_id = _get_song_id(conn, song_path)
        if song_id is None:
            raise SongNotFoundError(song_path)

        tag_id = _get_tag_id(conn, tag_name)
        if tag_id is None:
            raise TagNotFoundError(tag_name)

        try:
            conn.execute(
                """
                INSERT INTO song_tags (song_id, tag_id, value)
                VALUES (?, ?, ?)
                ON CONFLICT (song_id, tag_id) DO UPDATE SET value = excluded.value
            """,
                (song_id, tag_id, value),
            )
        except (sqlite3.IntegrityError, OverflowError) as e:
            # OverflowError: ints beyond 64 bits fail while binding, before the CHECK
            raise ConstraintViolationError(
                f"Cannot set {tag_name}={value} on {song_path}: {e}"
            ) from e

    logger.debug(f"Tagged {song_path}: {tag_name}={value}")


def remove_song(path: str) -> bool:
    """Remove a song and everything that references it.

    Deletes in dependency order: feedback on the song's play events, the play
    events, the song's tag values, then the song row.

    Returns:
        True if the song existed and was removed, False if there was nothing to do
    """
    with get_db_connection() as conn:
        song_id = _get_song_id(conn, path)
        if song_id is None:
            logger.debug(f"remove_song: no song at {path}")
            return False

        conn.execute(
            """
            DELETE FROM feedback
            WHERE play_event_id IN (SELECT id FROM play_events WHERE song_id = ?)
        """,
            (song_id,),
        )
        conn.execute("DELETE FROM play_events WHERE song_id = ?", (song_id,))
        conn.execute("DELETE FROM song_tags WHERE song_id = ?", (song_id,))
        conn.execute("DELETE FROM songs WHERE id = ?", (song_id,))

    logger.info(f"Removed song #{song_id}: {path}")
    return True


def remove_tag(name: str) -> bool:
    """Remove a tag, its feedback rows and every song's value for it.

    Returns:
        True if the tag existed and was removed, False if there was nothing to do
    """
    with get_db_connection() as conn:
        tag_id = _get_tag_id(conn, name)
        if tag_id is None:
            logger.debug(f"remove_tag: no tag named {name}")
            return False

        conn.execute("DELETE FROM feedback WHERE tag_id = ?", (tag_id,))
        conn.execute("DELETE FROM song_tags WHERE tag_id = ?", (tag_id,))
        conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))

    logger.info(f"Removed tag #{tag_id}: {name}")
    return True


def get_song(path: str) -> Optional[Song]:
    """Get a song by path, or None if it isn't stored."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT id, path FROM songs WHERE path = ?", (path,)
        ).fetchone()
        return Song(row["id"], row["path"]) if row else None


def get_song_tags(path: str) -> List[SongTag]:
    """Get all tag values for a song, sorted by tag name.

    Raises:
        SongNotFoundError: If no song has this path
    """
    with get_db_connection() as conn:
        song_id = _get_song_id(conn, path)
        if song_id is None:
            raise SongNotFoundError(path)

        cursor = conn.execute(
            """
            SELECT t.name, st.value
            FROM song_tags st
            JOIN tags t ON st.tag_id = t.id
            WHERE st.song_id = ?
            ORDER BY t.name
        """,
            (song_id,),
        )
        return [SongTag(row["name"], row["value"]) for row in cursor.fetchall()]


def list_tags() -> List[str]:
    """Get all tag names, sorted."""
    with get_db_connection() as conn:
        cursor = conn.execute("SELECT name FROM tags ORDER BY name")
        return [row["name"] for row in cursor.fetchall()]


def list_songs() -> List[Song]:
    """Get all songs, sorted by path."""
    with get_db_connection() as conn:
        cursor = conn.execute("SELECT id, path FROM songs ORDER BY path")
        return [Song(row["id"], row["path"]) for row in cursor.fetchall()]
