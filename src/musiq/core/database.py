"""
SQLite storage for musiq: connection management and schema
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from .config import get_data_dir
from .exceptions import ConstraintViolationError, StorageUnavailableError

# Seconds to wait on a locked database before failing
BUSY_TIMEOUT = 30.0

SCHEMA_TABLES = (
    "songs",
    "tags",
    "song_tags",
    "contexts",
    "play_events",
    "feedback",
)

# Applied on every connect; all statements are idempotent.
SCHEMA_SQL = """
BEGIN;

CREATE TABLE IF NOT EXISTS songs (
    id INTEGER PRIMARY KEY,
    path TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS tags (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS song_tags (
    song_id INTEGER NOT NULL,
    tag_id INTEGER NOT NULL,
    value INTEGER NOT NULL CHECK (value BETWEEN 0 AND 9),
    PRIMARY KEY (song_id, tag_id),
    FOREIGN KEY (song_id) REFERENCES songs (id),
    FOREIGN KEY (tag_id) REFERENCES tags (id)
);

-- Recorded queries, for later correlation with playback
CREATE TABLE IF NOT EXISTS contexts (
    id INTEGER PRIMARY KEY,
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
    query TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS play_events (
    id INTEGER PRIMARY KEY,
    song_id INTEGER NOT NULL,
    context_id INTEGER, -- optional
    started_at DATETIME,
    ended_at DATETIME,
    skipped BOOLEAN DEFAULT 0,
    FOREIGN KEY (song_id) REFERENCES songs (id),
    FOREIGN KEY (context_id) REFERENCES contexts (id)
);

CREATE TABLE IF NOT EXISTS feedback (
    id INTEGER PRIMARY KEY,
    play_event_id INTEGER NOT NULL,
    tag_id INTEGER NOT NULL,
    feedback INTEGER NOT NULL CHECK (feedback IN (-1, 1)),
    FOREIGN KEY (play_event_id) REFERENCES play_events (id),
    FOREIGN KEY (tag_id) REFERENCES tags (id)
);

CREATE INDEX IF NOT EXISTS idx_song_tags_tag_id ON song_tags (tag_id);
CREATE INDEX IF NOT EXISTS idx_play_events_song_id ON play_events (song_id);
CREATE INDEX IF NOT EXISTS idx_feedback_play_event_id ON feedback (play_event_id);
CREATE INDEX IF NOT EXISTS idx_feedback_tag_id ON feedback (tag_id);

COMMIT;
"""

_database_path_override: Optional[Path] = None


def set_database_path(path: Optional[str | Path]) -> None:
    """Override the database location for this process (None clears it)."""
    global _database_path_override
    _database_path_override = Path(path).expanduser() if path else None


def get_database_path() -> Path:
    """Get the path to the SQLite database file.

    Resolution order: set_database_path() override, MUSIQ_DB_PATH, data dir.
    """
    if _database_path_override is not None:
        return _database_path_override

    env_path = os.environ.get("MUSIQ_DB_PATH")
    if env_path:
        return Path(env_path).expanduser()

    return get_data_dir() / "music.db"


def connect() -> sqlite3.Connection:
    """Open the database and make sure the full schema exists.

    The schema script runs in a single transaction, so a failed startup never
    leaves a partially created schema behind.

    Returns:
        Open connection with foreign keys enforced and sqlite3.Row rows

    Raises:
        StorageUnavailableError: If the file cannot be opened or initialized
    """
    db_path = get_database_path()
    conn = None
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(SCHEMA_SQL)
    except (sqlite3.Error, OSError) as e:
        if conn is not None:
            if conn.in_transaction:
                conn.rollback()
            conn.close()
        logger.error(f"Cannot open database at {db_path}: {e}")
        raise StorageUnavailableError(
            f"Cannot open database at {db_path}: {e}"
        ) from e

    return conn


@contextmanager
def get_db_connection() -> Iterator[sqlite3.Connection]:
    """Get a fresh connection scoped to one operation.

    Commits when the block finishes, rolls back if it raises, always closes.

    Raises:
        ConstraintViolationError: If a statement breaks a schema constraint
        StorageUnavailableError: For any other sqlite error (e.g. database is locked)
    """
    conn = connect()
    try:
        yield conn
        conn.commit()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise ConstraintViolationError(f"Constraint failed: {e}") from e
    except sqlite3.Error as e:
        conn.rollback()
        logger.error(f"Database error at {get_database_path()}: {e}")
        raise StorageUnavailableError(
            f"Database error at {get_database_path()}: {e}"
        ) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database() -> Path:
    """Create the database file and schema if needed. Returns the database path."""
    with get_db_connection():
        pass
    db_path = get_database_path()
    logger.info(f"Database ready at {db_path}")
    return db_path
