"""
SQLite Database Management for ShowPlanner.

Persists the song library, the show collection and the app settings.

- Schema: songs (metadata + last usage), shows, show_songs (ordered slots)
- Snapshots are written whole, in one transaction
- No concurrent access (single user, single machine)
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, List, Sequence
from datetime import datetime, timezone

from .config import AppSettings
from .models import Show, Song, UsageRecord

logger = logging.getLogger(__name__)


def _to_iso(value: datetime) -> str:
    return value.isoformat()


def _from_iso(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """SQLite database manager for songs, shows and settings."""

    SCHEMA_VERSION = 1

    # SQL schema definition
    SCHEMA = """
    -- Songs: library metadata + which show last used the song
    CREATE TABLE IF NOT EXISTS songs (
        id TEXT PRIMARY KEY,
        position INTEGER NOT NULL,
        title TEXT NOT NULL,
        artist TEXT NOT NULL,
        uploaded_at TEXT NOT NULL,
        duration_seconds INTEGER NOT NULL DEFAULT 0,
        file_name TEXT,
        last_used_show_id TEXT,
        last_used_show_created_at TEXT
    );

    -- Shows
    CREATE TABLE IF NOT EXISTS shows (
        id TEXT PRIMARY KEY,
        position INTEGER NOT NULL,
        name TEXT NOT NULL,
        created_at TEXT NOT NULL,
        total_duration_seconds INTEGER NOT NULL DEFAULT 0,
        intended_hours INTEGER
    );

    -- Ordered show slots (song ids may repeat; no FK so stale ids survive)
    CREATE TABLE IF NOT EXISTS show_songs (
        show_id TEXT NOT NULL,
        slot INTEGER NOT NULL,
        song_id TEXT NOT NULL,
        PRIMARY KEY (show_id, slot),
        FOREIGN KEY (show_id) REFERENCES shows(id) ON DELETE CASCADE
    );

    -- App settings (single row)
    CREATE TABLE IF NOT EXISTS settings (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        target_song_minutes_per_hour INTEGER NOT NULL,
        show_creation_mode TEXT NOT NULL,
        target_songs_per_hour INTEGER NOT NULL
    );

    -- Schema version tracking
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_show_songs_song_id ON show_songs(song_id);
    """

    def __init__(self, db_path: str = "data/db/showplanner.sqlite"):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        """Open database connection and initialize schema."""
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        logger.info(f"Connected to database: {self.db_path}")
        self._initialize_schema()

    def disconnect(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database disconnected")

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _initialize_schema(self) -> None:
        """Initialize or check schema version."""
        assert self.conn is not None
        cursor = self.conn.cursor()

        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if not cursor.fetchone():
            # First initialization
            logger.info("Initializing database schema...")
            cursor.executescript(self.SCHEMA)
            cursor.execute(
                "INSERT INTO schema_version (version, updated_at) VALUES (?, ?)",
                (self.SCHEMA_VERSION, datetime.now(timezone.utc).isoformat()),
            )
            self.conn.commit()
            logger.info(f"✅ Database schema initialized (v{self.SCHEMA_VERSION})")
        else:
            cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
            current_version = cursor.fetchone()[0]
            if current_version < self.SCHEMA_VERSION:
                logger.warning(
                    f"Schema version mismatch: {current_version} < {self.SCHEMA_VERSION}. "
                    f"Consider running migration."
                )

    @staticmethod
    def _row_to_song(row: sqlite3.Row) -> Song:
        last_used = None
        if row["last_used_show_id"] is not None:
            last_used = UsageRecord(
                show_id=row["last_used_show_id"],
                show_created_at=_from_iso(row["last_used_show_created_at"]),
            )
        return Song(
            id=row["id"],
            title=row["title"],
            artist=row["artist"],
            uploaded_at=_from_iso(row["uploaded_at"]),
            duration_seconds=row["duration_seconds"],
            file_name=row["file_name"],
            last_used=last_used,
        )

    def load_songs(self) -> List[Song]:
        """
        Load the song library in stored order.

        Returns:
            List of Song snapshots.
        """
        assert self.conn is not None
        rows = self.conn.execute("SELECT * FROM songs ORDER BY position").fetchall()
        return [self._row_to_song(row) for row in rows]

    def load_shows(self) -> List[Show]:
        """
        Load all shows with their ordered song ids.

        Returns:
            List of Show snapshots in stored order.
        """
        assert self.conn is not None
        slots = {}
        for row in self.conn.execute("SELECT show_id, song_id FROM show_songs ORDER BY show_id, slot"):
            slots.setdefault(row["show_id"], []).append(row["song_id"])

        rows = self.conn.execute("SELECT * FROM shows ORDER BY position").fetchall()
        return [
            Show(
                id=row["id"],
                name=row["name"],
                created_at=_from_iso(row["created_at"]),
                song_ids=tuple(slots.get(row["id"], ())),
                total_duration_seconds=row["total_duration_seconds"],
                intended_hours=row["intended_hours"],
            )
            for row in rows
        ]

    def save_snapshot(self, songs: Sequence[Song], shows: Sequence[Show]) -> None:
        """
        Replace both collections with new snapshots in one transaction.

        Args:
            songs: Full song library
            shows: Full show collection
        """
        assert self.conn is not None
        with self.conn:
            self.conn.execute("DELETE FROM show_songs")
            self.conn.execute("DELETE FROM shows")
            self.conn.execute("DELETE FROM songs")

            self.conn.executemany(
                """
                INSERT INTO songs (
                    id, position, title, artist, uploaded_at, duration_seconds,
                    file_name, last_used_show_id, last_used_show_created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        song.id,
                        position,
                        song.title,
                        song.artist,
                        _to_iso(song.uploaded_at),
                        song.duration_seconds,
                        song.file_name,
                        song.last_used.show_id if song.last_used else None,
                        _to_iso(song.last_used.show_created_at) if song.last_used else None,
                    )
                    for position, song in enumerate(songs)
                ],
            )
            self.conn.executemany(
                """
                INSERT INTO shows (
                    id, position, name, created_at, total_duration_seconds, intended_hours
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        show.id,
                        position,
                        show.name,
                        _to_iso(show.created_at),
                        show.total_duration_seconds,
                        show.intended_hours,
                    )
                    for position, show in enumerate(shows)
                ],
            )
            self.conn.executemany(
                "INSERT INTO show_songs (show_id, slot, song_id) VALUES (?, ?, ?)",
                [
                    (show.id, slot, song_id)
                    for show in shows
                    for slot, song_id in enumerate(show.song_ids)
                ],
            )
        logger.debug(f"Saved snapshot: {len(songs)} songs, {len(shows)} shows")

    def load_settings(self) -> Optional[AppSettings]:
        """
        Load stored app settings.

        Returns:
            AppSettings, or None if never saved.
        """
        assert self.conn is not None
        row = self.conn.execute("SELECT * FROM settings WHERE id = 1").fetchone()
        if not row:
            return None
        return AppSettings(
            target_song_minutes_per_hour=row["target_song_minutes_per_hour"],
            show_creation_mode=row["show_creation_mode"],
            target_songs_per_hour=row["target_songs_per_hour"],
        )

    def save_settings(self, settings: AppSettings) -> None:
        """Store app settings, replacing any previous value."""
        assert self.conn is not None
        with self.conn:
            self.conn.execute(
                """
                INSERT OR REPLACE INTO settings (
                    id, target_song_minutes_per_hour, show_creation_mode, target_songs_per_hour
                ) VALUES (1, ?, ?, ?)
                """,
                (
                    settings.target_song_minutes_per_hour,
                    settings.show_creation_mode,
                    settings.target_songs_per_hour,
                ),
            )
        logger.info(f"Saved settings: {settings.to_dict()}")

    def get_stats(self) -> dict:
        """
        Get database statistics.

        Returns:
            Dictionary with song/show counts.
        """
        assert self.conn is not None
        cursor = self.conn.cursor()

        cursor.execute("SELECT COUNT(*) FROM songs")
        total_songs = cursor.fetchone()[0]

        cursor.execute("SELECT COUNT(*) FROM songs WHERE duration_seconds > 0")
        songs_with_duration = cursor.fetchone()[0]

        cursor.execute("SELECT COUNT(*) FROM shows")
        total_shows = cursor.fetchone()[0]

        return {
            "total_songs": total_songs,
            "songs_with_duration": songs_with_duration,
            "total_shows": total_shows,
        }
