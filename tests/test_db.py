"""
Unit tests for SQLite persistence of songs, shows and settings.
"""

import sqlite3
import pytest
from datetime import datetime, timedelta, timezone
from showplanner.config import AppSettings
from showplanner.db import Database
from showplanner.models import Show, Song, UsageRecord

T0 = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "db" / "test.sqlite"))
    database.connect()
    yield database
    database.disconnect()


@pytest.fixture
def snapshot():
    show = Show(
        id="show-1",
        name="Radio Show (2hr) - 2024-01-01",
        created_at=T0,
        song_ids=["b", "a", "b", "gone"],
        total_duration_seconds=560,
        intended_hours=2,
    )
    songs = [
        Song(id="b", title="Bravo", artist="Band", uploaded_at=T0, duration_seconds=200,
             file_name="bravo.mp3", last_used=UsageRecord("show-1", T0)),
        Song(id="a", title="Alpha", artist="Band", uploaded_at=T0 + timedelta(seconds=1),
             duration_seconds=160),
    ]
    return songs, [show]


class TestSnapshots:
    """save_snapshot / load_songs / load_shows"""

    def test_empty_database(self, db):
        assert db.load_songs() == []
        assert db.load_shows() == []
        assert db.load_settings() is None

    def test_round_trip_preserves_everything(self, db, snapshot):
        songs, shows = snapshot
        db.save_snapshot(songs, shows)

        assert db.load_songs() == songs
        assert db.load_shows() == shows

    def test_show_order_and_duplicates_kept(self, db, snapshot):
        songs, shows = snapshot
        db.save_snapshot(songs, shows)
        assert db.load_shows()[0].song_ids == ("b", "a", "b", "gone")

    def test_missing_intended_hours(self, db):
        show = Show(id="s", name="S", created_at=T0, intended_hours=None)
        db.save_snapshot([], [show])
        loaded = db.load_shows()[0]
        assert loaded.intended_hours is None
        assert loaded.hours == 1

    def test_save_replaces_previous_snapshot(self, db, snapshot):
        songs, shows = snapshot
        db.save_snapshot(songs, shows)
        db.save_snapshot(songs[:1], [])

        assert [s.id for s in db.load_songs()] == ["b"]
        assert db.load_shows() == []

    def test_stats(self, db, snapshot):
        songs, shows = snapshot
        db.save_snapshot(songs + [Song(id="c", title="C", artist="X", uploaded_at=T0)], shows)
        assert db.get_stats() == {"total_songs": 3, "songs_with_duration": 2, "total_shows": 1}

    def test_failed_save_keeps_old_snapshot(self, db, snapshot):
        songs, shows = snapshot
        db.save_snapshot(songs, shows)

        duplicate_ids = [songs[0], songs[0]]
        with pytest.raises(sqlite3.IntegrityError):
            db.save_snapshot(duplicate_ids, shows)

        assert db.load_songs() == songs

    def test_reopen(self, tmp_path, snapshot):
        path = str(tmp_path / "persist.sqlite")
        songs, shows = snapshot
        with Database(path) as first:
            first.save_snapshot(songs, shows)
        with Database(path) as second:
            assert second.load_shows() == shows


class TestSettings:
    def test_save_and_load(self, db):
        settings = AppSettings(target_song_minutes_per_hour=45, show_creation_mode="count", target_songs_per_hour=10)
        db.save_settings(settings)
        assert db.load_settings() == settings

    def test_save_overwrites(self, db):
        db.save_settings(AppSettings())
        db.save_settings(AppSettings(target_song_minutes_per_hour=30))
        assert db.load_settings().target_song_minutes_per_hour == 30


class TestInMemory:
    def test_memory_database(self):
        with Database(":memory:") as db:
            db.save_snapshot([], [Show(id="s", name="S", created_at=T0)])
            assert len(db.load_shows()) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
