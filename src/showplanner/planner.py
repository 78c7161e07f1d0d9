"""
Show planning workflows.

Each operation loads the current snapshot from the database, runs the
rotation core on it and saves the new snapshot in one transaction. When an
operation aborts (EMPTY build, NotFoundError, SongInUseError) nothing is
written.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from .config import AppSettings
from .ingest.importer import ImportSummary, apply_overrides, merge_staged, new_id
from .ingest.tags import StagedSong
from .models import (
    Show,
    Song,
    SongInUseError,
    find_show,
    find_song,
    index_songs,
)
from .rotate import ledger
from .rotate.availability import Availability, AvailabilityEvaluator, usable_songs
from .rotate.builder import BuildResult, PlaylistBuilder
from .rotate.replace import apply_replacement, move_song, suggest, swap_playlist
from .rotate.segments import HourSegment, segment

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ShowPlanner:
    """
    Orchestrates show creation and editing against a Database.

    The database is the only state; the planner keeps nothing between calls
    except its settings.
    """

    def __init__(
        self,
        database,
        settings: Optional[AppSettings] = None,
        rng: Optional[random.Random] = None,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            database: Connected Database
            settings: Settings to use when none are stored in the database
            rng: Random source for playlist building
            id_factory: Id generator for new shows and songs
            clock: Returns the current time
        """
        self.db = database
        self.settings = database.load_settings() or settings or AppSettings()
        self.rng = rng
        self.id_factory = id_factory
        self.clock = clock
        logger.info(f"ShowPlanner initialized ({self.settings.show_creation_mode} mode)")

    def _snapshot(self) -> Tuple[List[Song], List[Show]]:
        return self.db.load_songs(), self.db.load_shows()

    def update_settings(self, **changes: Any) -> AppSettings:
        """
        Change and persist settings.

        Raises:
            ConfigError: If a value is out of range or unknown.
        """
        self.settings = self.settings.updated(**changes)
        self.db.save_settings(self.settings)
        return self.settings

    def song_availability(self) -> List[Tuple[Song, Availability]]:
        """Availability verdict for every library song, in library order."""
        songs, shows = self._snapshot()
        evaluator = AvailabilityEvaluator(shows)
        return [(song, evaluator.evaluate(song)) for song in songs]

    def create_show(self, hours: int = 1) -> Tuple[BuildResult, Optional[Show]]:
        """
        Build and store a new show.

        Args:
            hours: Intended show length

        Returns:
            (BuildResult, new Show or None when the build was EMPTY)
        """
        songs, shows = self._snapshot()
        result = PlaylistBuilder(self.settings, self.rng).build(usable_songs(songs, shows), hours)
        if result.is_empty:
            return result, None

        created_at = self.clock()
        show = Show(
            id=self.id_factory(),
            name=f"Radio Show ({hours}hr) - {created_at.date().isoformat()}",
            created_at=created_at,
            song_ids=result.song_ids,
            total_duration_seconds=result.total_duration,
            intended_hours=hours,
        )
        songs = ledger.record(result.song_ids, show, songs)
        self.db.save_snapshot(songs, shows + [show])

        logger.info(f"✅ Created show {show.name!r} with {len(show.song_ids)} songs")
        return result, show

    def swap_show_playlist(self, show_id: str) -> Tuple[BuildResult, Show]:
        """
        Replace every song of a show with a fresh selection.

        Raises:
            NotFoundError: If the show does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)

        result, updated = swap_playlist(
            show, usable_songs(songs, shows), self.settings, songs, self.rng
        )
        if result.is_empty:
            return result, show

        songs = ledger.record(result.song_ids, updated, songs)
        shows = [updated if s.id == show_id else s for s in shows]
        self.db.save_snapshot(songs, shows)
        return result, updated

    def suggest_replacements(self, show_id: str, song_id: str) -> List[Song]:
        """
        Candidates for one slot of a show.

        Raises:
            NotFoundError: If the show or the song does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)
        find_song(songs, song_id)
        return suggest(show, song_id, songs, shows)

    def replace_song(self, show_id: str, old_song_id: str, new_song_id: str) -> Show:
        """
        Put a new song into the slot of an old one and stamp the new song.

        Raises:
            NotFoundError: If the show, the new song, or the old slot does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)
        find_song(songs, new_song_id)

        updated = apply_replacement(show, old_song_id, new_song_id, songs)
        songs = ledger.record([new_song_id], updated, songs)
        shows = [updated if s.id == show_id else s for s in shows]
        self.db.save_snapshot(songs, shows)
        return updated

    def move_song(self, show_id: str, dragged_song_id: str, target_song_id: str) -> Show:
        """
        Reorder a show by moving one song before another.

        Raises:
            NotFoundError: If the show or the dragged song does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)

        updated = move_song(show, dragged_song_id, target_song_id, songs)
        shows = [updated if s.id == show_id else s for s in shows]
        self.db.save_snapshot(songs, shows)
        return updated

    def delete_show(self, show_id: str) -> Show:
        """
        Delete a show. Its songs keep their usage records and become
        available again because the show no longer exists.

        Raises:
            NotFoundError: If the show does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)
        self.db.save_snapshot(songs, [s for s in shows if s.id != show_id])
        logger.info(f"Deleted show {show.name!r}")
        return show

    def delete_song(self, song_id: str) -> Song:
        """
        Delete a song from the library.

        Raises:
            NotFoundError: If the song does not exist.
            SongInUseError: If any show still contains the song.
        """
        songs, shows = self._snapshot()
        song = find_song(songs, song_id)
        using = [show.name for show in shows if song_id in show.song_ids]
        if using:
            raise SongInUseError(
                f"Song {song.title!r} is part of {len(using)} show(s) and cannot be deleted: "
                f"{', '.join(using)}"
            )
        self.db.save_snapshot([s for s in songs if s.id != song_id], shows)
        logger.info(f"Deleted song {song.title!r}")
        return song

    def import_songs(
        self,
        staged: Sequence[StagedSong],
        overwrite: bool = False,
        overrides: Optional[Mapping[str, Tuple[str, str]]] = None,
    ) -> ImportSummary:
        """
        Merge staged files into the library and persist it.

        Args:
            staged: Files to import
            overwrite: Replace file details of songs already in the library
            overrides: file name -> (title, artist) for files whose tags are
                missing; applied before merging

        Returns:
            ImportSummary. Files still missing a title or artist are listed in
            needs_input and can be passed back with overrides.
        """
        if overrides:
            staged = apply_overrides(staged, overrides)
        songs, shows = self._snapshot()
        songs, summary = merge_staged(
            songs, staged, overwrite=overwrite, now=self.clock(), id_factory=self.id_factory
        )
        if summary.imported or summary.updated:
            self.db.save_snapshot(songs, shows)
        return summary

    def show_songs(self, show_id: str) -> List[Song]:
        """
        A show's songs in stored order. Ids missing from the library are dropped.

        Raises:
            NotFoundError: If the show does not exist.
        """
        songs, shows = self._snapshot()
        show = find_show(shows, show_id)
        lookup = index_songs(songs)
        return [lookup[song_id] for song_id in show.song_ids if song_id in lookup]

    def show_segments(self, show_id: str) -> List[HourSegment]:
        """
        Hour-by-hour grouping of a show using current settings.

        Raises:
            NotFoundError: If the show does not exist.
        """
        show = find_show(self.db.load_shows(), show_id)
        return segment(
            self.show_songs(show_id),
            show.hours,
            self.settings.target_song_minutes_per_hour,
        )
