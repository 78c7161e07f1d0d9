"""
Core data model for ShowPlanner.

Songs and shows are immutable snapshots. Every operation that "changes" an
entity returns a new instance via dataclasses.replace(), so callers can swap
their stored collections in one step.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence, Tuple


class ShowPlannerError(Exception):
    """Base class for workflow errors."""
    pass


class NotFoundError(ShowPlannerError):
    """Raised when a show or song id is not present in the current snapshot."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found: {item_id}")


class SongInUseError(ShowPlannerError):
    """Raised when deleting a song that is still referenced by a show."""
    pass


@dataclass(frozen=True)
class UsageRecord:
    """Which show last used a song, and when that show was created."""

    show_id: str
    show_created_at: datetime


@dataclass(frozen=True)
class Song:
    """A library song. duration_seconds == 0 means the duration is unknown."""

    id: str
    title: str
    artist: str
    uploaded_at: datetime
    duration_seconds: int = 0
    file_name: Optional[str] = None
    last_used: Optional[UsageRecord] = None


@dataclass(frozen=True)
class Show:
    """A planned show: an ordered sequence of song ids."""

    id: str
    name: str
    created_at: datetime
    song_ids: Tuple[str, ...] = ()
    total_duration_seconds: int = 0
    intended_hours: Optional[int] = 1

    def __post_init__(self):
        # Keep snapshots hashable even when built from a list
        if not isinstance(self.song_ids, tuple):
            object.__setattr__(self, "song_ids", tuple(self.song_ids))

    @property
    def hours(self) -> int:
        """Intended hours, defaulting to 1 when unset."""
        return self.intended_hours or 1


def index_songs(songs: Iterable[Song]) -> Dict[str, Song]:
    """Build an id -> Song lookup."""
    return {song.id: song for song in songs}


def total_duration(song_ids: Iterable[str], library: Iterable[Song]) -> int:
    """
    Sum durations of a song id sequence.

    Ids missing from the library count as zero seconds.
    """
    lookup = index_songs(library)
    total = 0
    for song_id in song_ids:
        song = lookup.get(song_id)
        if song is not None:
            total += song.duration_seconds
    return total


def with_song_ids(show: Show, song_ids: Sequence[str], library: Iterable[Song]) -> Show:
    """Return a copy of show with new song ids and a recomputed total."""
    return replace(
        show,
        song_ids=tuple(song_ids),
        total_duration_seconds=total_duration(song_ids, library),
    )


def find_show(shows: Iterable[Show], show_id: str) -> Show:
    """
    Look up a show by id.

    Raises:
        NotFoundError: If no show has that id.
    """
    for show in shows:
        if show.id == show_id:
            return show
    raise NotFoundError("Show", show_id)


def find_song(songs: Iterable[Song], song_id: str) -> Song:
    """
    Look up a song by id.

    Raises:
        NotFoundError: If no song has that id.
    """
    for song in songs:
        if song.id == song_id:
            return song
    raise NotFoundError("Song", song_id)


def format_duration(total_seconds: Optional[float]) -> str:
    """Format seconds as MM:SS (minutes are not wrapped at 60)."""
    if total_seconds is None or total_seconds < 0:
        return "00:00"
    minutes = int(total_seconds // 60)
    seconds = int(total_seconds % 60)
    return f"{minutes:02d}:{seconds:02d}"
