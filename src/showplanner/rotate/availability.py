"""
Song availability: the rotation window.

A song stamped with a show that is still among the 4 most recently created
shows is unavailable. While fewer than 4 shows exist, any usage in a show
that still exists blocks the song. Deleting the recording show frees the
song immediately; the song record itself is never touched.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import Show, Song

logger = logging.getLogger(__name__)

ROTATION_WINDOW = 4


@dataclass(frozen=True)
class Availability:
    """Eligibility verdict for one song."""

    available: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.available


def sort_shows_by_recency(shows: Iterable[Show]) -> List[Show]:
    """Shows ordered newest first."""
    return sorted(shows, key=lambda s: s.created_at, reverse=True)


class AvailabilityEvaluator:
    """
    Evaluates songs against one snapshot of the show collection.

    The show ordering and id lookup are computed once per snapshot, so
    evaluating a whole library stays linear.
    """

    def __init__(self, shows: Iterable[Show]):
        self.sorted_shows = sort_shows_by_recency(shows)
        self.shows_by_id = {show.id: show for show in self.sorted_shows}

        if len(self.sorted_shows) >= ROTATION_WINDOW:
            self.window_floor = self.sorted_shows[ROTATION_WINDOW - 1].created_at
        else:
            self.window_floor = None

    def evaluate(self, song: Song) -> Availability:
        """
        Compute whether a song may be selected right now.

        Args:
            song: Song to check

        Returns:
            Availability verdict, with a human-readable reason when unavailable
        """
        usage = song.last_used
        if usage is None:
            return Availability(True)

        recording_show = self.shows_by_id.get(usage.show_id)
        if recording_show is None:
            # Recording show was deleted
            return Availability(True)

        if self.window_floor is None:
            return Availability(
                False,
                f'Used in "{recording_show.name}" (fewer than {ROTATION_WINDOW} total shows exist).',
            )

        if usage.show_created_at >= self.window_floor:
            return Availability(
                False,
                f'Recently used in "{recording_show.name}". Available after more shows.',
            )

        return Availability(True)


def evaluate(song: Song, shows: Iterable[Show]) -> Availability:
    """Evaluate a single song against all shows."""
    return AvailabilityEvaluator(shows).evaluate(song)


def is_usable(song: Song) -> bool:
    """A song is usable for selection only when its duration is known."""
    return song.duration_seconds > 0


def available_songs(songs: Iterable[Song], shows: Iterable[Show]) -> List[Song]:
    """Songs outside their rotation cooldown, in library order."""
    evaluator = AvailabilityEvaluator(shows)
    return [song for song in songs if evaluator.evaluate(song).available]


def usable_songs(songs: Iterable[Song], shows: Iterable[Show]) -> List[Song]:
    """Songs that are both available and have a known duration."""
    usable = [song for song in available_songs(songs, shows) if is_usable(song)]
    logger.debug(f"{len(usable)} usable songs in library")
    return usable
