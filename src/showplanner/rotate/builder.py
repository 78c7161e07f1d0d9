"""
Playlist Builder: Randomized greedy selection for a new show.

Two modes, chosen by AppSettings.show_creation_mode:
- duration: aim for (T-2)..(T+2) minutes of music per hour. Songs that
  would overflow the upper bound are skipped and the scan continues.
- count: aim for N songs per hour under a T minutes per hour cap. The first
  song that would overflow the cap ends the scan.

The permutation is the only source of randomness in the system.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..config import AppSettings
from ..models import Song, format_duration

logger = logging.getLogger(__name__)

MIN_SHOW_SECONDS_PER_HOUR = 5 * 60
DURATION_TOLERANCE_MINUTES = 2


class BuildStatus(Enum):
    """Outcome of a build."""

    EXACT = "exact"
    PARTIAL = "partial"
    EMPTY = "empty"


@dataclass
class BuildResult:
    """Tagged build outcome. EMPTY results must not be turned into shows."""

    status: BuildStatus
    song_ids: List[str] = field(default_factory=list)
    total_duration: int = 0
    message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.status is BuildStatus.EMPTY


def shuffled(songs: Sequence[Song], rng: Optional[random.Random] = None) -> List[Song]:
    """Return a uniformly random permutation (Fisher-Yates) of songs."""
    order = list(songs)
    (rng or random).shuffle(order)
    return order


class PlaylistBuilder:
    """
    Greedy show builder.

    Scans a random permutation of the usable songs once. No backtracking.
    """

    def __init__(self, settings: AppSettings, rng: Optional[random.Random] = None):
        """
        Args:
            settings: Show creation settings
            rng: Random source (module-level random if None)
        """
        self.settings = settings
        self.rng = rng

    def build(self, usable_songs: Sequence[Song], hours: int) -> BuildResult:
        """
        Build a song sequence for a show of the given length.

        Args:
            usable_songs: Available songs with known duration
            hours: Intended show length in hours (>= 1)

        Returns:
            BuildResult with status EXACT, PARTIAL or EMPTY
        """
        if hours < 1:
            raise ValueError(f"Show length must be at least 1 hour, got {hours}")

        if not usable_songs:
            logger.warning("No usable songs; nothing to build")
            return BuildResult(
                BuildStatus.EMPTY,
                message="No available songs with duration to create a show.",
            )

        candidates = shuffled(usable_songs, self.rng)

        logger.info(
            f"Building {hours}hr show from {len(candidates)} usable songs "
            f"(mode: {self.settings.show_creation_mode})"
        )

        if self.settings.show_creation_mode == "count":
            result = self._build_by_count(candidates, hours)
        else:
            result = self._build_by_duration(candidates, hours)

        if result.is_empty:
            logger.warning(f"Build produced no songs: {result.message}")
        elif result.status is BuildStatus.PARTIAL:
            logger.warning(f"Partial build: {result.message}")
        else:
            logger.info(
                f"✅ Show built: {len(result.song_ids)} songs, "
                f"{result.total_duration}s ({format_duration(result.total_duration)})"
            )
        return result

    def _build_by_duration(self, candidates: List[Song], hours: int) -> BuildResult:
        target = self.settings.target_song_minutes_per_hour
        min_target = max(
            MIN_SHOW_SECONDS_PER_HOUR * hours,
            (target - DURATION_TOLERANCE_MINUTES) * hours * 60,
        )
        max_target = (target + DURATION_TOLERANCE_MINUTES) * hours * 60

        selected: List[str] = []
        total = 0
        for song in candidates:
            if total + song.duration_seconds <= max_target:
                selected.append(song.id)
                total += song.duration_seconds
            else:
                logger.debug(
                    f"Skipping {song.id} ({song.duration_seconds}s): "
                    f"would exceed {max_target}s"
                )

        if not selected:
            return BuildResult(
                BuildStatus.EMPTY,
                message=(
                    f"Could not select any songs for a {hours}hr show. Available songs "
                    f"might be too long for the limit of {format_duration(max_target)}."
                ),
            )

        if total < min_target:
            return BuildResult(
                BuildStatus.PARTIAL,
                selected,
                total,
                f"Could not create a show of at least {format_duration(min_target)}. "
                f"Best attempt for {hours}hr(s): {format_duration(total)} "
                f"with {len(selected)} songs.",
            )

        return BuildResult(BuildStatus.EXACT, selected, total)

    def _build_by_count(self, candidates: List[Song], hours: int) -> BuildResult:
        target_count = self.settings.target_songs_per_hour * hours
        cap = self.settings.target_song_minutes_per_hour * hours * 60

        selected: List[str] = []
        total = 0
        for song in candidates:
            if len(selected) >= target_count:
                break
            if total + song.duration_seconds > cap:
                logger.debug(f"Stopping at {song.id} ({song.duration_seconds}s): cap {cap}s reached")
                break
            selected.append(song.id)
            total += song.duration_seconds

        if not selected:
            return BuildResult(
                BuildStatus.EMPTY,
                message=(
                    f"Could not select any songs for a {hours}hr show targeting "
                    f"{target_count} songs. Available songs might be too long for "
                    f"the cap of {format_duration(cap)}."
                ),
            )

        if len(selected) < target_count:
            return BuildResult(
                BuildStatus.PARTIAL,
                selected,
                total,
                f"Targeted {target_count} songs, but only selected {len(selected)} "
                f"with a total duration of {format_duration(total)}. This might be "
                f"due to the duration cap of {format_duration(cap)} or insufficient songs.",
            )

        return BuildResult(BuildStatus.EXACT, selected, total)


def build(
    usable_songs: Sequence[Song],
    hours: int,
    settings: AppSettings,
    rng: Optional[random.Random] = None,
) -> BuildResult:
    """
    Build a show's song sequence.

    Args:
        usable_songs: Songs that are available and have duration > 0
        hours: Intended show length in hours
        settings: Show creation settings
        rng: Optional random source (for reproducible builds)

    Returns:
        BuildResult
    """
    return PlaylistBuilder(settings, rng).build(usable_songs, hours)
