"""
Hour segments: split a show into per-hour groups for display.

Segments never change the stored order; joining them gives back the input.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..models import Song


@dataclass
class HourSegment:
    hour: int
    songs: List[Song] = field(default_factory=list)
    total_duration: int = 0


def segment(
    songs: Sequence[Song], intended_hours: int, target_song_minutes_per_hour: int
) -> List[HourSegment]:
    """
    Partition a show's songs into intended_hours segments.

    A segment is closed when the next song would push it past the hourly
    target, provided it already holds a song and it is not the last hour.
    The last hour takes whatever remains. Trailing hours with no songs are
    returned as empty segments.

    Args:
        songs: Show songs in stored order
        intended_hours: Hours the show was built for
        target_song_minutes_per_hour: Music minutes per hour

    Returns:
        List of HourSegment numbered from 1
    """
    if intended_hours <= 1:
        return [HourSegment(1, list(songs), sum(s.duration_seconds for s in songs))]

    hour_limit = target_song_minutes_per_hour * 60
    segments: List[HourSegment] = []
    current = HourSegment(1)

    for song in songs:
        if (
            current.total_duration + song.duration_seconds > hour_limit
            and current.songs
            and len(segments) < intended_hours - 1
        ):
            segments.append(current)
            current = HourSegment(len(segments) + 1)
        current.songs.append(song)
        current.total_duration += song.duration_seconds

    if current.songs:
        segments.append(current)

    while len(segments) < intended_hours:
        segments.append(HourSegment(len(segments) + 1))

    return segments
