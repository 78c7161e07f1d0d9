"""
Rotation ledger: remember which show last used each song.

Stamping always overwrites the previous record. Nothing ever clears a
record; availability re-checks the referenced show on every evaluation.
"""

import logging
from dataclasses import replace
from typing import Iterable, List

from ..models import Show, Song, UsageRecord

logger = logging.getLogger(__name__)


def record(song_ids: Iterable[str], show: Show, songs: Iterable[Song]) -> List[Song]:
    """
    Stamp songs as used by a show.

    Args:
        song_ids: Ids of the songs the show just selected
        show: Show that used them
        songs: Current library snapshot

    Returns:
        New library snapshot. Songs not in song_ids are returned as-is.
    """
    stamped_ids = set(song_ids)
    usage = UsageRecord(show_id=show.id, show_created_at=show.created_at)

    updated = []
    stamped = 0
    for song in songs:
        if song.id in stamped_ids:
            updated.append(replace(song, last_used=usage))
            stamped += 1
        else:
            updated.append(song)

    logger.debug(f"Stamped {stamped} songs with show {show.id}")
    return updated
