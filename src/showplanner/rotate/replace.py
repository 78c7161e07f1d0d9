"""
Show editing: single-song replacement, whole-playlist swap, reordering.

All functions return new Show snapshots. Usage stamping of newly selected
songs is left to the caller (see rotate.ledger), and replaced or removed
songs keep their old usage records.
"""

import logging
import random
import unicodedata
from typing import List, Optional, Sequence, Tuple

from ..config import AppSettings
from ..models import NotFoundError, Show, Song, with_song_ids
from .availability import AvailabilityEvaluator, is_usable
from .builder import BuildResult, PlaylistBuilder

logger = logging.getLogger(__name__)


def title_sort_key(song: Song) -> Tuple[str, str, str]:
    """
    Case-insensitive, accent-folded sort key for song titles.

    Accented letters sort next to their base letter ("Éclair" between
    "apple" and "Zebra") whatever the process locale is. Titles that differ
    only in accents or case fall back to the casefolded, then raw title.
    """
    decomposed = unicodedata.normalize("NFKD", song.title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), song.title.casefold(), song.title


def suggest(
    show: Show,
    song_id_to_replace: str,
    library: Sequence[Song],
    shows: Sequence[Show],
) -> List[Song]:
    """
    Find songs that may take the place of one slot in a show.

    A candidate is available, has a known duration, is not the song being
    replaced and does not already appear in another slot of the show.

    Args:
        show: Show being edited
        song_id_to_replace: Song currently in the slot
        library: Current song library
        shows: All shows (for availability)

    Returns:
        Candidates sorted by title. May be empty.
    """
    evaluator = AvailabilityEvaluator(shows)
    other_ids = {song_id for song_id in show.song_ids if song_id != song_id_to_replace}

    candidates = [
        song for song in library
        if song.id != song_id_to_replace
        and song.id not in other_ids
        and is_usable(song)
        and evaluator.evaluate(song).available
    ]

    if not candidates:
        _log_empty_breakdown(song_id_to_replace, other_ids, library, evaluator)

    # sorted() is stable, so equal titles keep library order
    return sorted(candidates, key=title_sort_key)


def _log_empty_breakdown(song_id_to_replace, other_ids, library, evaluator) -> None:
    available = sum(1 for s in library if evaluator.evaluate(s).available)
    not_itself = sum(1 for s in library if s.id != song_id_to_replace)
    not_in_show = sum(1 for s in library if s.id not in other_ids)
    with_duration = sum(1 for s in library if is_usable(s))
    logger.debug(
        f"No replacement suggestions for {song_id_to_replace}. "
        f"Library: {len(library)}, available: {available}, not itself: {not_itself}, "
        f"not already in show: {not_in_show}, with duration: {with_duration}"
    )


def apply_replacement(
    show: Show, old_song_id: str, new_song_id: str, library: Sequence[Song]
) -> Show:
    """
    Put new_song_id into the slot held by old_song_id.

    Only the first occurrence of old_song_id is replaced; its position is kept.

    Raises:
        NotFoundError: If old_song_id is not in the show.
    """
    try:
        index = show.song_ids.index(old_song_id)
    except ValueError:
        raise NotFoundError("Song in show", old_song_id) from None

    song_ids = list(show.song_ids)
    song_ids[index] = new_song_id
    logger.info(f"Replaced {old_song_id} with {new_song_id} at position {index} in show {show.id}")
    return with_song_ids(show, song_ids, library)


def swap_playlist(
    show: Show,
    usable_songs: Sequence[Song],
    settings: AppSettings,
    library: Sequence[Song],
    rng: Optional[random.Random] = None,
) -> Tuple[BuildResult, Show]:
    """
    Rebuild a show's whole playlist for its intended length.

    Returns:
        (BuildResult, Show). On EMPTY the original show is returned unchanged.
    """
    result = PlaylistBuilder(settings, rng).build(usable_songs, show.hours)
    if result.is_empty:
        return result, show

    logger.info(f"Swapping playlist of show {show.id}: {len(result.song_ids)} new songs")
    return result, with_song_ids(show, result.song_ids, library)


def move_song(
    show: Show, dragged_song_id: str, target_song_id: str, library: Sequence[Song]
) -> Show:
    """
    Move a song so it sits just before another one (drag and drop).

    The dragged song is taken out first; it is then inserted at the target's
    position in the shortened list, or appended if the target is not found.

    Raises:
        NotFoundError: If dragged_song_id is not in the show.
    """
    if dragged_song_id == target_song_id:
        return show

    song_ids = list(show.song_ids)
    try:
        song_ids.remove(dragged_song_id)
    except ValueError:
        raise NotFoundError("Song in show", dragged_song_id) from None

    try:
        song_ids.insert(song_ids.index(target_song_id), dragged_song_id)
    except ValueError:
        song_ids.append(dragged_song_id)

    return with_song_ids(show, song_ids, library)
