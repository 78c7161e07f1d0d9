"""
Merge staged files into the song library.

Matching is by trimmed, case-insensitive title and artist. A match is only
overwritten when the caller asks for it; the song keeps its id and its
rotation history.
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from ..models import Song
from .tags import StagedSong

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ImportSummary:
    """Counts and leftovers of one import run."""

    imported: int = 0
    updated: int = 0
    skipped_existing: int = 0
    skipped_errors: int = 0
    needs_input: List[StagedSong] = field(default_factory=list)

    def messages(self) -> List[str]:
        """Human-readable summary lines."""
        lines = []
        if self.imported:
            lines.append(f"{self.imported} new song(s) imported successfully!")
        if self.updated:
            lines.append(f"{self.updated} existing song(s) overwritten successfully!")
        if self.skipped_existing:
            lines.append(f"{self.skipped_existing} song(s) already in the library were not overwritten.")
        if self.needs_input:
            lines.append(
                f"{len(self.needs_input)} song(s) still require a title and/or artist. "
                f"Please fill them in."
            )
        if self.skipped_errors:
            lines.append(
                f"{self.skipped_errors} song(s) were skipped due to metadata errors "
                f"and missing information."
            )
        if not lines:
            lines.append("No songs were imported or updated.")
        return lines


def _match_key(title: str, artist: str) -> Tuple[str, str]:
    return title.strip().lower(), artist.strip().lower()


def fill_in(item: StagedSong, title: str = "", artist: str = "") -> StagedSong:
    """
    Return a copy of a staged song with a user-supplied title and/or artist.

    Blank values keep what the tags gave. The read error is cleared once both
    fields are filled, so the file is imported instead of skipped.
    """
    filled = replace(
        item,
        title=title.strip() or item.title,
        artist=artist.strip() or item.artist,
    )
    if not filled.needs_input:
        filled = replace(filled, error=None)
    return filled


def apply_overrides(
    staged: Sequence[StagedSong],
    overrides: Mapping[str, Tuple[str, str]],
) -> List[StagedSong]:
    """
    Fill in title and artist for staged files named in overrides.

    Args:
        staged: Files to import
        overrides: file name -> (title, artist)

    Returns:
        New staged list, same order. Files without an override are unchanged.
    """
    result = []
    for item in staged:
        if item.file_name in overrides:
            title, artist = overrides[item.file_name]
            item = fill_in(item, title, artist)
            logger.debug(f"Filled in {item.file_name}: {item.artist} - {item.title}")
        result.append(item)

    unknown = set(overrides) - {item.file_name for item in staged}
    for file_name in sorted(unknown):
        logger.warning(f"No staged file named {file_name}; title/artist ignored")
    return result


def parse_override(text: str) -> Tuple[str, Tuple[str, str]]:
    """
    Parse a FILE=TITLE|ARTIST override.

    Raises:
        ValueError: If the text is not in that form.
    """
    file_name, sep, details = text.partition("=")
    title, bar, artist = details.partition("|")
    if not sep or not bar or not file_name.strip():
        raise ValueError(f"Expected FILE=TITLE|ARTIST, got {text!r}")
    return file_name.strip(), (title.strip(), artist.strip())


def merge_staged(
    library: Sequence[Song],
    staged: Sequence[StagedSong],
    overwrite: bool = False,
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = new_id,
) -> Tuple[List[Song], ImportSummary]:
    """
    Merge staged songs into a library snapshot.

    Args:
        library: Current songs
        staged: Files to import
        overwrite: Replace file details of songs already in the library
        now: Upload timestamp (UTC now if None)
        id_factory: Id generator for new songs

    Returns:
        (new library snapshot, ImportSummary)
    """
    now = now or datetime.now(timezone.utc)
    summary = ImportSummary()
    songs = list(library)
    positions = {_match_key(s.title, s.artist): i for i, s in enumerate(songs)}

    for item in staged:
        if item.needs_input:
            if item.error:
                summary.skipped_errors += 1
                logger.warning(f"Skipping {item.file_name}: {item.error}")
            else:
                summary.needs_input.append(item)
            continue

        key = _match_key(item.title, item.artist)
        if key in positions:
            if not overwrite:
                summary.skipped_existing += 1
                logger.info(f"Not overwriting existing song: {item.artist} - {item.title}")
                continue
            index = positions[key]
            songs[index] = replace(
                songs[index],
                file_name=item.file_name,
                duration_seconds=item.duration_seconds,
                uploaded_at=now,
            )
            summary.updated += 1
            logger.debug(f"Overwrote {songs[index].id} from {item.file_name}")
            continue

        song = Song(
            id=id_factory(),
            title=item.title.strip(),
            artist=item.artist.strip(),
            uploaded_at=now,
            duration_seconds=item.duration_seconds,
            file_name=item.file_name,
        )
        # Later files in the same batch match this song, not a second copy
        positions[key] = len(songs)
        songs.append(song)
        summary.imported += 1
        logger.debug(f"Imported {song.id}: {song.artist} - {song.title}")

    logger.info(
        f"✅ Import finished: {summary.imported} new, {summary.updated} updated, "
        f"{len(summary.needs_input)} need input, {summary.skipped_errors} skipped"
    )
    return songs, summary
