"""
Audio metadata extraction via mutagen.

Never raises for a bad file: problems are reported on StagedSong.error,
and an unknown duration is reported as 0.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from mutagen import File as MutagenFile, MutagenError

logger = logging.getLogger(__name__)

# Supported audio formats
AUDIO_FORMATS = {".mp3", ".m4a", ".flac", ".wav", ".aif", ".aiff", ".ogg"}


@dataclass
class StagedSong:
    """A file waiting to be imported into the library."""

    file_path: str
    file_name: str
    title: str = ""
    artist: str = ""
    duration_seconds: int = 0
    error: Optional[str] = None

    @property
    def needs_input(self) -> bool:
        return not self.title.strip() or not self.artist.strip()


def _first_tag(tags, name: str) -> str:
    if not tags:
        return ""
    values = tags.get(name)
    if not values:
        return ""
    return str(values[0]).strip()


def read_song_file(file_path: str) -> StagedSong:
    """
    Read title, artist and duration from an audio file.

    Args:
        file_path: Path to audio file.

    Returns:
        StagedSong. error is set when tags or duration could not be read.
    """
    path = Path(file_path)
    staged = StagedSong(file_path=str(path), file_name=path.name)
    errors = []

    try:
        audio = MutagenFile(str(path), easy=True)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read {path.name}: {e}")
        staged.error = f"Could not read tags. Could not read duration. ({e})"
        return staged

    if audio is None:
        staged.error = "Unsupported or unrecognized audio format."
        return staged

    staged.title = _first_tag(audio.tags, "title")
    staged.artist = _first_tag(audio.tags, "artist")
    if not staged.title and not staged.artist:
        errors.append("No title/artist tags found.")

    length = getattr(audio.info, "length", None)
    if length is None or not math.isfinite(length) or length <= 0:
        errors.append("Invalid duration value.")
    else:
        staged.duration_seconds = int(round(length))

    if errors:
        staged.error = " ".join(errors)
        logger.debug(f"{path.name}: {staged.error}")
    else:
        logger.debug(
            f"{path.name}: {staged.artist} - {staged.title} ({staged.duration_seconds}s)"
        )
    return staged


def discover_audio_files(library_path: str = "data/music") -> List[Path]:
    """
    Discover all audio files under a directory.

    Args:
        library_path: Path to music directory.

    Returns:
        Sorted list of audio file paths.
    """
    lib_path = Path(library_path)

    if not lib_path.exists():
        logger.warning(f"Library path not found: {library_path}")
        return []

    audio_files = {
        p for p in lib_path.rglob("*")
        if p.is_file() and p.suffix.lower() in AUDIO_FORMATS
    }

    logger.info(f"Found {len(audio_files)} audio files in {library_path}")
    return sorted(audio_files)


def scan_directory(library_path: str) -> List[StagedSong]:
    """Stage every audio file under library_path."""
    return [read_song_file(str(p)) for p in discover_audio_files(library_path)]
