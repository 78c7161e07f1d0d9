"""
Ingest Module: Read tags and durations from audio files and merge them
into the song library.

- Files are read one at a time; unreadable files yield an error string
- Songs without a title or artist need manual input before import
- Re-importing a known title/artist overwrites file details, keeps history
"""

__all__ = ["tags", "importer"]
