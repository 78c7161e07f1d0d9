#!/usr/bin/env python3
"""
Import Songs Script

Reads title, artist and duration from every audio file under
MUSIC_LIBRARY_PATH (or [library].music_dir) and merges them into the
library. Set OVERWRITE=1 to refresh songs that are already known.

Files without title/artist tags are listed at the end; pass them back as
arguments to fill them in:

    import_songs.py "track01.mp3=Song Title|Artist Name"
"""

import sys
import os
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from showplanner.config import Config
from showplanner.db import Database
from showplanner.ingest.importer import parse_override
from showplanner.ingest.tags import scan_directory
from showplanner.planner import ShowPlanner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """Main import entrypoint."""
    try:
        logger.info("🔍 Starting song import...")

        config = Config.load()
        library_path = os.getenv("MUSIC_LIBRARY_PATH", config.get("library", "music_dir"))
        overwrite = os.getenv("OVERWRITE", "0") == "1"
        overrides = dict(parse_override(arg) for arg in sys.argv[1:])

        staged = scan_directory(library_path)
        if not staged:
            logger.warning("No audio files found!")
            return 0

        with Database(config.get("database", "path")) as db:
            planner = ShowPlanner(db, config.app_settings())
            summary = planner.import_songs(staged, overwrite=overwrite, overrides=overrides)
            stats = db.get_stats()

        for line in summary.messages():
            logger.info(line)
        for item in summary.needs_input:
            logger.info(f"  needs title/artist: \"{item.file_name}=TITLE|ARTIST\"")

        logger.info(
            f"✅ Library: {stats['total_songs']} songs "
            f"({stats['songs_with_duration']} with duration)"
        )
        return 0

    except ValueError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("Import interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Import failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
