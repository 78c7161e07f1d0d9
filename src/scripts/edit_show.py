#!/usr/bin/env python3
"""
Edit Show Script

Usage:
  edit_show.py swap SHOW_ID
  edit_show.py suggest SHOW_ID SONG_ID
  edit_show.py replace SHOW_ID OLD_SONG_ID NEW_SONG_ID
  edit_show.py move SHOW_ID SONG_ID TARGET_SONG_ID
  edit_show.py delete SHOW_ID
  edit_show.py delete-song SONG_ID
  edit_show.py settings KEY=VALUE [KEY=VALUE ...]
"""

import sys
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from showplanner.config import Config, ConfigError
from showplanner.db import Database
from showplanner.models import ShowPlannerError, format_duration
from showplanner.planner import ShowPlanner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _parse_setting(item: str):
    key, _, value = item.partition("=")
    return key, (int(value) if value.isdigit() else value)


def run(planner: ShowPlanner, command: str, args: list) -> int:
    if command == "swap":
        result, show = planner.swap_show_playlist(args[0])
        if result.is_empty:
            logger.error(result.message)
            return 1
        if result.message:
            logger.warning(f"{result.message} Playlist will be swapped with these songs.")
        logger.info(
            f"✅ Playlist for {show.name!r} swapped with {len(show.song_ids)} songs, "
            f"total duration: {format_duration(show.total_duration_seconds)}"
        )
    elif command == "suggest":
        suggestions = planner.suggest_replacements(args[0], args[1])
        if not suggestions:
            logger.info("No replacement suggestions found.")
        for song in suggestions:
            print(f"{song.id}  {song.title} - {song.artist}  {format_duration(song.duration_seconds)}")
    elif command == "replace":
        show = planner.replace_song(args[0], args[1], args[2])
        logger.info(f"✅ Replaced song in {show.name!r}")
    elif command == "move":
        show = planner.move_song(args[0], args[1], args[2])
        logger.info(f"✅ Reordered {show.name!r}")
    elif command == "delete":
        show = planner.delete_show(args[0])
        logger.info(f"✅ Deleted {show.name!r}")
    elif command == "delete-song":
        song = planner.delete_song(args[0])
        logger.info(f"✅ Deleted {song.title!r}")
    elif command == "settings":
        settings = planner.update_settings(**dict(_parse_setting(a) for a in args))
        logger.info(f"✅ Settings: {settings.to_dict()}")
    else:
        print(__doc__)
        return 2
    return 0


def main():
    """Main edit entrypoint."""
    if len(sys.argv) < 2:
        print(__doc__)
        return 2

    try:
        config = Config.load()
        with Database(config.get("database", "path")) as db:
            planner = ShowPlanner(db, config.app_settings())
            return run(planner, sys.argv[1], sys.argv[2:])

    except (ShowPlannerError, ConfigError) as e:
        logger.error(str(e))
        return 1
    except IndexError:
        print(__doc__)
        return 2
    except KeyboardInterrupt:
        logger.warning("Edit interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Edit failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
