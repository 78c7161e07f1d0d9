#!/usr/bin/env python3
"""
Create Show Script

Usage:
  python src/scripts/create_show.py [HOURS]

Builds a new show from the songs currently outside the rotation window.
"""

import sys
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from showplanner.config import Config
from showplanner.db import Database
from showplanner.models import format_duration
from showplanner.planner import ShowPlanner
from showplanner.rotate.builder import BuildStatus

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """Main show creation entrypoint."""
    try:
        config = Config.load()
        hours = int(sys.argv[1]) if len(sys.argv) > 1 else config.get("show", "default_hours", 1)
        logger.info(f"📻 Creating {hours}hr show...")

        with Database(config.get("database", "path")) as db:
            planner = ShowPlanner(db, config.app_settings())
            result, show = planner.create_show(hours)

        if result.status is BuildStatus.EMPTY:
            logger.error(result.message)
            return 1
        if result.status is BuildStatus.PARTIAL:
            logger.warning(f"{result.message} A show was still created with the selected songs.")

        logger.info(
            f"✅ Show {show.name!r} ({show.id}) created with {len(show.song_ids)} songs, "
            f"total duration: {format_duration(show.total_duration_seconds)}"
        )
        return 0

    except KeyboardInterrupt:
        logger.warning("Show creation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Show creation failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
