#!/usr/bin/env python3
"""Print shows and song availability.

Usage:
  python src/scripts/show_detail.py            # list shows and song availability
  python src/scripts/show_detail.py SHOW_ID    # hour-by-hour view of one show
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from showplanner.config import Config
from showplanner.db import Database
from showplanner.models import format_duration
from showplanner.planner import ShowPlanner


def print_overview(planner, db):
    for show in sorted(db.load_shows(), key=lambda s: s.created_at, reverse=True):
        print(
            f"{show.id}  {show.name}  {len(show.song_ids)} songs  "
            f"{format_duration(show.total_duration_seconds)}"
        )
    print()
    for song, availability in planner.song_availability():
        status = "available" if availability.available else availability.reason
        print(f"{song.artist} - {song.title} [{format_duration(song.duration_seconds)}]: {status}")


def print_show(planner, show_id):
    for seg in planner.show_segments(show_id):
        print(f"Hour {seg.hour} (Songs: {len(seg.songs)}, Duration: {format_duration(seg.total_duration)})")
        for song in seg.songs:
            print(f"  {song.id}  {song.artist} - {song.title}  {format_duration(song.duration_seconds)}")


def main():
    config = Config.load()
    with Database(config.get("database", "path")) as db:
        planner = ShowPlanner(db, config.app_settings())
        if len(sys.argv) > 1:
            print_show(planner, sys.argv[1])
        else:
            print_overview(planner, db)


if __name__ == "__main__":
    main()
