# ShowPlanner: Offline radio show planner with song rotation
# Package: src.showplanner

__version__ = "1.0.0-dev"
__author__ = "ShowPlanner Contributors"
__description__ = "Radio show planning with a rotation window over a song library"

# Module structure:
#   - showplanner.rotate   : Availability, playlist building, replacement, segments
#   - showplanner.ingest   : Tag/duration extraction and library import
#   - showplanner.planner  : Workflow layer (create, swap, replace, delete)
#   - showplanner.db       : SQLite persistence of songs, shows, settings
#   - showplanner.config   : Configuration management
