"""
Rotation Module: Decide which songs may be scheduled and assemble shows.

- Availability: a song used in one of the 4 most recent shows is cooling down
- Builder: randomized greedy selection under a duration or count target
- Replace: single-song substitutes and whole-playlist swaps
- Ledger: stamps songs with the show that used them
- Segments: hour-by-hour display grouping of a show
"""

__all__ = ["availability", "builder", "replace", "ledger", "segments"]
