"""
Unit tests for show editing: replacement suggestions, replacement,
whole-playlist swap and drag-and-drop reordering.
"""

import random
import pytest
from datetime import datetime, timedelta, timezone
from showplanner.config import AppSettings
from showplanner.models import NotFoundError, Show, Song, UsageRecord
from showplanner.rotate.builder import BuildStatus
from showplanner.rotate.replace import (
    apply_replacement,
    move_song,
    suggest,
    swap_playlist,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_song(song_id, title=None, duration=180, last_used=None):
    return Song(
        id=song_id, title=title or song_id, artist="Artist", uploaded_at=T0,
        duration_seconds=duration, last_used=last_used,
    )


@pytest.fixture
def show():
    return Show(
        id="show-1",
        name="Show 1",
        created_at=T0,
        song_ids=["a", "b", "c"],
        total_duration_seconds=540,
        intended_hours=1,
    )


@pytest.fixture
def library(show):
    return [
        make_song("a", "Alpha"),
        make_song("b", "Bravo"),
        make_song("c", "Charlie"),
        make_song("z", "zulu"),
        make_song("y", "Yankee"),
        make_song("x", "X-ray", duration=0),
        make_song("w", "Whiskey", last_used=UsageRecord(show.id, show.created_at)),
    ]


class TestSuggest:
    """ReplacementResolver.suggest"""

    def test_filters_and_sorts(self, show, library):
        suggestions = suggest(show, "b", library, [show])
        # x has no duration, w is cooling down, a/c already in the show
        assert [s.id for s in suggestions] == ["y", "z"]

    def test_case_insensitive_title_order(self, show):
        library = [make_song("1", "banana"), make_song("2", "Apple"), make_song("3", "cherry")]
        suggestions = suggest(show, "a", library, [show])
        assert [s.title for s in suggestions] == ["Apple", "banana", "cherry"]

    def test_accented_titles_sort_with_base_letter(self, show):
        library = [make_song("1", "Zebra"), make_song("2", "Éclair"), make_song("3", "apple")]
        suggestions = suggest(show, "a", library, [show])
        assert [s.title for s in suggestions] == ["apple", "Éclair", "Zebra"]

    def test_accent_only_difference_is_deterministic(self, show):
        library = [make_song("1", "Éte"), make_song("2", "Ete"), make_song("3", "ete")]
        suggestions = suggest(show, "a", library, [show])
        assert [s.title for s in suggestions] == ["Ete", "ete", "Éte"]

    def test_equal_titles_keep_library_order(self, show):
        library = [make_song("2", "Same"), make_song("1", "Same")]
        assert [s.id for s in suggest(show, "a", library, [show])] == ["2", "1"]

    def test_excludes_song_being_replaced(self, show, library):
        assert "b" not in [s.id for s in suggest(show, "b", library, [show])]

    def test_duplicate_slot_blocks_song(self, library):
        """A song already sitting in another slot is not suggested."""
        show = Show(id="show-1", name="S", created_at=T0, song_ids=["a", "b"])
        assert "a" not in [s.id for s in suggest(show, "b", library, [show])]

    def test_empty_is_valid(self, show):
        assert suggest(show, "a", [make_song("a")], [show]) == []


class TestApplyReplacement:
    """ReplacementResolver.apply_replacement"""

    def test_keeps_position(self, show, library):
        updated = apply_replacement(show, "b", "z", library)
        assert updated.song_ids == ("a", "z", "c")

    def test_recomputes_total(self, show):
        library = [make_song("a"), make_song("b"), make_song("c"), make_song("long", duration=400)]
        updated = apply_replacement(show, "a", "long", library)
        assert updated.total_duration_seconds == 400 + 180 + 180

    def test_original_show_unchanged(self, show, library):
        apply_replacement(show, "b", "z", library)
        assert show.song_ids == ("a", "b", "c")

    def test_first_occurrence_only(self, library):
        show = Show(id="s", name="S", created_at=T0, song_ids=["a", "b", "a"])
        assert apply_replacement(show, "a", "z", library).song_ids == ("z", "b", "a")

    def test_missing_old_song(self, show, library):
        with pytest.raises(NotFoundError):
            apply_replacement(show, "nope", "z", library)


class TestSwapPlaylist:
    """Whole-playlist swap."""

    @pytest.fixture
    def settings(self):
        return AppSettings(target_song_minutes_per_hour=10, show_creation_mode="duration")

    def test_replaces_all_songs(self, show, settings):
        usable = [make_song(f"n{i}", duration=100) for i in range(10)]
        library = usable + [make_song("a"), make_song("b"), make_song("c")]
        result, updated = swap_playlist(show, usable, settings, library, rng=random.Random(0))

        assert result.status is BuildStatus.EXACT
        assert updated.song_ids == tuple(result.song_ids)
        assert all(song_id.startswith("n") for song_id in updated.song_ids)
        assert updated.total_duration_seconds == result.total_duration
        assert updated.id == show.id
        assert updated.created_at == show.created_at

    def test_uses_intended_hours(self, settings):
        show = Show(id="s", name="S", created_at=T0, intended_hours=3)
        usable = [make_song(f"n{i}", duration=100) for i in range(40)]
        result, updated = swap_playlist(show, usable, settings, usable, rng=random.Random(0))
        # 3 hours of 10 minutes: between 24 and 36 minutes
        assert 3 * 480 <= updated.total_duration_seconds <= 3 * 720

    def test_missing_intended_hours_defaults_to_one(self, settings):
        show = Show(id="s", name="S", created_at=T0, intended_hours=None)
        usable = [make_song(f"n{i}", duration=100) for i in range(40)]
        _, updated = swap_playlist(show, usable, settings, usable, rng=random.Random(0))
        assert updated.total_duration_seconds <= 720

    def test_empty_leaves_show_unchanged(self, show, settings):
        result, updated = swap_playlist(show, [], settings, [])
        assert result.status is BuildStatus.EMPTY
        assert updated is show


class TestMoveSong:
    """Drag-and-drop splice."""

    @pytest.fixture
    def long_show(self):
        return Show(id="s", name="S", created_at=T0, song_ids=["a", "b", "c", "d"])

    def test_move_down(self, long_show, library):
        assert move_song(long_show, "a", "c", library).song_ids == ("b", "a", "c", "d")

    def test_move_up(self, long_show, library):
        assert move_song(long_show, "d", "b", library).song_ids == ("a", "d", "b", "c")

    def test_unknown_target_appends(self, long_show, library):
        assert move_song(long_show, "a", "zzz", library).song_ids == ("b", "c", "d", "a")

    def test_onto_itself_is_noop(self, long_show, library):
        assert move_song(long_show, "b", "b", library) is long_show

    def test_missing_dragged_song(self, long_show, library):
        with pytest.raises(NotFoundError):
            move_song(long_show, "zzz", "a", library)

    def test_total_recomputed_from_library(self, long_show, library):
        # "d" is not in the library and counts as zero
        assert move_song(long_show, "a", "c", library).total_duration_seconds == 540


class TestShowSnapshot:
    """Edited shows stay immutable, hashable values."""

    def test_song_ids_stored_as_tuple(self, show):
        assert isinstance(show.song_ids, tuple)

    def test_edited_show_is_hashable(self, show, library):
        updated = apply_replacement(show, "b", "z", library)
        assert len({show, updated}) == 2
        assert {updated: "edited"}[updated] == "edited"

    def test_equal_snapshots_hash_equal(self, show):
        copy = Show(
            id=show.id, name=show.name, created_at=show.created_at,
            song_ids=list(show.song_ids), total_duration_seconds=540,
        )
        assert copy == show
        assert hash(copy) == hash(show)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
