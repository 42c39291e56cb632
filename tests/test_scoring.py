"""
Tests for transition rules, quality tiers and path scoring.
"""

import math

from mixflow.ordering.models import Track, TransitionQuality
from mixflow.ordering.scoring import (
    MAX_BPM_DIFFERENCE,
    create_transition,
    is_transition_compatible,
    path_score,
    transition_quality,
)
from mixflow.theory.camelot import KeyCompatibility, resolve_key


def _track(track_id, bpm, key):
    return Track(id=track_id, filename=f"{track_id}.mp3", bpm=bpm, key=key, camelot=resolve_key(key))


class TestTransitionCompatibility:
    """Test the legal transition predicate."""

    def test_compatible_bpm_and_key(self):
        assert is_transition_compatible(_track("1", 128, "8B"), _track("2", 130, "9B"))

    def test_same_key_same_bpm(self):
        assert is_transition_compatible(_track("1", 128, "8B"), _track("2", 128, "8B"))

    def test_relative_key(self):
        assert is_transition_compatible(_track("1", 128, "8B"), _track("2", 130, "8A"))

    def test_bpm_difference_over_limit(self):
        """22 BPM apart is too far even in the same key."""
        assert not is_transition_compatible(_track("1", 128, "8B"), _track("2", 150, "8B"))

    def test_bpm_difference_at_limit(self):
        """Exactly 20 BPM apart is still allowed."""
        assert MAX_BPM_DIFFERENCE == 20
        assert is_transition_compatible(_track("1", 128, "8B"), _track("2", 148, "8B"))

    def test_incompatible_key(self):
        assert not is_transition_compatible(_track("1", 128, "8B"), _track("2", 128, "3B"))

    def test_missing_bpm(self):
        assert not is_transition_compatible(_track("1", None, "8B"), _track("2", 128, "8B"))

    def test_missing_key(self):
        """An unresolvable key label leaves the track unanalyzed."""
        unanalyzed = _track("2", 128, "not a key")
        assert unanalyzed.camelot is None
        assert not is_transition_compatible(_track("1", 128, "8B"), unanalyzed)

    def test_symmetric(self):
        pairs = [
            (_track("1", 128, "8B"), _track("2", 147, "9B")),
            (_track("1", 128, "8B"), _track("2", 150, "8B")),
            (_track("1", 100, "4A"), _track("2", 104, "4B")),
        ]
        for a, b in pairs:
            assert is_transition_compatible(a, b) == is_transition_compatible(b, a)


class TestTransitionQuality:
    """Test quality tiers."""

    def test_excellent_under_five(self):
        assert transition_quality(_track("1", 128, "8B"), _track("2", 132.9, "8B")) is TransitionQuality.EXCELLENT

    def test_good_from_five(self):
        assert transition_quality(_track("1", 128, "8B"), _track("2", 133, "9B")) is TransitionQuality.GOOD
        assert transition_quality(_track("1", 128, "8B"), _track("2", 137.5, "9B")) is TransitionQuality.GOOD

    def test_fair_from_ten_to_twenty(self):
        assert transition_quality(_track("1", 128, "8B"), _track("2", 138, "8A")) is TransitionQuality.FAIR
        assert transition_quality(_track("1", 128, "8B"), _track("2", 148, "8A")) is TransitionQuality.FAIR

    def test_poor_over_twenty(self):
        assert transition_quality(_track("1", 128, "8B"), _track("2", 149, "8B")) is TransitionQuality.POOR

    def test_poor_for_incompatible_key(self):
        """Even identical tempos are poor across incompatible keys."""
        assert transition_quality(_track("1", 128, "8B"), _track("2", 128, "2B")) is TransitionQuality.POOR

    def test_poor_for_unanalyzed(self):
        assert transition_quality(_track("1", 128, "8B"), _track("2", None, None)) is TransitionQuality.POOR


class TestCreateTransition:
    """Test transition records."""

    def test_transition_details(self):
        a = _track("1", 128, "8B")
        b = _track("2", 131, "9B")
        transition = create_transition(a, b)

        assert transition.from_track is a
        assert transition.to_track is b
        assert transition.bpm_difference == 3
        assert transition.key_compatibility is KeyCompatibility.ADJACENT
        assert transition.quality is TransitionQuality.EXCELLENT

    def test_bpm_difference_is_absolute(self):
        transition = create_transition(_track("1", 140, "8B"), _track("2", 128, "8B"))
        assert transition.bpm_difference == 12

    def test_unanalyzed_endpoint(self):
        """Missing analysis means infinite difference and incompatible keys."""
        transition = create_transition(_track("1", 128, "8B"), _track("2", None, "8B"))

        assert math.isinf(transition.bpm_difference)
        assert transition.key_compatibility is KeyCompatibility.INCOMPATIBLE
        assert transition.quality is TransitionQuality.POOR

    def test_to_dict_serializes_infinity_as_none(self):
        transition = create_transition(_track("1", 128, "8B"), _track("2", None, None))
        data = transition.to_dict()

        assert data["fromTrackId"] == "1"
        assert data["toTrackId"] == "2"
        assert data["bpmDifference"] is None
        assert data["keyCompatibility"] == "incompatible"
        assert data["quality"] == "poor"


class TestPathScore:
    """Test the squared BPM variance score."""

    def test_short_paths_score_zero(self):
        assert path_score([]) == 0
        assert path_score([_track("1", 128, "8B")]) == 0

    def test_sum_of_squares(self):
        path = [_track("1", 120, "8B"), _track("2", 122, "8B"), _track("3", 125, "8B")]
        assert path_score(path) == 4 + 9

    def test_big_jump_costs_more_than_small_steps(self):
        one_jump = [_track("1", 120, "8B"), _track("2", 130, "8B")]
        small_steps = [_track("1", 120, "8B"), _track("2", 125, "8B"), _track("3", 130, "8B")]
        assert path_score(one_jump) > path_score(small_steps)
