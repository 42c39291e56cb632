"""
Transition scoring module

Decides whether two tracks can follow each other, rates the move,
and scores whole paths for the optimizer.
"""

import math
from typing import Sequence

from mixflow.ordering.models import Track, Transition, TransitionQuality
from mixflow.theory.camelot import KeyCompatibility, classify, is_compatible

# Maximum allowed BPM difference between consecutive tracks
MAX_BPM_DIFFERENCE = 20.0

# Quality tiers (BPM difference upper bounds, exclusive)
EXCELLENT_BPM_DIFFERENCE = 5.0
GOOD_BPM_DIFFERENCE = 10.0


def is_track_analyzed(track: Track) -> bool:
    """Check if a track has the tempo and key needed for ordering."""
    return track.is_analyzed


def bpm_difference(track_from: Track, track_to: Track) -> float:
    """Absolute BPM difference, infinite if either track is unanalyzed."""
    if not (track_from.is_analyzed and track_to.is_analyzed):
        return math.inf
    return abs(track_from.bpm - track_to.bpm)


def is_transition_compatible(track_from: Track, track_to: Track) -> bool:
    """
    Check if two tracks can be mixed one after the other.

    Compatible means:
    - Both tracks are analyzed
    - BPM difference is at most 20
    - Keys are harmonically compatible (Camelot wheel)

    The result is the same in both directions.
    """
    if not (track_from.is_analyzed and track_to.is_analyzed):
        return False

    if abs(track_from.bpm - track_to.bpm) > MAX_BPM_DIFFERENCE:
        return False

    return is_compatible(track_from.camelot, track_to.camelot)


def _key_compatibility(track_from: Track, track_to: Track) -> KeyCompatibility:
    if not (track_from.is_analyzed and track_to.is_analyzed):
        return KeyCompatibility.INCOMPATIBLE
    return classify(track_from.camelot, track_to.camelot)


def transition_quality(track_from: Track, track_to: Track) -> TransitionQuality:
    """
    Rate a transition between two tracks.

    - Excellent: compatible key, < 5 BPM apart
    - Good: compatible key, 5-10 BPM apart
    - Fair: compatible key, 10-20 BPM apart
    - Poor: incompatible key, > 20 BPM apart, or missing analysis
    """
    if _key_compatibility(track_from, track_to) is KeyCompatibility.INCOMPATIBLE:
        return TransitionQuality.POOR

    diff = bpm_difference(track_from, track_to)

    if diff > MAX_BPM_DIFFERENCE:
        return TransitionQuality.POOR
    if diff < EXCELLENT_BPM_DIFFERENCE:
        return TransitionQuality.EXCELLENT
    if diff < GOOD_BPM_DIFFERENCE:
        return TransitionQuality.GOOD
    return TransitionQuality.FAIR


def create_transition(track_from: Track, track_to: Track) -> Transition:
    """Build the transition record between two consecutive tracks."""
    return Transition(
        from_track=track_from,
        to_track=track_to,
        bpm_difference=bpm_difference(track_from, track_to),
        key_compatibility=_key_compatibility(track_from, track_to),
        quality=transition_quality(track_from, track_to),
    )


def path_score(path: Sequence[Track]) -> float:
    """
    Total BPM variance of a path. Lower is smoother.

    Differences are squared so one big jump costs more than
    several small ones.
    """
    return sum(
        (path[i].bpm - path[i + 1].bpm) ** 2
        for i in range(len(path) - 1)
    )
