"""
Track ordering optimizer

Greedy nearest-neighbor search started from every track:
- Each step only considers legal transitions (BPM within 20, compatible keys)
- Among those, the smallest BPM jump wins; ties go to the earlier track
- The best path is the complete one with the lowest squared BPM variance,
  or failing that the longest partial path

This is a heuristic, not an exact Hamiltonian path search. Work is O(n^3)
in the number of analyzed tracks, which is fine for a few dozen tracks.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import structlog

from mixflow.config import settings
from mixflow.ordering.models import OrderingResult, Track
from mixflow.ordering.scoring import (
    create_transition,
    is_track_analyzed,
    is_transition_compatible,
    path_score,
)

logger = structlog.get_logger()


def greedy_path(start_track: Track, tracks: Sequence[Track]) -> List[Track]:
    """
    Build a greedy path starting from a given track.

    At each step, picks the compatible unused track with the smallest
    BPM difference from the current tail.

    Args:
        start_track: The track to start from
        tracks: All analyzed tracks, in input order

    Returns:
        Tracks in order (shorter than the input if the path dead-ends)
    """
    path = [start_track]
    used = {start_track.id}
    current = start_track

    while len(path) < len(tracks):
        best_next: Optional[Track] = None
        best_diff = 0.0

        for candidate in tracks:
            if candidate.id in used or not is_transition_compatible(current, candidate):
                continue

            diff = abs(current.bpm - candidate.bpm)
            # Strict comparison keeps the first candidate on ties
            if best_next is None or diff < best_diff:
                best_next = candidate
                best_diff = diff

        if best_next is None:
            break

        path.append(best_next)
        used.add(best_next.id)
        current = best_next

    return path


def _search_paths(tracks: List[Track], seed_workers: int) -> List[List[Track]]:
    """Run the greedy search once per seed, results in seed order."""
    if seed_workers > 1 and len(tracks) > 1:
        with ThreadPoolExecutor(max_workers=seed_workers) as executor:
            return list(executor.map(lambda seed: greedy_path(seed, tracks), tracks))

    return [greedy_path(seed, tracks) for seed in tracks]


def find_optimal_order(
    tracks: Sequence[Track],
    seed_workers: Optional[int] = None,
) -> OrderingResult:
    """
    Find the best mixing order for a set of tracks.

    Tries starting from each analyzed track and keeps the best complete
    path. Unanalyzed tracks are always rejected. Never raises.

    Args:
        tracks: Tracks to order
        seed_workers: Threads used to evaluate seeds (defaults to settings)

    Returns:
        OrderingResult with ordered tracks, transitions and rejected tracks
    """
    analyzed = [t for t in tracks if is_track_analyzed(t)]
    unanalyzed = [t for t in tracks if not is_track_analyzed(t)]

    if len(analyzed) <= 1:
        return OrderingResult(
            ordered_tracks=list(analyzed),
            transitions=[],
            rejected=list(unanalyzed),
            is_complete=not unanalyzed,
        )

    if seed_workers is None:
        seed_workers = settings.order_seed_workers

    best_complete: Optional[List[Track]] = None
    best_complete_score = float("inf")
    best_partial: List[Track] = []

    for path in _search_paths(analyzed, seed_workers):
        if len(path) == len(analyzed):
            score = path_score(path)
            if score < best_complete_score:
                best_complete = path
                best_complete_score = score
        elif len(path) > len(best_partial):
            best_partial = path
        elif len(path) == len(best_partial) and path_score(path) < path_score(best_partial):
            best_partial = path

    ordered = best_complete if best_complete is not None else best_partial
    ordered_ids = {t.id for t in ordered}
    rejected = [t for t in analyzed if t.id not in ordered_ids] + unanalyzed

    transitions = [
        create_transition(ordered[i], ordered[i + 1])
        for i in range(len(ordered) - 1)
    ]

    logger.info(
        "Track order optimized",
        track_count=len(tracks),
        ordered=len(ordered),
        rejected=len(rejected),
        complete_path=best_complete is not None,
        score=path_score(ordered),
    )

    return OrderingResult(
        ordered_tracks=ordered,
        transitions=transitions,
        rejected=rejected,
        is_complete=best_complete is not None and not unanalyzed,
    )


def find_compatible_groups(tracks: Sequence[Track]) -> List[List[Track]]:
    """
    Find groups of connected tracks ("islands").

    A track joins a group when it can transition to any track already in
    it, so groups are connected components of the compatibility graph.
    Useful for showing why no complete order exists.

    Args:
        tracks: Tracks to group

    Returns:
        Groups sorted largest first; unanalyzed tracks are left out
    """
    analyzed = [t for t in tracks if is_track_analyzed(t)]

    groups: List[List[Track]] = []
    assigned = set()

    for track in analyzed:
        if track.id in assigned:
            continue

        group = [track]
        assigned.add(track.id)

        changed = True
        while changed:
            changed = False
            for candidate in analyzed:
                if candidate.id in assigned:
                    continue
                if any(is_transition_compatible(member, candidate) for member in group):
                    group.append(candidate)
                    assigned.add(candidate.id)
                    changed = True

        groups.append(group)

    # Stable sort keeps discovery order between equal-sized groups
    groups.sort(key=len, reverse=True)
    return groups
