"""
Track library

Holds the tracks of a session with their analysis and mix state, runs
analysis and ordering over them, and optionally persists everything to a
JSON file so a session can be recovered.
"""

import json
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import structlog

from mixflow.analysis.analyzer import AnalysisResult, analyze_track
from mixflow.errors import AnalysisError
from mixflow.config import settings
from mixflow.ordering.models import AnalysisStatus, MixStatus, OrderingResult, Track, track_from_dict
from mixflow.ordering.optimizer import find_optimal_order

logger = structlog.get_logger()


class TrackLibrary:
    """In-memory list of tracks, kept in insertion order."""

    def __init__(self, storage_path: Optional[str] = None):
        path = storage_path if storage_path is not None else settings.library_path
        self._storage_path = Path(path) if path else None
        self._tracks: List[Track] = []
        self._paths: Dict[str, str] = {}
        self.ordering: Optional[OrderingResult] = None
        self._load()

    @property
    def tracks(self) -> List[Track]:
        return list(self._tracks)

    def get(self, track_id: str) -> Optional[Track]:
        for track in self._tracks:
            if track.id == track_id:
                return track
        return None

    def file_path(self, track_id: str) -> Optional[str]:
        return self._paths.get(track_id)

    def add_files(self, file_paths: Iterable[str]) -> List[Track]:
        """Add files as pending tracks. Returns the new tracks."""
        new_tracks = []
        for file_path in file_paths:
            track = Track(id=str(uuid.uuid4()), filename=Path(file_path).name)
            self._paths[track.id] = str(file_path)
            new_tracks.append(track)

        self._tracks.extend(new_tracks)
        self._persist()
        return new_tracks

    def remove_track(self, track_id: str):
        self._tracks = [t for t in self._tracks if t.id != track_id]
        self._paths.pop(track_id, None)
        self._persist()

    def clear(self):
        self._tracks = []
        self._paths = {}
        self.ordering = None
        self._persist()

    def update_status(
        self,
        track_id: str,
        status: AnalysisStatus,
        error_message: Optional[str] = None,
    ):
        self._update(track_id, status=status, error_message=error_message)

    def update_analysis(self, track_id: str, result: AnalysisResult):
        """Store analysis results and mark the track complete."""
        self._update(
            track_id,
            bpm=result.bpm,
            key=result.key,
            camelot=result.camelot,
            duration=result.duration,
            status=AnalysisStatus.COMPLETE,
            error_message=None,
        )

    def _update(self, track_id: str, **changes):
        self._tracks = [
            replace(t, **changes) if t.id == track_id else t
            for t in self._tracks
        ]
        self._persist()

    def analyze_all(self, analyze: Callable[[str], AnalysisResult] = analyze_track):
        """Analyze every pending track, one at a time."""
        pending = [t for t in self._tracks if t.status is AnalysisStatus.PENDING]

        for track in pending:
            self.update_status(track.id, AnalysisStatus.ANALYZING)

            file_path = self._paths.get(track.id)
            if file_path is None:
                self.update_status(track.id, AnalysisStatus.ERROR, "Audio file is no longer available")
                continue

            try:
                result = analyze(file_path)
            except AnalysisError as e:
                self.update_status(track.id, AnalysisStatus.ERROR, e.message)
                continue
            except Exception as e:
                logger.error("Track analysis crashed", track_id=track.id, error=str(e))
                self.update_status(track.id, AnalysisStatus.ERROR, str(e) or "Analysis failed")
                continue

            self.update_analysis(track.id, result)

    def generate_order(self) -> Optional[OrderingResult]:
        """
        Order the analyzed tracks and record each track's mix status.

        Returns:
            The ordering result, or None with fewer than two analyzed tracks
        """
        analyzed = [t for t in self._tracks if t.status is AnalysisStatus.COMPLETE]

        if len(analyzed) < 2:
            self.ordering = None
            return None

        result = find_optimal_order(analyzed)
        self.ordering = result
        self.apply_mix_status(result)
        return result

    def mix(self, analyze: Callable[[str], AnalysisResult] = analyze_track) -> Optional[OrderingResult]:
        """Full mix process: analyze pending tracks, then order."""
        self.analyze_all(analyze)
        return self.generate_order()

    def apply_mix_status(self, result: OrderingResult):
        """Mark ordered tracks as mixed (with position) and rejected ones as orphans."""
        order = {t.id: position for position, t in enumerate(result.ordered_tracks, start=1)}
        rejected_ids = set(result.rejected_ids)

        updated = []
        for track in self._tracks:
            if track.id in order:
                track = replace(track, mix_status=MixStatus.MIXED, mix_order=order[track.id])
            elif track.id in rejected_ids:
                track = replace(track, mix_status=MixStatus.ORPHAN, mix_order=None)
            updated.append(track)

        self._tracks = updated
        self._persist()

    def clear_mix_status(self):
        self._tracks = [
            replace(t, mix_status=MixStatus.NONE, mix_order=None)
            for t in self._tracks
        ]
        self._persist()

    def clear_order(self):
        self.ordering = None
        self.clear_mix_status()

    def stats(self) -> Dict[str, int]:
        counts = {"total": len(self._tracks)}
        for status in AnalysisStatus:
            counts[status.value] = sum(1 for t in self._tracks if t.status is status)
        return counts

    @property
    def all_analyzed(self) -> bool:
        return bool(self._tracks) and all(t.status is AnalysisStatus.COMPLETE for t in self._tracks)

    @property
    def is_analyzing(self) -> bool:
        return any(t.status is AnalysisStatus.ANALYZING for t in self._tracks)

    def _persist(self):
        if self._storage_path is None:
            return

        records = []
        for track in self._tracks:
            record = track.to_dict()
            # An interrupted analysis is retried after reload
            if track.status is AnalysisStatus.ANALYZING:
                record["status"] = AnalysisStatus.PENDING.value
            record["path"] = self._paths.get(track.id)
            records.append(record)

        try:
            self._storage_path.parent.mkdir(parents=True, exist_ok=True)
            self._storage_path.write_text(json.dumps(records, indent=2))
        except OSError as e:
            logger.warning("Failed to persist track library", path=str(self._storage_path), error=str(e))

    def _load(self):
        if self._storage_path is None or not self._storage_path.exists():
            return

        try:
            records = json.loads(self._storage_path.read_text())
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise ValueError("expected a list of track records")
            tracks = [track_from_dict(record) for record in records]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable track library", path=str(self._storage_path), error=str(e))
            return

        self._tracks = tracks
        self._paths = {
            str(record["id"]): record["path"]
            for record in records
            if record.get("path")
        }
        logger.info("Track library loaded", path=str(self._storage_path), track_count=len(tracks))
