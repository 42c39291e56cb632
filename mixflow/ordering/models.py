"""
Data types shared by the ordering engine and its callers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from mixflow.theory.camelot import KeyCompatibility, KeyPosition, parse_camelot, resolve_key


class AnalysisStatus(Enum):
    """Where a track is in the analysis pipeline."""
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


class MixStatus(Enum):
    """Outcome of the last ordering run for a track."""
    NONE = "none"
    MIXED = "mixed"
    ORPHAN = "orphan"


class TransitionQuality(Enum):
    """Display rating for a transition."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class Track:
    """A single audio track and its analysis results."""
    id: str
    filename: str = ""
    bpm: Optional[float] = None
    key: Optional[str] = None  # Label from the analyzer, e.g. "C major"
    camelot: Optional[KeyPosition] = None
    duration: Optional[float] = None  # Seconds
    status: AnalysisStatus = AnalysisStatus.PENDING
    error_message: Optional[str] = None
    mix_status: MixStatus = MixStatus.NONE
    mix_order: Optional[int] = None  # 1-based, only set when mixed

    @property
    def is_analyzed(self) -> bool:
        """Only tracks with both tempo and key take part in ordering."""
        return self.bpm is not None and self.camelot is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "bpm": self.bpm,
            "key": self.key,
            "camelot": self.camelot.camelot if self.camelot else None,
            "duration": self.duration,
            "status": self.status.value,
            "errorMessage": self.error_message,
            "mixStatus": self.mix_status.value,
            "mixOrder": self.mix_order,
        }


def track_from_dict(data: Dict[str, Any]) -> Track:
    """
    Build a Track from a JSON payload (queue job or persisted library).

    The key position comes from "camelot" when present, otherwise it is
    resolved from the "key" label. Unknown labels leave it unset.
    """
    camelot = parse_camelot(data.get("camelot") or "")
    if camelot is None:
        camelot = resolve_key(data.get("key"))

    bpm = data.get("bpm")
    duration = data.get("duration")

    return Track(
        id=str(data["id"]),
        filename=data.get("filename") or "",
        bpm=float(bpm) if bpm is not None else None,
        key=data.get("key"),
        camelot=camelot,
        duration=float(duration) if duration is not None else None,
        status=AnalysisStatus(data.get("status") or AnalysisStatus.PENDING.value),
        error_message=data.get("errorMessage"),
        mix_status=MixStatus(data.get("mixStatus") or MixStatus.NONE.value),
        mix_order=data.get("mixOrder"),
    )


@dataclass(frozen=True)
class Transition:
    """Information about the move from one track to the next."""
    from_track: Track
    to_track: Track
    bpm_difference: float  # math.inf when either side is unanalyzed
    key_compatibility: KeyCompatibility
    quality: TransitionQuality

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromTrackId": self.from_track.id,
            "toTrackId": self.to_track.id,
            "bpmDifference": None if math.isinf(self.bpm_difference) else round(self.bpm_difference, 2),
            "keyCompatibility": self.key_compatibility.value,
            "quality": self.quality.value,
        }


@dataclass
class OrderingResult:
    """Result of the ordering algorithm."""
    ordered_tracks: List[Track] = field(default_factory=list)
    transitions: List[Transition] = field(default_factory=list)
    rejected: List[Track] = field(default_factory=list)  # Couldn't be placed
    is_complete: bool = True  # True if every input track was placed

    @property
    def ordered_ids(self) -> List[str]:
        return [t.id for t in self.ordered_tracks]

    @property
    def rejected_ids(self) -> List[str]:
        return [t.id for t in self.rejected]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderedTracks": [t.to_dict() for t in self.ordered_tracks],
            "transitions": [t.to_dict() for t in self.transitions],
            "rejected": [t.to_dict() for t in self.rejected],
            "isComplete": self.is_complete,
        }
