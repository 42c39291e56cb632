"""Audio analysis module"""

from mixflow.analysis.analyzer import (
    AnalysisProgress,
    AnalysisResult,
    analyze_files,
    analyze_track,
)
from mixflow.analysis.bpm import detect_bpm, normalize_bpm
from mixflow.errors import AnalysisError
from mixflow.analysis.key import detect_key

__all__ = [
    "AnalysisError",
    "AnalysisProgress",
    "AnalysisResult",
    "analyze_files",
    "analyze_track",
    "detect_bpm",
    "detect_key",
    "normalize_bpm",
]
