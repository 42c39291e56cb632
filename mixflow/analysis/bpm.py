"""
BPM detection module

Estimates tempo with librosa's beat tracker and folds the result into
the range DJs work in (half/double time correction).
"""

from typing import Tuple

import librosa
import numpy as np
import structlog

from mixflow.errors import ANALYSIS_FAILED, AnalysisError

logger = structlog.get_logger()

# BPM range for DJ music - values outside are doubled/halved
MIN_BPM = 70.0
MAX_BPM = 180.0


def normalize_bpm(bpm: float, min_bpm: float = MIN_BPM, max_bpm: float = MAX_BPM) -> float:
    """
    Fold a raw tempo estimate into [min_bpm, max_bpm].

    Doubles while too slow and halves while too fast, so 64 BPM becomes
    128 and 256 becomes 128. Non-positive values are returned as-is.
    """
    while 0 < bpm < min_bpm:
        bpm *= 2
    while bpm > max_bpm:
        bpm /= 2
    return bpm


def detect_bpm(
    audio: np.ndarray,
    sample_rate: int,
    min_bpm: float = MIN_BPM,
    max_bpm: float = MAX_BPM,
) -> Tuple[float, float]:
    """
    Detect the BPM (tempo) of an audio signal.

    Returns:
        Tuple of (bpm, confidence)

    Raises:
        AnalysisError: If no tempo can be estimated (e.g. silence)
    """
    try:
        tempo, beat_frames = librosa.beat.beat_track(y=audio, sr=sample_rate)
    except Exception as e:
        logger.error("Librosa BPM detection failed", error=str(e))
        raise AnalysisError(ANALYSIS_FAILED, f"BPM detection failed: {e}") from e

    tempo = np.atleast_1d(tempo)
    raw_bpm = float(tempo[0]) if len(tempo) > 0 else 0.0

    if not np.isfinite(raw_bpm) or raw_bpm <= 0:
        raise AnalysisError(ANALYSIS_FAILED, "Could not detect a tempo")

    # Confidence from beat interval consistency
    beat_times = librosa.frames_to_time(beat_frames, sr=sample_rate)
    if len(beat_times) > 2:
        intervals = np.diff(beat_times)
        cv = np.std(intervals) / np.mean(intervals) if np.mean(intervals) > 0 else 1
        confidence = max(0.3, min(0.85, 1.0 - cv * 1.5))
    else:
        confidence = 0.3

    bpm = normalize_bpm(raw_bpm, min_bpm, max_bpm)

    logger.debug(
        "BPM detected",
        bpm=bpm,
        raw_bpm=raw_bpm,
        confidence=confidence,
        beats_count=len(beat_times),
    )

    return round(float(bpm), 1), round(float(confidence), 3)
