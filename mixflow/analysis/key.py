"""
Musical key detection module

Krumhansl-Schmuckler key finding on a librosa chromagram.
"""

from typing import Tuple

import librosa
import numpy as np
import structlog

from mixflow.errors import ANALYSIS_FAILED, AnalysisError

logger = structlog.get_logger()

PITCH_CLASSES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Krumhansl-Kessler key profiles
MAJOR_PROFILE = np.array([6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88])
MINOR_PROFILE = np.array([6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17])


def detect_key(audio: np.ndarray, sample_rate: int) -> Tuple[str, str, float]:
    """
    Detect the musical key of an audio signal.

    Returns:
        Tuple of (tonic, scale, confidence), e.g. ("A", "minor", 0.81)

    Raises:
        AnalysisError: If the signal has no tonal content
    """
    try:
        chroma = librosa.feature.chroma_cqt(y=audio, sr=sample_rate)
    except Exception as e:
        logger.error("Librosa key detection failed", error=str(e))
        raise AnalysisError(ANALYSIS_FAILED, f"Key detection failed: {e}") from e

    chroma_avg = np.mean(chroma, axis=1)
    total = np.sum(chroma_avg)
    if not np.isfinite(total) or total <= 0 or np.allclose(chroma_avg, chroma_avg[0]):
        raise AnalysisError(ANALYSIS_FAILED, "Could not detect a key")
    chroma_avg = chroma_avg / total

    major_norm = MAJOR_PROFILE / np.sum(MAJOR_PROFILE)
    minor_norm = MINOR_PROFILE / np.sum(MINOR_PROFILE)

    best_tonic = PITCH_CLASSES[0]
    best_scale = "major"
    best_correlation = -1.0

    for i, pitch in enumerate(PITCH_CLASSES):
        for scale, profile in (("major", major_norm), ("minor", minor_norm)):
            correlation = np.corrcoef(chroma_avg, np.roll(profile, i))[0, 1]
            if correlation > best_correlation:
                best_correlation = float(correlation)
                best_tonic = pitch
                best_scale = scale

    confidence = max(0.0, (best_correlation + 1) / 2)

    logger.debug(
        "Key detected",
        tonic=best_tonic,
        scale=best_scale,
        correlation=round(best_correlation, 3),
    )

    return best_tonic, best_scale, round(confidence, 3)
