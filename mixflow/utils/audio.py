"""
Audio file utilities for loading audio
"""

from typing import Tuple

import numpy as np
import librosa
import structlog

logger = structlog.get_logger()


def load_audio(
    file_path: str,
    target_sr: int = 22050,
    mono: bool = True
) -> Tuple[np.ndarray, int]:
    """
    Load an audio file and return as numpy array.

    Args:
        file_path: Path to the audio file
        target_sr: Target sample rate (default 22050 for analysis)
        mono: Convert to mono if True

    Returns:
        Tuple of (audio_data, sample_rate)
    """
    logger.info("Loading audio", file_path=file_path, target_sr=target_sr)

    try:
        audio, sr = librosa.load(file_path, sr=target_sr, mono=mono)
    except Exception as e:
        logger.error("Failed to load audio", file_path=file_path, error=str(e))
        raise

    logger.info(
        "Audio loaded successfully",
        duration=len(audio) / sr,
        sample_rate=sr,
        samples=len(audio)
    )

    return audio, sr


def get_audio_duration(audio: np.ndarray, sample_rate: int) -> float:
    """Get duration of audio in seconds."""
    return len(audio) / sample_rate
