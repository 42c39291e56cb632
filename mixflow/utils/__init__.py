"""Utility modules"""

from mixflow.utils.audio import load_audio, get_audio_duration
from mixflow.utils.logging import setup_logging

__all__ = [
    "load_audio",
    "get_audio_duration",
    "setup_logging",
]
