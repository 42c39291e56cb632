"""
Main audio analyzer orchestrating tempo and key detection
"""

import uuid
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

import structlog

from mixflow.analysis.bpm import detect_bpm
from mixflow.analysis.key import detect_key
from mixflow.config import settings
from mixflow.errors import ANALYSIS_TIMEOUT, DECODE_FAILED, AnalysisError
from mixflow.intake.formats import validate_file
from mixflow.theory.camelot import KeyPosition, resolve_key
from mixflow.utils.audio import get_audio_duration, load_audio

logger = structlog.get_logger()


@dataclass(frozen=True)
class AnalysisResult:
    """Result of analyzing a single audio track."""
    bpm: float
    key: str  # e.g. "C major"
    camelot: Optional[KeyPosition]
    duration: float  # Seconds


@dataclass(frozen=True)
class AnalysisProgress:
    """Progress update during batch analysis."""
    file_id: str
    filename: str
    status: str  # "analyzing", "complete" or "error"
    current: int
    total: int
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


def analyze_track(file_path: str) -> AnalysisResult:
    """
    Analyze a single audio file for tempo and key.
    BPM and key detection run in parallel on the decoded signal.

    Args:
        file_path: Path to the audio file

    Returns:
        AnalysisResult

    Raises:
        AnalysisError: If the file is rejected, cannot be decoded,
            no tempo/key can be estimated, or detection outlasts
            settings.analysis_timeout_seconds
    """
    validation = validate_file(file_path)
    if not validation.valid:
        raise AnalysisError(validation.error_code, validation.error)

    logger.info("Starting track analysis", file_path=file_path)

    try:
        audio, sample_rate = load_audio(file_path, target_sr=settings.analysis_sample_rate)
    except Exception as e:
        raise AnalysisError(
            DECODE_FAILED,
            "Could not decode audio file. It may be corrupted or in an unsupported format.",
        ) from e

    duration = get_audio_duration(audio, sample_rate)

    # Both detectors spend their time in numpy/librosa C code
    executor = ThreadPoolExecutor(max_workers=2)
    try:
        bpm_future = executor.submit(
            detect_bpm, audio, sample_rate, settings.min_bpm, settings.max_bpm
        )
        key_future = executor.submit(detect_key, audio, sample_rate)

        _, not_done = wait([bpm_future, key_future], timeout=settings.analysis_timeout_seconds)
        if not_done:
            logger.warning(
                "Analysis timed out",
                file_path=file_path,
                timeout=settings.analysis_timeout_seconds,
            )
            raise AnalysisError(ANALYSIS_TIMEOUT, "Audio analysis timed out")

        bpm, bpm_confidence = bpm_future.result()
        tonic, scale, key_confidence = key_future.result()
    finally:
        # A timed out detector cannot be interrupted, so don't wait for it
        executor.shutdown(wait=False, cancel_futures=True)

    key = f"{tonic} {scale}"
    camelot = resolve_key(key)

    logger.info(
        "Analysis complete",
        file_path=file_path,
        bpm=bpm,
        bpm_confidence=bpm_confidence,
        key=key,
        key_confidence=key_confidence,
        camelot=str(camelot) if camelot else None,
        duration=round(duration, 2),
    )

    return AnalysisResult(
        bpm=bpm,
        key=key,
        camelot=camelot,
        duration=round(duration, 2),
    )


def analyze_files(
    file_paths: Iterable[str],
    analyze: Callable[[str], AnalysisResult] = analyze_track,
) -> Iterator[AnalysisProgress]:
    """
    Analyze multiple files, yielding progress updates.

    Each file yields an "analyzing" update followed by either "complete"
    or "error". A failing file does not stop the batch.
    """
    paths = list(file_paths)
    total = len(paths)

    for index, path in enumerate(paths, start=1):
        file_id = str(uuid.uuid4())
        filename = Path(path).name

        yield AnalysisProgress(file_id, filename, "analyzing", index, total)

        try:
            result = analyze(path)
        except AnalysisError as e:
            logger.warning("Track analysis failed", file_path=path, code=e.code, error=e.message)
            yield AnalysisProgress(file_id, filename, "error", index, total, error=e.message)
            continue
        except Exception as e:
            logger.error("Track analysis crashed", file_path=path, error=str(e))
            yield AnalysisProgress(file_id, filename, "error", index, total, error="Unknown error")
            continue

        yield AnalysisProgress(file_id, filename, "complete", index, total, result=result)
