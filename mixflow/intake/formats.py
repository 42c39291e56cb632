"""
Audio format validation for incoming files.

Checks file type and size before a track is handed to the analyzer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from mixflow.errors import FILE_TOO_LARGE, UNSUPPORTED_FORMAT

# Maximum file size in bytes (100MB)
MAX_FILE_SIZE = 100 * 1024 * 1024

# Maximum number of files that can be processed at once
MAX_FILES = 50

SUPPORTED_EXTENSIONS = (".mp3", ".wav", ".aiff", ".aif", ".flac", ".ogg", ".m4a")

MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".aiff": "audio/aiff",
    ".aif": "audio/aiff",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
}

SUPPORTED_MIME_TYPES = (
    "audio/mpeg",
    "audio/wav",
    "audio/wave",
    "audio/x-wav",
    "audio/aiff",
    "audio/x-aiff",
    "audio/flac",
    "audio/x-flac",
    "audio/ogg",
    "audio/mp4",
    "audio/x-m4a",
)


@dataclass
class ValidationResult:
    """Validation outcome for a single file."""
    valid: bool
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class FileBatchValidation:
    """Validation outcome for a batch of files."""
    valid_files: List[str] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)  # (path, message)
    too_many_files: bool = False


def get_extension(filename: str) -> str:
    """
    Get the lower-case extension of a filename, including the dot.

    Returns:
        Extension such as ".mp3", or "" if there is none
    """
    name = Path(filename).name
    last_dot = name.rfind(".")
    if last_dot == -1 or last_dot == len(name) - 1:
        return ""
    return name[last_dot:].lower()


def is_extension_supported(extension: str) -> bool:
    return extension.lower() in SUPPORTED_EXTENSIONS


def is_mime_type_supported(mime_type: str) -> bool:
    return mime_type.lower() in SUPPORTED_MIME_TYPES


def is_supported(filename: str, mime_type: Optional[str] = None) -> bool:
    """
    Check if a file is a supported audio format.

    The extension is checked first; the MIME type is only a fallback.
    """
    extension = get_extension(filename)
    if extension and is_extension_supported(extension):
        return True

    if mime_type and is_mime_type_supported(mime_type):
        return True

    return False


def validate_file(
    path: str,
    size: Optional[int] = None,
    mime_type: Optional[str] = None,
) -> ValidationResult:
    """
    Validate a file for processing.

    Args:
        path: File path (or bare filename when size is given)
        size: Size in bytes; read from disk when omitted
        mime_type: Optional MIME type reported by the uploader

    Returns:
        ValidationResult with an error message if invalid
    """
    if not is_supported(path, mime_type):
        extension = get_extension(path) or "unknown"
        return ValidationResult(
            valid=False,
            error=(
                f"Unsupported file format: {extension}. "
                "Supported formats: MP3, WAV, AIFF, FLAC, OGG, M4A."
            ),
            error_code=UNSUPPORTED_FORMAT,
        )

    if size is None:
        file_path = Path(path)
        size = file_path.stat().st_size if file_path.is_file() else 0

    if size > MAX_FILE_SIZE:
        return ValidationResult(
            valid=False,
            error=f"File too large: {size / (1024 * 1024):.1f}MB. Maximum size is 100MB.",
            error_code=FILE_TOO_LARGE,
        )

    return ValidationResult(valid=True)


def validate_files(paths: Sequence[str]) -> FileBatchValidation:
    """
    Validate a batch of files. Only the first MAX_FILES are considered.
    """
    batch = FileBatchValidation(too_many_files=len(paths) > MAX_FILES)

    for path in paths[:MAX_FILES]:
        result = validate_file(path)
        if result.valid:
            batch.valid_files.append(path)
        else:
            batch.errors.append((path, result.error))

    return batch


def format_file_size(size: int) -> str:
    """Format file size for display, e.g. "15.2 MB"."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
