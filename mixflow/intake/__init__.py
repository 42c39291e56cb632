"""File intake and validation"""

from mixflow.intake.formats import (
    MAX_FILE_SIZE,
    MAX_FILES,
    SUPPORTED_EXTENSIONS,
    ValidationResult,
    format_file_size,
    validate_file,
    validate_files,
)

__all__ = [
    "MAX_FILE_SIZE",
    "MAX_FILES",
    "SUPPORTED_EXTENSIONS",
    "ValidationResult",
    "format_file_size",
    "validate_file",
    "validate_files",
]
