"""Error codes reported when a track is rejected or cannot be analyzed"""

UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
DECODE_FAILED = "DECODE_FAILED"
ANALYSIS_FAILED = "ANALYSIS_FAILED"
ANALYSIS_TIMEOUT = "ANALYSIS_TIMEOUT"


class AnalysisError(Exception):
    """Analysis of a track failed. `code` is one of the constants above."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
