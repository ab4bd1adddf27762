"""Exception hierarchy for the recommendation optimizer."""
from typing import List, Optional


class OptimizerError(Exception):
    """Base class for every error raised by the optimizer."""


class ConfigurationError(OptimizerError):
    """Raised when an optimizer configuration file is invalid."""

    def __init__(self, config_path: str, message: str) -> None:
        self.config_path = config_path
        self.message = message
        super().__init__(f"Invalid configuration at {config_path}: {message}")


class AnalyzerFailure(OptimizerError):
    """An upstream analyzer raised while analyzing one file."""

    def __init__(self, file_path: str, analyzer: str, cause: BaseException) -> None:
        self.file_path = file_path
        self.analyzer = analyzer
        self.cause = cause
        super().__init__(f"Analyzer {analyzer} failed on {file_path}: {cause}")


class CompletionServiceError(OptimizerError):
    """Any failure of the completion service.

    Network errors, timeouts, authentication and rate limiting all
    collapse into this one kind at the optimizer boundary.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BatchParseError(OptimizerError):
    """A completion response arrived but is not split into per-file sections."""

    def __init__(self, message: str, missing_files: Optional[List[int]] = None) -> None:
        self.missing_files = missing_files or []
        super().__init__(message)
