"""
Error taxonomy for the solving pipeline.
Lower layers raise these; only the pipeline turns them into HTTP statuses.
"""
from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    INVALID_API_KEY = "invalid_api_key"
    QUOTA_EXCEEDED = "quota_exceeded"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    GENERIC = "generic"

    @property
    def transient(self) -> bool:
        return self in (ErrorCategory.QUOTA_EXCEEDED, ErrorCategory.RATE_LIMITED)


class SolverError(Exception):
    """Base class for classified pipeline failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(SolverError):
    """Empty text, missing file, unsupported type or oversize upload"""


class ExtractionError(SolverError):
    """A backend could not turn the uploaded bytes into text"""


class NoTextExtractedError(ExtractionError):
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class GenerationError(SolverError):
    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.GENERIC):
        super().__init__(message)
        self.category = category


class ServiceUnavailableError(SolverError):
    """AI backend failed the readiness check"""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
