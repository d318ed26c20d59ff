import logging
from typing import Any, Iterator, Optional
from google import genai
from google.genai import errors

from paper_solver.config import config
from paper_solver.errors import ErrorCategory

log = logging.getLogger(__name__)

# Reason tokens the Gemini API puts in error details (google.rpc.ErrorInfo)
REASON_CATEGORIES = [
    ("API_KEY_INVALID", ErrorCategory.INVALID_API_KEY),
    ("QUOTA_EXCEEDED", ErrorCategory.QUOTA_EXCEEDED),
    ("PERMISSION_DENIED", ErrorCategory.PERMISSION_DENIED),
    ("RATE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMITED),
]


def create_gemini_client(api_key: Optional[str] = None) -> genai.Client:
    """Create the Gemini client. Called once per process at startup."""
    api_key = api_key or config.GEMINI_API_KEY
    if not api_key:
        raise ValueError("GEMINI_API_KEY environment variable is not set")
    client = genai.Client(api_key=api_key)
    log.info("Gemini client initialized")
    return client


def _iter_reasons(details: Any) -> Iterator[str]:
    if isinstance(details, dict):
        reason = details.get("reason")
        if isinstance(reason, str):
            yield reason
        for value in details.values():
            yield from _iter_reasons(value)
    elif isinstance(details, list):
        for item in details:
            yield from _iter_reasons(item)


def _classify_structured(exc: Exception) -> Optional[ErrorCategory]:
    reasons = set(_iter_reasons(getattr(exc, "details", None)))
    for token, category in REASON_CATEGORIES:
        if token in reasons:
            return category

    status = getattr(exc, "status", None)
    code = getattr(exc, "code", None)
    if status == "UNAUTHENTICATED" or code == 401:
        return ErrorCategory.INVALID_API_KEY
    if status == "PERMISSION_DENIED" or code == 403:
        return ErrorCategory.PERMISSION_DENIED
    if status == "RESOURCE_EXHAUSTED" or code == 429:
        message = (getattr(exc, "message", None) or str(exc)).lower()
        if "quota" in message:
            return ErrorCategory.QUOTA_EXCEEDED
        return ErrorCategory.RATE_LIMITED
    return None


def classify_error(exc: Exception) -> ErrorCategory:
    """
    Map a Gemini failure onto one of the five caller-facing categories.

    Structured fields of google.genai APIError are consulted first (detail
    reasons, status, HTTP code). Matching on the message text is the last
    resort, for errors raised outside the API layer.
    """
    if isinstance(exc, errors.APIError) or hasattr(exc, "status"):
        category = _classify_structured(exc)
        if category is not None:
            return category

    text = str(exc)
    for token, category in REASON_CATEGORIES:
        if token in text:
            return category
    return ErrorCategory.GENERIC


def error_summary(exc: Exception) -> dict:
    """Fields worth logging for a failed Gemini call"""
    return {
        "message": getattr(exc, "message", None) or str(exc),
        "status": getattr(exc, "status", None),
        "code": getattr(exc, "code", None),
        "details": getattr(exc, "details", None),
    }


def response_text(response: Any) -> str:
    """Text of a generate_content response, empty when there is none"""
    if response is None:
        return ""
    return getattr(response, "text", None) or ""
