from typing import Optional

from paper_solver.errors import InputValidationError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB, every format

IMAGE_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg"}

UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type. Please upload PDF, PNG, JPG, or TXT files."
FILE_TOO_LARGE_MESSAGE = "File size too large. Maximum size is 10MB."


def detect_format(content_type: Optional[str]) -> Optional[str]:
    """
    Map a declared media type to an extractor family
    Returns: "pdf", "image", "text" or None
    """
    if not content_type:
        return None
    if content_type == "application/pdf":
        return "pdf"
    if content_type.startswith("image/"):
        return "image"
    if content_type == "text/plain":
        return "text"
    return None


def validate_upload(content_type: Optional[str], size: int) -> str:
    """
    Check declared type and byte size before any extraction work
    Returns: the detected format
    Raises: InputValidationError
    """
    file_format = detect_format(content_type)

    if file_format == "image" and content_type not in IMAGE_MIME_TYPES:
        raise InputValidationError("Invalid file type. Only PNG and JPEG images are supported.")
    if file_format is None:
        raise InputValidationError(UNSUPPORTED_TYPE_MESSAGE)

    if size > MAX_FILE_SIZE:
        raise InputValidationError(FILE_TOO_LARGE_MESSAGE)

    return file_format
