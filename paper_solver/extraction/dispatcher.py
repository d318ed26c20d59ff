import logging
from typing import Callable, Dict

from paper_solver.config import config
from paper_solver.document.validator import detect_format, UNSUPPORTED_TYPE_MESSAGE
from paper_solver.errors import InputValidationError, NoTextExtractedError
from paper_solver.extraction.ocr import extract_text_from_image
from paper_solver.extraction.pdf_parser import extract_text_from_pdf
from paper_solver.extraction.text_extractor import extract_plain_text
from paper_solver.models.submission import UploadedFile

log = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text could be extracted from the uploaded file"


def _extractors(ocr_language: str) -> Dict[str, Callable[[bytes], str]]:
    return {
        "pdf": extract_text_from_pdf,
        "image": lambda data: extract_text_from_image(data, language=ocr_language),
        "text": extract_plain_text,
    }


def extract_text(upload: UploadedFile, ocr_language: str = None) -> str:
    """
    Route a validated upload to the extractor for its declared media type.
    Any result without visible text is reported as NoTextExtractedError.
    """
    file_format = detect_format(upload.content_type)
    if file_format is None:
        raise InputValidationError(UNSUPPORTED_TYPE_MESSAGE)

    extractor = _extractors(ocr_language or config.OCR_LANGUAGE)[file_format]
    log.info("Extracting %s as %s (%d bytes)", upload.filename, file_format, upload.size)

    try:
        text = extractor(upload.content)
    except NoTextExtractedError as e:
        log.warning("%s: %s", upload.filename, e.message)
        raise NoTextExtractedError(NO_TEXT_MESSAGE, detail=e.message) from e

    if not text.strip():
        raise NoTextExtractedError(NO_TEXT_MESSAGE)

    return text
