"""
Image OCR Module
Enhances scanned question papers and runs Tesseract over them
"""
import logging
from io import BytesIO

import pytesseract
from PIL import Image, ImageFilter, ImageOps

from paper_solver.config import config
from paper_solver.errors import ExtractionError, NoTextExtractedError

log = logging.getLogger(__name__)

if config.TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = config.TESSERACT_CMD


def preprocess_image(image_bytes: bytes) -> Image.Image:
    """Grayscale, stretch contrast to the full range, then sharpen edges"""
    with Image.open(BytesIO(image_bytes)) as img:
        img.load()
        grey = ImageOps.grayscale(img)
    normalized = ImageOps.autocontrast(grey)
    return normalized.filter(ImageFilter.SHARPEN)


def extract_text_from_image(image_bytes: bytes, language: str = "eng") -> str:
    """
    Extract text from an uploaded image

    Args:
        image_bytes: Raw PNG/JPEG content
        language: Tesseract language pack

    Returns:
        Recognized text, trimmed

    Raises:
        NoTextExtractedError: If OCR recognizes nothing
        ExtractionError: If the image cannot be decoded or OCR fails
    """
    try:
        image = preprocess_image(image_bytes)
        log.info("Running OCR on %dx%d image", image.width, image.height)
        text = pytesseract.image_to_string(image, lang=language)
    except Exception as e:
        log.error("OCR extraction failed: %s", e)
        raise ExtractionError(f"Failed to extract text from image: {e}") from e

    if not text.strip():
        raise NoTextExtractedError("No text could be extracted from the image")

    return text.strip()
