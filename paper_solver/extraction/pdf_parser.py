"""
PDF Parser Module
Extracts the text layer of an uploaded PDF using pdfminer.six
"""
import logging
from io import BytesIO, StringIO

from pdfminer.high_level import extract_text_to_fp
from pdfminer.layout import LAParams
from pdfminer.pdfinterp import PDFResourceManager, PDFPageInterpreter
from pdfminer.converter import TextConverter
from pdfminer.pdfpage import PDFPage

from paper_solver.errors import ExtractionError, NoTextExtractedError

log = logging.getLogger(__name__)

PDF_HEADER = b"%PDF-"


def extract_text_from_pdf(pdf_bytes: bytes) -> str:
    """
    Extract text from an in-memory PDF

    Args:
        pdf_bytes: Raw PDF file content

    Returns:
        Extracted text, trimmed

    Raises:
        NoTextExtractedError: If the PDF has no recoverable text layer
        ExtractionError: If the PDF cannot be parsed (malformed, encrypted)
    """
    try:
        if not is_pdf(pdf_bytes):
            raise ValueError("File is not a valid PDF document")

        # Primary method: High-level extraction (faster)
        text = extract_text(pdf_bytes)

        if not text.strip():
            # Fallback: Low-level extraction with custom parameters
            log.info("Primary PDF extraction returned empty, trying fallback")
            text = extract_text_fallback(pdf_bytes)

    except Exception as e:
        log.error("PDF extraction failed: %s", e)
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

    if not text.strip():
        raise NoTextExtractedError("No text could be extracted from the PDF")

    log.info("Extracted %d characters from PDF", len(text))
    return text.strip()


def is_pdf(pdf_bytes: bytes) -> bool:
    """Check the PDF header"""
    return pdf_bytes[:len(PDF_HEADER)] == PDF_HEADER


def extract_text(pdf_bytes: bytes) -> str:
    """Primary extraction method using pdfminer's high-level API"""
    output_string = StringIO()

    extract_text_to_fp(
        BytesIO(pdf_bytes),
        output_string,
        laparams=LAParams(),
    )

    return output_string.getvalue()


def extract_text_fallback(pdf_bytes: bytes) -> str:
    """
    Fallback extraction method with custom LAParams for better text extraction
    on loosely laid out scans with a text layer
    """
    output_string = StringIO()

    laparams = LAParams(
        line_overlap=0.5,
        char_margin=2.0,
        line_margin=0.5,
        word_margin=0.1,
        boxes_flow=0.5,
        detect_vertical=True,
        all_texts=False
    )

    rsrcmgr = PDFResourceManager()
    device = TextConverter(rsrcmgr, output_string, laparams=laparams)
    try:
        interpreter = PDFPageInterpreter(rsrcmgr, device)
        for page in PDFPage.get_pages(BytesIO(pdf_bytes), check_extractable=True):
            interpreter.process_page(page)
    finally:
        device.close()

    return output_string.getvalue()
