import os
import logging
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Gemini Configuration
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_GENERATION_MODEL = os.getenv("GEMINI_GENERATION_MODEL", "gemini-2.5-flash")
    GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.3"))
    GENERATION_MAX_OUTPUT_TOKENS = int(os.getenv("GENERATION_MAX_OUTPUT_TOKENS", "8192"))
    PROBE_MAX_OUTPUT_TOKENS = int(os.getenv("PROBE_MAX_OUTPUT_TOKENS", "100"))

    # OCR Configuration
    OCR_LANGUAGE = os.getenv("OCR_LANGUAGE", "eng")
    TESSERACT_CMD = os.getenv("TESSERACT_CMD", "") or None

    # Server Configuration
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS Configuration
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
    CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"

    @classmethod
    def validate(cls):
        """Validate required configuration"""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY is required")
        return True

config = Config()


def configure_logging(level: str = None):
    """Configure root logging once for the service"""
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # Suppress verbose parser warnings
    logging.getLogger("pdfminer").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.ERROR)
