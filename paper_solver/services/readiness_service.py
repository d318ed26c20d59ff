import logging
from typing import Optional
from google import genai
from google.genai import types

from paper_solver.config import config
from paper_solver.clients.gemini_client import classify_error, error_summary, response_text
from paper_solver.errors import ErrorCategory
from paper_solver.models.submission import ReadinessStatus

log = logging.getLogger(__name__)

PROBE_PROMPT = "Hello, respond with 'API connected successfully'"
# Output cap for models that always think before answering
THINKING_PROBE_MIN_TOKENS = 1024

READINESS_REASONS = {
    ErrorCategory.INVALID_API_KEY: "Invalid API key",
    ErrorCategory.QUOTA_EXCEEDED: "API quota exceeded",
    ErrorCategory.PERMISSION_DENIED: "API permission denied",
    ErrorCategory.RATE_LIMITED: "API rate limit exceeded",
    ErrorCategory.GENERIC: "API validation failed",
}


class ReadinessProber:
    """Round-trips a tiny prompt to check the Gemini backend and credential"""

    def __init__(
        self,
        client: Optional[genai.Client],
        model: str = None,
        max_output_tokens: int = None,
    ):
        self.client = client
        self.model = model or config.GEMINI_GENERATION_MODEL
        self.max_output_tokens = max_output_tokens or config.PROBE_MAX_OUTPUT_TOKENS

    def _probe_config(self) -> types.GenerateContentConfig:
        # Only flash models accept a zero thinking budget; others must keep
        # thinking on and share the token cap with it
        if "flash" in self.model:
            return types.GenerateContentConfig(
                max_output_tokens=self.max_output_tokens,
                thinking_config=types.ThinkingConfig(thinking_budget=0),
            )
        return types.GenerateContentConfig(
            max_output_tokens=max(self.max_output_tokens, THINKING_PROBE_MIN_TOKENS),
        )

    def check(self) -> ReadinessStatus:
        """Never raises; every failure becomes an invalid status"""
        if self.client is None:
            log.error("API key validation failed: Gemini client is not configured")
            return ReadinessStatus(valid=False, error=READINESS_REASONS[ErrorCategory.GENERIC])

        try:
            log.info("Testing Gemini API connection...")
            response = self.client.models.generate_content(
                model=self.model,
                contents=PROBE_PROMPT,
                config=self._probe_config(),
            )
            valid = bool(response_text(response).strip())
            log.info("API validation result: %s", "SUCCESS" if valid else "FAILED")
            if not valid:
                return ReadinessStatus(valid=False, error=READINESS_REASONS[ErrorCategory.GENERIC])
            return ReadinessStatus(valid=True)

        except Exception as e:
            log.error("API key validation failed: %s", error_summary(e))
            return ReadinessStatus(valid=False, error=READINESS_REASONS[classify_error(e)])
