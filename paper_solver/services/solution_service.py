import logging
from typing import Optional
from google import genai
from google.genai import types

from paper_solver.config import config
from paper_solver.clients.gemini_client import classify_error, error_summary, response_text
from paper_solver.errors import ErrorCategory, GenerationError, InputValidationError

log = logging.getLogger(__name__)

GENERATION_MESSAGES = {
    ErrorCategory.INVALID_API_KEY: "Invalid API key configuration. Please check your Gemini API key.",
    ErrorCategory.QUOTA_EXCEEDED: "API quota exceeded. Please try again later or check your billing.",
    ErrorCategory.PERMISSION_DENIED: "Permission denied. Please verify your API key has proper permissions.",
    ErrorCategory.RATE_LIMITED: "Rate limit exceeded. Please wait a moment and try again.",
}


def build_prompt(question_text: str) -> str:
    """Tutoring prompt for a whole question paper"""
    return f"""You are an expert tutor. Analyze the following question paper and provide detailed, step-by-step solutions for each question. Format your response in markdown with clear headings and explanations.

Question Paper:
{question_text}

Please provide:
1. Clear identification of each question
2. Step-by-step solution methodology
3. Final answers where applicable
4. Explanations of key concepts used

Format the response professionally with proper markdown formatting."""


class SolutionGenerator:
    """Generates step-by-step solutions for question paper text with Gemini"""

    def __init__(
        self,
        client: Optional[genai.Client],
        model: str = None,
        temperature: float = None,
        max_output_tokens: int = None,
    ):
        self.client = client
        self.model = model or config.GEMINI_GENERATION_MODEL
        self.temperature = config.GENERATION_TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or config.GENERATION_MAX_OUTPUT_TOKENS

    def generate(self, question_text: str) -> str:
        """
        Generate solutions for the given question text

        Raises:
            InputValidationError: If the text is empty or whitespace
            GenerationError: If Gemini fails or returns nothing
        """
        if not question_text or not question_text.strip():
            raise InputValidationError("Question text is required")

        if self.client is None:
            raise GenerationError(
                "Failed to generate solutions: GEMINI_API_KEY environment variable is not set"
            )

        try:
            log.info("Attempting to generate solutions with Gemini API...")
            response = self.client.models.generate_content(
                model=self.model,
                contents=build_prompt(question_text),
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            log.error("Detailed error in generate: %s", error_summary(e))
            category = classify_error(e)
            message = GENERATION_MESSAGES.get(category)
            if message is None:
                message = f"Failed to generate solutions: {getattr(e, 'message', None) or e}"
            raise GenerationError(message, category) from e

        solution = response_text(response)
        if not solution.strip():
            raise GenerationError("Failed to generate solutions: AI model returned empty response")

        log.info("Successfully generated solutions (%d characters)", len(solution))
        return solution
