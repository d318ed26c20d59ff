"""
Solve Pipeline
Sequences validation, extraction, the readiness gate and generation for one
request, and is the only place where failures become HTTP statuses.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from paper_solver.config import config
from paper_solver.document.validator import validate_upload
from paper_solver.errors import (
    GenerationError, InputValidationError, NoTextExtractedError,
    ServiceUnavailableError, SolverError,
)
from paper_solver.extraction.dispatcher import extract_text
from paper_solver.models.responses import (
    ErrorResponse, HealthResponse, JobStatusResponse, ProcessFileResponse, ProcessTextResponse,
)
from paper_solver.models.submission import SubmissionText, UploadedFile
from paper_solver.services.readiness_service import ReadinessProber
from paper_solver.services.solution_service import SolutionGenerator

log = logging.getLogger(__name__)

DEFAULT_FILENAME = "Manual Input"
UNAVAILABLE_RETRY_AFTER = 60  # seconds
THROTTLED_RETRY_AFTER = 120  # seconds


class PipelineResult(BaseModel):
    status_code: int
    body: Dict[str, Any]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_throttled(error: Exception) -> bool:
    if isinstance(error, GenerationError) and error.category.transient:
        return True
    message = str(error).lower()
    return "quota" in message or "rate limit" in message


def error_result(error: Exception, fallback_message: str = "Request failed") -> PipelineResult:
    """Translate a pipeline failure into a status code and error payload"""
    if isinstance(error, ServiceUnavailableError):
        body = ErrorResponse(
            message=error.message,
            error=error.reason,
            retry_after=UNAVAILABLE_RETRY_AFTER,
        )
        return PipelineResult(status_code=503, body=body.to_payload())

    if isinstance(error, (InputValidationError, NoTextExtractedError)):
        return PipelineResult(status_code=400, body=ErrorResponse(message=error.message).to_payload())

    message = str(error) or fallback_message
    if _is_throttled(error):
        body = ErrorResponse(message=message, retry_after=THROTTLED_RETRY_AFTER)
        return PipelineResult(status_code=429, body=body.to_payload())

    return PipelineResult(status_code=500, body=ErrorResponse(message=message).to_payload())


def invalid_input_result(errors: list) -> PipelineResult:
    body = ErrorResponse(message="Invalid input data", errors=errors)
    return PipelineResult(status_code=400, body=body.to_payload())


class SolvePipeline:
    """The two submission flows. Holds no per-request state."""

    def __init__(self, prober: ReadinessProber, generator: SolutionGenerator, ocr_language: str = None):
        self.prober = prober
        self.generator = generator
        self.ocr_language = ocr_language or config.OCR_LANGUAGE

    async def ensure_ready(self):
        status = await run_in_threadpool(self.prober.check)
        if not status.valid:
            raise ServiceUnavailableError(
                "AI service temporarily unavailable",
                reason=status.error or "API validation failed",
            )

    async def process_text(self, text: str, filename: Optional[str] = None) -> PipelineResult:
        """Text flow: readiness gate, then generation"""
        try:
            submission = SubmissionText(text=text, filename=filename)
            await self.ensure_ready()
            solutions = await run_in_threadpool(self.generator.generate, submission.text)

            body = ProcessTextResponse(
                extracted_text=submission.text,
                solutions=solutions,
                filename=submission.filename or DEFAULT_FILENAME,
                processed_at=_now(),
            )
            return PipelineResult(status_code=200, body=body.to_payload())

        except ValidationError as e:
            return invalid_input_result(jsonable_encoder(e.errors(include_url=False)))
        except SolverError as e:
            log.warning("Text processing error: %s", e)
            return error_result(e, "Failed to process text")
        except Exception as e:
            log.exception("Text processing error")
            return error_result(e, "Failed to process text")

    async def process_file(self, upload: Optional[UploadedFile]) -> PipelineResult:
        """File flow: readiness gate, intake validation, extraction, generation"""
        try:
            if upload is None:
                raise InputValidationError("No file uploaded")

            await self.ensure_ready()
            validate_upload(upload.content_type, upload.size)
            extracted_text = await run_in_threadpool(extract_text, upload, self.ocr_language)
            solutions = await run_in_threadpool(self.generator.generate, extracted_text)

            body = ProcessFileResponse(
                filename=upload.filename,
                file_type=upload.content_type,
                extracted_text=extracted_text,
                solutions=solutions,
                processed_at=_now(),
            )
            return PipelineResult(status_code=200, body=body.to_payload())

        except SolverError as e:
            log.warning("File processing error: %s", e)
            return error_result(e, "Failed to process file")
        except Exception as e:
            log.exception("File processing error")
            return error_result(e, "Failed to process file")

    async def health(self) -> HealthResponse:
        status = await run_in_threadpool(self.prober.check)
        return HealthResponse(
            status="ok",
            ai_connected=status.valid,
            api_error=status.error,
            timestamp=_now(),
        )

    @staticmethod
    def job_status(job_id: str) -> JobStatusResponse:
        # Every submission is processed synchronously, so there is never a
        # pending job to report.
        return JobStatusResponse(job_id=job_id, status="completed", progress=100)
