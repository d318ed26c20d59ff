import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from paper_solver.config import config, configure_logging
from paper_solver.clients.gemini_client import create_gemini_client
from paper_solver.api.routes import solve, status
from paper_solver.document.validator import FILE_TOO_LARGE_MESSAGE, MAX_FILE_SIZE
from paper_solver.errors import InputValidationError
from paper_solver.pipelines.solve_pipeline import SolvePipeline, error_result, invalid_input_result
from paper_solver.services.readiness_service import ReadinessProber
from paper_solver.services.solution_service import SolutionGenerator

log = logging.getLogger(__name__)

MAX_LOG_LINE = 80

UPLOAD_PATH = "/api/process-file"
# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD = 64 * 1024
MAX_UPLOAD_REQUEST_SIZE = MAX_FILE_SIZE + MULTIPART_OVERHEAD


def build_pipeline(client=None) -> SolvePipeline:
    """Wire the Gemini client into the prober and generator, once per process"""
    if client is None:
        try:
            config.validate()
            client = create_gemini_client()
        except ValueError as e:
            # The service still starts; the readiness gate reports the problem
            log.error("Gemini client unavailable: %s", e)
    return SolvePipeline(
        prober=ReadinessProber(client),
        generator=SolutionGenerator(client),
    )


def create_app(pipeline: Optional[SolvePipeline] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        if getattr(app.state, "pipeline", None) is None:
            app.state.pipeline = build_pipeline()
        yield

    app = FastAPI(
        title="Paper Solver",
        description="Step-by-step solutions for question papers",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        # Checked before the multipart body is read or spooled anywhere
        if request.url.path == UPLOAD_PATH:
            length = request.headers.get("content-length", "")
            if length.isdigit() and int(length) > MAX_UPLOAD_REQUEST_SIZE:
                log.warning("Rejected upload of %s bytes", length)
                result = error_result(InputValidationError(FILE_TOO_LARGE_MESSAGE))
                return JSONResponse(status_code=result.status_code, content=result.body)
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration = int((time.perf_counter() - start) * 1000)
            line = f"{request.method} {request.url.path} {response.status_code} in {duration}ms"
            if len(line) > MAX_LOG_LINE:
                line = line[:MAX_LOG_LINE - 1] + "…"
            log.info(line)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        result = invalid_input_result(jsonable_encoder(exc.errors()))
        return JSONResponse(status_code=result.status_code, content=result.body)

    app.include_router(status.router, prefix="/api", tags=["status"])
    app.include_router(solve.router, prefix="/api", tags=["solve"])

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": "Paper Solver",
            "version": "1.0.0",
            "endpoints": {
                "health": "GET /api/health",
                "process_text": "POST /api/process-text",
                "process_file": "POST /api/process-file",
                "status": "GET /api/status/{job_id}",
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
