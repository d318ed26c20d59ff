import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from paper_solver.api.dependencies import get_pipeline
from paper_solver.document.validator import MAX_FILE_SIZE
from paper_solver.models.responses import ProcessTextRequest
from paper_solver.models.submission import UploadedFile
from paper_solver.pipelines.solve_pipeline import SolvePipeline

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/process-text")
async def process_text(
    request: Request,
    payload: ProcessTextRequest,
    pipeline: SolvePipeline = Depends(get_pipeline)
):
    """Generate solutions for pasted question paper text"""
    log.info("Processing text request from: %s", request.client.host if request.client else "unknown")
    result = await pipeline.process_text(payload.text, payload.filename)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post("/process-file")
async def process_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    pipeline: SolvePipeline = Depends(get_pipeline)
):
    """Extract text from an uploaded PDF, image or text file and solve it"""
    log.info("Processing file upload from: %s", request.client.host if request.client else "unknown")

    upload = None
    if file is not None:
        # Never buffer more than one byte past the limit
        content = await file.read(MAX_FILE_SIZE + 1)
        await file.close()
        upload = UploadedFile(
            filename=file.filename or "upload",
            content_type=file.content_type or "application/octet-stream",
            size=len(content),
            content=content,
        )

    result = await pipeline.process_file(upload)
    return JSONResponse(status_code=result.status_code, content=result.body)
