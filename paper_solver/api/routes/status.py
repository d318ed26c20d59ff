from fastapi import APIRouter, Depends

from paper_solver.api.dependencies import get_pipeline
from paper_solver.models.responses import HealthResponse, JobStatusResponse
from paper_solver.pipelines.solve_pipeline import SolvePipeline

router = APIRouter()


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(pipeline: SolvePipeline = Depends(get_pipeline)):
    """Health check, re-probes the Gemini backend on every call"""
    return await pipeline.health()


@router.get("/status/{job_id}", response_model=JobStatusResponse)
async def job_status(job_id: str):
    """
    Job status probe. Processing is synchronous, so every job reports
    completed; no job tracking exists behind this endpoint.
    """
    return SolvePipeline.job_status(job_id)
