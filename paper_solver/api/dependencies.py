from fastapi import Request

from paper_solver.pipelines.solve_pipeline import SolvePipeline


def get_pipeline(request: Request) -> SolvePipeline:
    """Dependency injection for the per-process pipeline"""
    return request.app.state.pipeline
