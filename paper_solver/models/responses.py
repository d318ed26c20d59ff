from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys, matching the web client"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProcessTextRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Question paper text")
    filename: Optional[str] = Field(None, description="Display name for the submission")


class ProcessTextResponse(CamelModel):
    success: bool = True
    extracted_text: str
    solutions: str
    filename: str
    processed_at: str


class ProcessFileResponse(CamelModel):
    success: bool = True
    filename: str
    file_type: str
    extracted_text: str
    solutions: str
    processed_at: str


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None
    retry_after: Optional[int] = None


class HealthResponse(CamelModel):
    status: str
    ai_connected: bool
    api_error: Optional[str] = None
    timestamp: str


class JobStatusResponse(CamelModel):
    job_id: str
    status: str
    progress: int
