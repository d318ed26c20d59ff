from typing import Optional
from pydantic import BaseModel, Field

class SubmissionText(BaseModel):
    text: str = Field(..., min_length=1)
    filename: Optional[str] = None

class UploadedFile(BaseModel):
    filename: str
    content_type: str
    size: int
    content: bytes = Field(repr=False)

class ReadinessStatus(BaseModel):
    valid: bool
    error: Optional[str] = None
