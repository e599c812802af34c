"""
API schemas for JSON responses
"""

from pydantic import BaseModel
from typing import Any, Dict, Optional


class TranscriptionResponse(BaseModel):
    """Result of a standalone transcription"""
    script: str


class ErrorResponse(BaseModel):
    """Body returned for failed jobs"""
    detail: str
    error_type: Optional[str] = None


class HealthResponse(BaseModel):
    """Runtime health report"""
    status: str
    checks: Dict[str, Any]
