"""
Common schema types used across the API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    field: Optional[str] = None
    details: Dict[str, Any] = {}
    request_id: Optional[str] = None


class ValidationResponse(BaseModel):
    """Returned by check endpoints that only succeed or raise."""

    valid: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    environment: str
