"""
Pydantic base models for shared API response shapes.
"""

from pydantic import BaseModel
from typing import Any, List, Optional


class ActionResponse(BaseModel):
    """Response for admin actions (deletes, settings writes)."""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Client-facing error body for 400 responses."""
    error: str
    reason: Optional[str] = None
    details: Optional[List[Any]] = None
    reportId: Optional[str] = None
