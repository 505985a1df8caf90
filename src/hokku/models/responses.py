"""API response models."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..utils.timezone import utc_now
from .results import PersistenceResult


class APIResponse(BaseModel):
    """Standard envelope for every API response."""

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "APIResponse":
        """Create a successful API response."""
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        message: str,
        error: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> "APIResponse":
        """Create an error API response."""
        return cls(success=False, message=message, error=error, errors=errors or [])


class WebhookResponse(BaseModel):
    """Response body after a payload was stored."""

    id: str
    filename: str
    path: str
    size: int

    @classmethod
    def from_result(cls, result: PersistenceResult) -> "WebhookResponse":
        return cls(
            id=result.identifier,
            filename=result.filename,
            path=result.path,
            size=result.size,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime = Field(default_factory=utc_now)
    checks: Dict[str, str] = Field(default_factory=dict)
    uptime: str
    version: str
