from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from enum import Enum


class ResponseStatus(str, Enum):
    """Response status enumeration"""
    OK = "ok"
    DEGRADED = "degraded"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: ResponseStatus = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    llm_ok: bool = Field(..., description="Generation backend reachable")
    catalog_ok: bool = Field(..., description="Catalog readable")
    model_name: Optional[str] = Field(None, description="Configured model name")
    total_products: Optional[int] = Field(None, ge=0, description="Products in the catalog")


class ErrorResponse(BaseModel):
    """Error response model"""
    status: ResponseStatus = Field(default=ResponseStatus.ERROR, description="Error status")
    error_code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "error",
                "error_code": "INVALID_REQUEST",
                "message": "Field 'message' is required",
                "timestamp": "2024-01-10T12:30:00Z"
            }
        }
