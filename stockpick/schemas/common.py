"""
Stockpick Common Schemas
Shared Pydantic models for common API structures
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ErrorResponse(BaseModel):
    """
    Standard error response model

    Used for all API error responses
    """
    error: str = Field(..., description="Error type or category")
    detail: Optional[str] = Field(None, description="Human-readable error details")
    type: Optional[str] = Field(None, description="Application-specific error class")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": "invalid_demand",
            "detail": "Requested quantity for L3-8GX6 must be greater than zero",
            "type": "client_error"
        }
    })


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
