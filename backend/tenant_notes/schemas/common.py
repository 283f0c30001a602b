"""
Tenant Notes Backend — Shared Schemas
=====================================

What:  Base model for camelCase JSON plus error and health payloads.
Why:   The API speaks camelCase (`tenantId`, `createdAt`) while Python code
       uses snake_case attributes. The alias generator bridges the two;
       FastAPI serializes response models by alias.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API schema: camelCase on the wire, ORM-readable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "quota_exceeded",
            "message": "FREE plan limit reached. Upgrade to PRO.",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(default="ok", description="Liveness status")


class ReadinessResponse(BaseModel):
    status: str = Field(description="ok or unavailable")
    database: str = Field(description="Database connectivity: connected, disconnected")
