"""
Postboard Backend - Shared Response Schemas
============================================

Error and probe payloads used across routes.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body for JSON endpoints.

    Example:
        {"error": "Comment text cannot be empty"}
    """
    error: str = Field(description="Human-readable error description")


class WelcomeResponse(BaseModel):
    status: str = Field(default="success")
    message: str = Field(default="Welcome!")


class HealthResponse(BaseModel):
    """
    Health check response showing service and database status.

    A backend that cannot reach its database is reported as unhealthy.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
