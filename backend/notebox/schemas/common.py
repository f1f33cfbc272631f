"""
Notebox Backend — Shared Response Schemas
==========================================

What:  Error and health payloads used across routers.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  The single error shape returned by every endpoint.

    Example:
        {"error": "invalid noteId"}
    """

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
