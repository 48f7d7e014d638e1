"""
Pydantic schemas for the generic API responses.

Record bodies are generated per entity type at registration; only the
shared envelopes live here.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    message: str
