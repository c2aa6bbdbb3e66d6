"""Health check API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    firebase: str = Field(..., description="connected or disconnected")
    email: str = Field(..., description="connected or disconnected")


class HealthResponse(BaseModel):
    """Response for GET /health."""

    success: bool = True
    status: str = Field(default="healthy", description="Service status")
    environment: str
    timestamp: datetime
    services: ServiceStatus
