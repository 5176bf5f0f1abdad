"""
Snippetbox — Health Check Schema
==================================

What:  JSON body returned by GET /health.
Who:   Monitoring systems and load balancer probes.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Service and dependency status.

    A server that can't reach its database can't render a single page, so the
    database check decides between healthy and unhealthy.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
