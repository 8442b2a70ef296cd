"""Health check response schema."""
from pydantic import BaseModel

from utils.config import API_VERSION


class HealthResponse(BaseModel):
    """Liveness of the registry process; says nothing about the database."""

    status: str = "ok"
    service: str = "mds-vehicle-registry"
    version: str = API_VERSION
