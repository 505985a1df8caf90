"""Application services built on the validation and storage core."""

from .health_service import HEALTHY, UNHEALTHY, HealthService
from .ingest_service import IngestService, create_ingest_service

__all__ = [
    "HEALTHY",
    "UNHEALTHY",
    "HealthService",
    "IngestService",
    "create_ingest_service",
]
