# detection_dashboard/routers/health.py
"""
System health check endpoint.
Reports backend status and the fill level of the in-memory telemetry logs.
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from detection_dashboard.dependencies import get_dashboard_service
from detection_dashboard.models.detection_event import format_timestamp
from detection_dashboard.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(service: DashboardService = Depends(get_dashboard_service)):
    """
    Returns:
    - Backend status
    - Detection / error log sizes against their capacity
    """
    return {
        "status": "ok",
        "timestamp": format_timestamp(datetime.now()),
        "backend": "ok",
        "detections": {"stored": len(service.detections), "capacity": service.detections.capacity},
        "errors": {"stored": len(service.errors), "capacity": service.errors.capacity},
    }
