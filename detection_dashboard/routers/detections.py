# detection_dashboard/routers/detections.py
"""Detection history: paginated listing, statistics, lookup and delete by synthetic id."""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request
from typing import Optional
from detection_dashboard.config import settings
from detection_dashboard.dependencies import get_dashboard_service
from detection_dashboard.models.detection_event import format_timestamp
from detection_dashboard.schemas.detection import (
    DeletionOut, DetectionOut, DetectionPageOut, DetectionStatisticsOut,
)
from detection_dashboard.services.dashboard_service import DashboardService
from detection_dashboard.utils.device_info import resolve_device
from detection_dashboard.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/detect", response_model=DetectionPageOut, summary="List detections, filterable and paginated")
def get_all_detections(
    page: int = 0,
    size: int = settings.DEFAULT_PAGE_SIZE,
    category: Optional[str] = None,
    device: Optional[str] = None,
    search: Optional[str] = None,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Newest first. `category` is people | vehicles | animals | objects | all,
    `device` and `search` are case-insensitive substring matches.
    Out-of-range page/size values are clamped, never rejected.
    """
    logger.info(f"Listing detections page={page} size={size} category={category} "
                f"device={device} search={search}")
    return service.get_all_detections(page, size, category, device, search)


@router.get("/detect/statistics", response_model=DetectionStatisticsOut)
def get_detection_statistics(timeframe: str = "day", service: DashboardService = Depends(get_dashboard_service)):
    """Aggregates over detections newer than now minus the timeframe window."""
    return service.get_detection_statistics(timeframe)


@router.get("/detect/health", summary="Detection service health check")
def health_check(service: DashboardService = Depends(get_dashboard_service)):
    return {
        "status": "UP",
        "timestamp": format_timestamp(datetime.now()),
        "service": "Object Detection API",
        "version": "1.0.0",
        "dashboardService": "UP" if service is not None else "DOWN",
    }


@router.get("/detect/{detection_id}", response_model=DetectionOut)
def get_detection(detection_id: str, service: DashboardService = Depends(get_dashboard_service)):
    detection = service.get_detection_by_id(detection_id)
    if detection is None:
        raise HTTPException(status_code=404, detail=f"Detection '{detection_id}' not found")
    return detection


@router.delete("/detect/{detection_id}", response_model=DeletionOut)
def delete_detection(detection_id: str, request: Request,
                     service: DashboardService = Depends(get_dashboard_service)):
    device = resolve_device(request.headers)
    if not service.delete_detection(detection_id):
        raise HTTPException(status_code=404, detail=f"Detection '{detection_id}' not found")
    service.record_deletion(detection_id, device)
    return {
        "success": True,
        "message": "Detection deleted successfully",
        "detectionId": detection_id,
        "deletedAt": format_timestamp(datetime.now()),
        "deletedBy": device,
    }
