# detection_dashboard/routers/events.py
"""
Ingestion webhooks for the inference layer.
POST /events/detection: a detection finished; record objects, timing, device.
POST /events/error:     a detection failed; record message and error type.
Both always return HTTP 200: telemetry must never fail the caller's request.
"""

from fastapi import APIRouter, Depends, Request
from detection_dashboard.dependencies import get_dashboard_service
from detection_dashboard.schemas.detection import DetectionReport, ErrorReport
from detection_dashboard.services.dashboard_service import DashboardService
from detection_dashboard.utils.device_info import resolve_device
from detection_dashboard.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/events/detection", summary="Record a completed detection")
def receive_detection(body: DetectionReport, request: Request,
                      service: DashboardService = Depends(get_dashboard_service)):
    try:
        device = body.device or resolve_device(request.headers)
        objects = [obj.model_dump() for obj in body.objects]
        event = service.record_detection(objects, body.processingTime, device,
                                         image_url=body.imageUrl, file_name=body.fileName)
        return {"status": "ok", "objectCount": event.object_count}
    except Exception as e:
        logger.error(f"Detection ingestion error: {e}", exc_info=True)
        return {"status": "error", "detail": str(e)}  # Still return 200


@router.post("/events/error", summary="Record a failed detection")
def receive_error(body: ErrorReport, service: DashboardService = Depends(get_dashboard_service)):
    try:
        service.record_error(body.message, body.type)
        return {"status": "ok", "type": body.type}
    except Exception as e:
        logger.error(f"Error ingestion error: {e}", exc_info=True)
        return {"status": "error", "detail": str(e)}
