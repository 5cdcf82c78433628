# detection_dashboard/routers/dashboard.py
"""Dashboard read endpoints: headline metrics, chart series, breakdowns, recent logs."""

from fastapi import APIRouter, Depends
from detection_dashboard.dependencies import get_dashboard_service
from detection_dashboard.schemas.dashboard import (
    AnalyticsOut, CountSeriesOut, DashboardMetricsOut, ErrorLogOut, SeriesOut, ServiceStatusOut,
)
from detection_dashboard.schemas.detection import DetectionOut
from detection_dashboard.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/dashboard/metrics", response_model=DashboardMetricsOut)
def get_dashboard_metrics(service: DashboardService = Depends(get_dashboard_service)):
    """Active sessions, API calls, average response time and error rate."""
    return service.get_dashboard_metrics()


@router.get("/dashboard/chart-data", response_model=CountSeriesOut, summary="Call volume per time bucket")
def get_chart_data(timeframe: str = "day", service: DashboardService = Depends(get_dashboard_service)):
    return service.get_chart_data(timeframe)


@router.get("/dashboard/response-time-data", response_model=SeriesOut,
            summary="Average processing time per time bucket")
def get_response_time_data(timeframe: str = "day", service: DashboardService = Depends(get_dashboard_service)):
    """Empty buckets report the overall average (or 500ms before any call) instead of 0."""
    return service.get_response_time_data(timeframe)


@router.get("/dashboard/detection-categories", response_model=CountSeriesOut)
def get_detection_categories(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_detection_categories()


@router.get("/dashboard/system-status", response_model=list[ServiceStatusOut],
            summary="Illustrative service status rows")
def get_system_status(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_system_status()


@router.get("/dashboard/recent-detections", response_model=list[DetectionOut])
def get_recent_detections(limit: int = 10, service: DashboardService = Depends(get_dashboard_service)):
    return service.get_recent_detections(limit)


@router.get("/dashboard/analytics", response_model=AnalyticsOut)
def get_analytics(timeframe: str = "day", service: DashboardService = Depends(get_dashboard_service)):
    return service.get_analytics(timeframe)


@router.get("/dashboard/error-logs", response_model=list[ErrorLogOut])
def get_error_logs(limit: int = 50, service: DashboardService = Depends(get_dashboard_service)):
    return service.get_error_logs(limit)
