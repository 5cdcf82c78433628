# detection_dashboard/dependencies.py
"""
Process-wide telemetry state and the FastAPI dependency that hands it to routers.
Tests swap in an isolated DashboardService via app.dependency_overrides.
"""

import threading

from detection_dashboard.config import settings
from detection_dashboard.services.dashboard_service import DashboardService

_service = None
_service_lock = threading.Lock()


def get_dashboard_service() -> DashboardService:
    """FastAPI dependency: returns the shared DashboardService, creating it on first use."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = DashboardService(capacity=settings.EVENT_LOG_CAPACITY)
    return _service
