# Detection Dashboard: in-memory telemetry records
# Import all record types here so callers have one import point

from detection_dashboard.models.detection_event import BoundingBox, DetectedObject, DetectionEvent  # noqa
from detection_dashboard.models.error_event import ErrorEvent                                      # noqa
