# detection_dashboard/services/dashboard_service.py
"""
Dashboard telemetry service.
Owns the counters and the two bounded logs (detections, errors) and answers
every dashboard / detection-history query from them. Nothing is persisted.

Ingestion is best effort: record_detection / record_error never raise, bad
optional fields fall back to defaults. Reads are computed on demand from a
snapshot; there is no caching between writes.

Several read-side values fall back to fixed demo figures on a cold start
(no data yet); those defaults are intentional and covered by tests.
"""

import math
import random
from datetime import datetime
from typing import Callable, Optional

from detection_dashboard.config import settings
from detection_dashboard.models.detection_event import (
    BoundingBox, DetectedObject, DetectionEvent, format_timestamp,
)
from detection_dashboard.models.error_event import ErrorEvent
from detection_dashboard.services.counters import CounterSet
from detection_dashboard.services.event_log import BoundedEventLog
from detection_dashboard.services.query_engine import QueryEngine
from detection_dashboard.services.taxonomy import CATEGORIES, CATEGORY_LABELS, classify
from detection_dashboard.services.time_windows import (
    average_per_bucket, build_buckets, count_per_bucket, parse_timeframe,
)
from detection_dashboard.utils.logger import get_logger

logger = get_logger(__name__)

# ── Cold-start placeholders ──────────────────────────────────────────────
DEFAULT_CATEGORY_DATA = [42, 23, 15, 20]   # People, Vehicles, Animals, Objects
DEFAULT_DEVICE_LABELS = ["iPhone", "Samsung", "Google Pixel", "Xiaomi", "OnePlus", "Other"]
DEFAULT_DEVICE_DATA = [32, 27, 14, 12, 8, 7]
DEFAULT_AVG_CONFIDENCE = 92.7
DEFAULT_AVG_OBJECTS = 2.4
TOP_DEVICES = 6


def _to_float(value, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _coerce_box(raw) -> BoundingBox:
    if isinstance(raw, BoundingBox):
        return BoundingBox(_to_float(raw.x_min), _to_float(raw.y_min),
                           _to_float(raw.x_max), _to_float(raw.y_max))
    if not isinstance(raw, dict):
        return BoundingBox()
    return BoundingBox(
        x_min=_to_float(raw.get("xMin", raw.get("xmin"))),
        y_min=_to_float(raw.get("yMin", raw.get("ymin"))),
        x_max=_to_float(raw.get("xMax", raw.get("xmax"))),
        y_max=_to_float(raw.get("yMax", raw.get("ymax"))),
    )


def _coerce_object(raw) -> DetectedObject:
    """Accept a DetectedObject or its dict form; anything else becomes an 'unknown' entry."""
    if isinstance(raw, DetectedObject):
        return DetectedObject(label=_text(raw.label), confidence=_to_float(raw.confidence),
                              box=_coerce_box(raw.box))
    if not isinstance(raw, dict):
        logger.warning(f"Could not convert detected object to statistics format: {raw!r}")
        return DetectedObject(label="unknown", confidence=0.0)
    label = raw.get("label")
    return DetectedObject(
        label=label if isinstance(label, str) else None,
        confidence=_to_float(raw.get("confidence", raw.get("score"))),
        box=_coerce_box(raw.get("box")),
    )


class DashboardService:
    def __init__(self, capacity: int = settings.EVENT_LOG_CAPACITY,
                 clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.counters = CounterSet()
        self.detections: BoundedEventLog[DetectionEvent] = BoundedEventLog(capacity)
        self.errors: BoundedEventLog[ErrorEvent] = BoundedEventLog(capacity)
        self.queries = QueryEngine(self.detections)

    # ── Ingestion ────────────────────────────────────────────────────────
    def record_detection(self, objects, processing_time_ms, device: Optional[str] = None,
                         image_url: Optional[str] = None, file_name: Optional[str] = None) -> DetectionEvent:
        if not isinstance(objects, (list, tuple)):
            if objects is not None:
                logger.warning(f"Ignoring detected objects of type {type(objects).__name__}")
            objects = []
        detected = [_coerce_object(obj) for obj in objects]
        device, image_url, file_name = _text(device), _text(image_url), _text(file_name)
        processing_time_ms = max(0, int(_to_float(processing_time_ms)))

        self.counters.active_sessions.increment()
        self.counters.total_api_calls.increment()
        self.counters.total_processing_time_ms.add(processing_time_ms)

        event = DetectionEvent.create(
            detected, processing_time_ms, device,
            image_url=image_url, file_name=file_name,
            recorded_at=self.clock(),
        )
        self.detections.append(event)

        for obj in detected:
            self.counters.category_counts.increment(classify(obj.label))
        if device:
            self.counters.device_counts.increment(device)

        logger.info(f"Recorded detection: {event.object_count} objects, image URL: {image_url}, "
                    f"device: {event.device}, processing time: {processing_time_ms}ms")
        return event

    def record_error(self, message: Optional[str], error_type: Optional[str]) -> ErrorEvent:
        self.counters.total_errors.increment()
        error = ErrorEvent.create(_text(message), _text(error_type), recorded_at=self.clock())
        self.errors.append(error)
        logger.warning(f"Recorded error: {error.type} - {error.message}")
        return error

    def record_deletion(self, detection_id: str, device: Optional[str]) -> None:
        logger.info(f"Recorded deletion of detection {detection_id} by device: {device}")

    # ── Dashboard ────────────────────────────────────────────────────────
    def get_dashboard_metrics(self) -> dict:
        c = self.counters
        metrics = {
            "activeSessions": c.active_sessions.value,
            "apiCalls": c.total_api_calls.value,
            "responseTime": c.average_response_time(),
            "errorRate": c.error_rate(),
            "lastUpdated": format_timestamp(self.clock()),
        }
        logger.debug(f"Dashboard metrics: sessions={metrics['activeSessions']}, calls={metrics['apiCalls']}, "
                     f"responseTime={metrics['responseTime']}ms, errorRate={metrics['errorRate']}%")
        return metrics

    def get_chart_data(self, timeframe: Optional[str] = None) -> dict:
        buckets = build_buckets(parse_timeframe(timeframe), self.clock())
        return {
            "labels": [b.label for b in buckets],
            "data": count_per_bucket(self.detections.snapshot(), buckets),
        }

    def get_response_time_data(self, timeframe: Optional[str] = None) -> dict:
        buckets = build_buckets(parse_timeframe(timeframe), self.clock())
        baseline = self.counters.baseline_response_time()
        return {
            "labels": [b.label for b in buckets],
            "data": average_per_bucket(self.detections.snapshot(), buckets, baseline),
        }

    def get_detection_categories(self) -> dict:
        data = [self.counters.category_counts.get(category) for category in CATEGORIES]
        if not any(data):
            data = list(DEFAULT_CATEGORY_DATA)
        return {"labels": [CATEGORY_LABELS[category] for category in CATEGORIES], "data": data}

    def get_analytics(self, timeframe: Optional[str] = None) -> dict:
        events = self.detections.snapshot()

        top_devices = self.counters.device_counts.most_common(TOP_DEVICES)
        if top_devices:
            device_labels = [name for name, _ in top_devices]
            device_data = [count for _, count in top_devices]
        else:
            device_labels, device_data = list(DEFAULT_DEVICE_LABELS), list(DEFAULT_DEVICE_DATA)

        return {
            "timeframe": parse_timeframe(timeframe).value,
            "performance": {
                "avgConfidence": self._average_confidence(events),
                "successRate": self.counters.success_rate(),
                "avgObjectsPerFrame": self._average_objects(events),
                "uniqueUsers": self._unique_users(),
            },
            "deviceDistribution": {"labels": device_labels, "data": device_data},
        }

    def get_system_status(self) -> list[dict]:
        """Illustrative service rows for the status panel. Loads are cosmetic, not health checks."""
        rows = [
            ("API Server", "api", "7d 12h 24m", "Just now"),
            ("Database", "database", "14d 3h 12m", "1m ago"),
            ("ML Engine (DETR)", "ml", "3d 18h 45m", "3m ago"),
            ("Cloudinary Storage", "storage", "21d 9h 32m", "5m ago"),
        ]
        return [
            {"service": name, "status": "Online", "statusClass": "success",
             "load": self._service_load(kind), "uptime": uptime, "lastUpdate": last_update}
            for name, kind, uptime, last_update in rows
        ]

    # ── Logs ─────────────────────────────────────────────────────────────
    def get_recent_detections(self, limit: int = 10) -> list[dict]:
        recent = self.detections.recent(limit)
        logger.debug(f"Returning {len(recent)} recent detections out of {len(self.detections)} total")
        return [event.to_dict() for event in recent]

    def get_error_logs(self, limit: int = 50) -> list[dict]:
        recent = self.errors.recent(limit)
        logger.debug(f"Returning {len(recent)} error logs out of {len(self.errors)} total")
        return [error.to_dict() for error in recent]

    # ── Detection history ────────────────────────────────────────────────
    def get_all_detections(self, page: int = 0, size: int = settings.DEFAULT_PAGE_SIZE,
                           category: Optional[str] = None, device: Optional[str] = None,
                           search: Optional[str] = None) -> dict:
        return self.queries.query(page, size, category, device, search)

    def get_detection_by_id(self, detection_id: str) -> Optional[dict]:
        return self.queries.get_by_id(detection_id)

    def delete_detection(self, detection_id: str) -> bool:
        return self.queries.delete_by_id(detection_id)

    def get_detection_statistics(self, timeframe: Optional[str] = None) -> dict:
        return self.queries.statistics(timeframe, self.clock())

    # ── Helpers ──────────────────────────────────────────────────────────
    @staticmethod
    def _average_confidence(events: list[DetectionEvent]) -> float:
        scores = [obj.confidence * 100 for event in events for obj in event.objects]
        return round(sum(scores) / len(scores), 1) if scores else DEFAULT_AVG_CONFIDENCE

    @staticmethod
    def _average_objects(events: list[DetectionEvent]) -> float:
        if not events:
            return DEFAULT_AVG_OBJECTS
        return round(sum(event.object_count for event in events) / len(events), 1)

    def _unique_users(self) -> int:
        # Illustrative figure padded for demos; real device count wins once it is larger
        return max(len(self.counters.device_counts), random.randint(300, 399))

    def _service_load(self, kind: str) -> int:
        c = self.counters
        if kind == "api":
            return min(95, 25 + c.active_sessions.value * 2)
        if kind == "database":
            return min(90, 18 + c.total_api_calls.value % 30)
        if kind == "ml":
            return min(95, 60 + random.randint(0, 19))
        if kind == "storage":
            return min(95, 30 + len(self.detections) // 2)
        return random.randint(20, 69)
