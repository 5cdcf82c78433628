# detection_dashboard/services/query_engine.py
"""
Read-side queries over the detection log: id lookup/delete, the paginated
and filterable listing, and per-timeframe statistics.

Detections have no stored primary key. Their id is derived from
timestamp + device + object count on every read, so two detections sharing
all three collide and the oldest one wins lookups and deletes.
"""

import math
from datetime import datetime
from typing import Optional

from detection_dashboard.config import settings
from detection_dashboard.models.detection_event import DetectionEvent, format_timestamp, parse_timestamp
from detection_dashboard.services.event_log import BoundedEventLog
from detection_dashboard.services.taxonomy import classify
from detection_dashboard.services.time_windows import parse_timeframe, window_start
from detection_dashboard.utils.logger import get_logger

logger = get_logger(__name__)

ID_PREFIX = "det_"


def _string_hash(text: str) -> int:
    """32-bit polynomial string hash (h = 31*h + code unit), signed like a Java int."""
    data = text.encode("utf-16-be")
    h = 0
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def detection_id(event: DetectionEvent) -> str:
    combined = f"{event.timestamp or ''}{event.device or ''}{event.object_count}"
    return f"{ID_PREFIX}{abs(_string_hash(combined))}"


def with_id(event: DetectionEvent) -> dict:
    record = event.to_dict()
    record["id"] = detection_id(event)
    return record


def clamp_page(page, page_size) -> tuple[int, int]:
    """Negative pages become 0; sizes outside (0, MAX_PAGE_SIZE] become the default."""
    page = page if isinstance(page, int) and page > 0 else 0
    if not isinstance(page_size, int) or page_size <= 0 or page_size > settings.MAX_PAGE_SIZE:
        page_size = settings.DEFAULT_PAGE_SIZE
    return page, page_size


def _matches_category(event: DetectionEvent, category: Optional[str]) -> bool:
    if not category or category.lower() == "all":
        return True
    wanted = category.lower()
    return any(classify(obj.label) == wanted for obj in event.objects)


def _matches_device(event: DetectionEvent, device: Optional[str]) -> bool:
    if not device:
        return True
    return bool(event.device) and device.lower() in event.device.lower()


def _matches_search(event: DetectionEvent, search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(field and needle in field.lower()
               for field in (event.file_name, event.device, event.timestamp))


class QueryEngine:
    def __init__(self, detections: BoundedEventLog):
        self.detections = detections

    # ── Lookup / delete ──────────────────────────────────────────────────
    def get_by_id(self, wanted_id: str) -> Optional[dict]:
        for event in self.detections.snapshot():
            if detection_id(event) == wanted_id:
                return with_id(event)
        return None

    def delete_by_id(self, wanted_id: str) -> bool:
        removed = self.detections.remove_first(lambda event: detection_id(event) == wanted_id)
        if removed is None:
            logger.warning(f"Detection not found for deletion: {wanted_id}")
            return False
        logger.info(f"Deleted detection with ID: {wanted_id}")
        return True

    # ── Listing ──────────────────────────────────────────────────────────
    def query(self, page: int = 0, page_size: int = settings.DEFAULT_PAGE_SIZE,
              category: Optional[str] = None, device: Optional[str] = None,
              search: Optional[str] = None) -> dict:
        page, page_size = clamp_page(page, page_size)

        matched = [
            event for event in self.detections.snapshot()
            if _matches_category(event, category)
            and _matches_device(event, device)
            and _matches_search(event, search)
        ]
        # Fixed-width ISO timestamps sort correctly as strings
        matched.sort(key=lambda event: event.timestamp or "", reverse=True)

        total_elements = len(matched)
        total_pages = math.ceil(total_elements / page_size)
        start = page * page_size
        content = [with_id(event) for event in matched[start:start + page_size]]

        logger.debug(f"Retrieved {len(content)} detections (page {page + 1}/{total_pages}, total: {total_elements})")
        return {
            "content": content,
            "totalElements": total_elements,
            "totalPages": total_pages,
            "currentPage": page,
            "pageSize": page_size,
            "hasNext": page < total_pages - 1,
            "hasPrevious": page > 0,
        }

    # ── Statistics ───────────────────────────────────────────────────────
    def statistics(self, timeframe: Optional[str] = None, now: Optional[datetime] = None) -> dict:
        timeframe = parse_timeframe(timeframe)
        now = now or datetime.now()
        start_time = window_start(timeframe, now)

        in_window = []
        for event in self.detections.snapshot():
            moment = parse_timestamp(event.timestamp)
            if moment is not None and moment > start_time:
                in_window.append(event)

        total_detections = len(in_window)
        total_objects = 0
        confidence_sum = 0.0
        confidence_count = 0
        processing_sum = 0
        category_breakdown: dict[str, int] = {}
        device_breakdown: dict[str, int] = {}

        for event in in_window:
            total_objects += len(event.objects)
            for obj in event.objects:
                if isinstance(obj.confidence, (int, float)):
                    confidence_sum += obj.confidence
                    confidence_count += 1
                category = classify(obj.label)
                category_breakdown[category] = category_breakdown.get(category, 0) + 1
            processing_sum += event.processing_time_ms
            if event.device:
                device_breakdown[event.device] = device_breakdown.get(event.device, 0) + 1

        logger.debug(f"Statistics for '{timeframe.value}': {total_detections} detections, {total_objects} objects")
        return {
            "timeframe": timeframe.value,
            "totalDetections": total_detections,
            "totalObjects": total_objects,
            "averageObjectsPerDetection": round(total_objects / total_detections, 1) if total_detections else 0,
            "averageConfidence": round(confidence_sum / confidence_count * 100, 1) if confidence_count else 0,
            "averageProcessingTime": processing_sum // total_detections if total_detections else 0,
            "categoryBreakdown": category_breakdown,
            "deviceBreakdown": device_breakdown,
            "startTime": format_timestamp(start_time),
            "endTime": format_timestamp(now),
        }
