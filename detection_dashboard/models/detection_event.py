# detection_dashboard/models/detection_event.py
"""
Detection event record.
One entry per completed detection request. Held in the in-memory detection
log, never mutated after creation; removed only by eviction or deletion.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

TIMESTAMP_SPEC = "microseconds"   # fixed-width ISO-8601, sorts lexicographically
DEFAULT_DEVICE = "Unknown"


def format_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec=TIMESTAMP_SPEC)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored timestamp. Returns None instead of raising on bad input."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class BoundingBox:
    x_min: float = 0.0
    y_min: float = 0.0
    x_max: float = 0.0
    y_max: float = 0.0

    def to_dict(self) -> dict:
        return {"xMin": self.x_min, "yMin": self.y_min, "xMax": self.x_max, "yMax": self.y_max}


@dataclass(frozen=True)
class DetectedObject:
    label: Optional[str]
    confidence: float        # 0..1 as returned by the classifier
    box: BoundingBox = field(default_factory=BoundingBox)

    def to_dict(self) -> dict:
        return {"label": self.label, "confidence": self.confidence, "box": self.box.to_dict()}


@dataclass(frozen=True)
class DetectionEvent:
    timestamp: str
    objects: tuple[DetectedObject, ...]
    processing_time_ms: int
    device: str = DEFAULT_DEVICE
    object_count: int = 0
    image_url: Optional[str] = None
    file_name: Optional[str] = None

    @classmethod
    def create(cls, objects, processing_time_ms: int, device: Optional[str],
               image_url: Optional[str] = None, file_name: Optional[str] = None,
               recorded_at: Optional[datetime] = None) -> "DetectionEvent":
        """Build a new event stamped with `recorded_at` (defaults to now)."""
        objects = tuple(objects)
        return cls(
            timestamp=format_timestamp(recorded_at or datetime.now()),
            objects=objects,
            processing_time_ms=max(0, int(processing_time_ms)),
            device=device or DEFAULT_DEVICE,
            object_count=len(objects),
            image_url=image_url,
            file_name=file_name,
        )

    @property
    def recorded_at(self) -> Optional[datetime]:
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "objects": [obj.to_dict() for obj in self.objects],
            "processingTime": self.processing_time_ms,
            "device": self.device,
            "objectCount": self.object_count,
            "imageUrl": self.image_url,
            "fileName": self.file_name,
        }

    def __repr__(self):
        return f"<DetectionEvent {self.timestamp} objects={self.object_count} device={self.device}>"
