# detection_dashboard/models/error_event.py
"""
Error event record, one entry per failed detection request.
Kept in its own bounded log, independent of the detection log.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from detection_dashboard.models.detection_event import format_timestamp

ERROR_LEVEL = "ERROR"


@dataclass(frozen=True)
class ErrorEvent:
    timestamp: str
    message: str
    type: str                # EMPTY_FILE_ERROR | DETECTION_ERROR | FILE_PROCESSING_ERROR | ...
    level: str = ERROR_LEVEL

    @classmethod
    def create(cls, message: Optional[str], error_type: Optional[str],
               recorded_at: Optional[datetime] = None) -> "ErrorEvent":
        return cls(
            timestamp=format_timestamp(recorded_at or datetime.now()),
            message=message or "",
            type=error_type or "UNKNOWN_ERROR",
        )

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "message": self.message,
                "type": self.type, "level": self.level}

    def __repr__(self):
        return f"<ErrorEvent {self.timestamp} type={self.type}>"
