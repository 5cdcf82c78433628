# detection_dashboard/schemas/detection.py
from pydantic import BaseModel, Field
from typing import Optional


class BoxIn(BaseModel):
    xMin: float = 0.0
    yMin: float = 0.0
    xMax: float = 0.0
    yMax: float = 0.0


class DetectedObjectIn(BaseModel):
    label: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    box: BoxIn = Field(default_factory=BoxIn)


class DetectedObjectOut(BaseModel):
    label: Optional[str]
    confidence: float
    box: BoxIn


class DetectionReport(BaseModel):
    """Completed detection, as reported by the inference layer."""
    objects: list[DetectedObjectIn] = Field(default_factory=list)
    processingTime: int = Field(0, ge=0)      # milliseconds
    device: Optional[str] = None               # resolved from headers when omitted
    imageUrl: Optional[str] = None
    fileName: Optional[str] = None


class ErrorReport(BaseModel):
    message: str
    type: str = "DETECTION_ERROR"


class DetectionOut(BaseModel):
    id: Optional[str] = None
    timestamp: str
    objects: list[DetectedObjectOut]
    processingTime: int
    device: str
    objectCount: int
    imageUrl: Optional[str]
    fileName: Optional[str]


class DetectionPageOut(BaseModel):
    content: list[DetectionOut]
    totalElements: int
    totalPages: int
    currentPage: int
    pageSize: int
    hasNext: bool
    hasPrevious: bool


class DetectionStatisticsOut(BaseModel):
    timeframe: str
    totalDetections: int
    totalObjects: int
    averageObjectsPerDetection: float
    averageConfidence: float
    averageProcessingTime: int
    categoryBreakdown: dict[str, int]
    deviceBreakdown: dict[str, int]
    startTime: str
    endTime: str


class DeletionOut(BaseModel):
    success: bool
    message: str
    detectionId: str
    deletedAt: str
    deletedBy: str
