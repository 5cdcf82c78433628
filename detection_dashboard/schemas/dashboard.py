# detection_dashboard/schemas/dashboard.py
from pydantic import BaseModel


class DashboardMetricsOut(BaseModel):
    activeSessions: int
    apiCalls: int
    responseTime: int          # average, milliseconds
    errorRate: float           # percent
    lastUpdated: str


class SeriesOut(BaseModel):
    labels: list[str]
    data: list[float]


class CountSeriesOut(BaseModel):
    labels: list[str]
    data: list[int]


class PerformanceOut(BaseModel):
    avgConfidence: float
    successRate: float
    avgObjectsPerFrame: float
    uniqueUsers: int


class AnalyticsOut(BaseModel):
    timeframe: str
    performance: PerformanceOut
    deviceDistribution: CountSeriesOut


class ServiceStatusOut(BaseModel):
    service: str
    status: str
    statusClass: str
    load: int
    uptime: str
    lastUpdate: str


class ErrorLogOut(BaseModel):
    timestamp: str
    message: str
    type: str
    level: str
