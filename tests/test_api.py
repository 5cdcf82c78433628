# tests/test_api.py
"""HTTP-level tests for the dashboard, detection-history and ingestion routers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from detection_dashboard.main import app
from detection_dashboard.dependencies import get_dashboard_service

DETECTION = {
    "objects": [{"label": "car", "confidence": 0.91,
                 "box": {"xMin": 10, "yMin": 20, "xMax": 110, "yMax": 220}}],
    "processingTime": 240,
    "device": "iPhone Safari",
    "imageUrl": "https://cdn.example.com/street.jpg",
    "fileName": "street.jpg",
}


@pytest.fixture
def client(service):
    app.dependency_overrides[get_dashboard_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestIngestionEndpoints:
    def test_detection_webhook_records_event(self, client, service):
        resp = client.post("/api/events/detection", json=DETECTION)
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "objectCount": 1}
        assert len(service.detections) == 1

    def test_device_resolved_from_user_agent(self, client, service):
        body = {**DETECTION, "device": None}
        client.post("/api/events/detection", json=body, headers={"User-Agent": "curl/8.4.0"})
        assert service.detections.snapshot()[0].device == "cURL Client"

    def test_invalid_confidence_rejected(self, client, service):
        body = {**DETECTION, "objects": [{"label": "car", "confidence": 2.0}]}
        resp = client.post("/api/events/detection", json=body)
        assert resp.status_code == 422
        assert len(service.detections) == 0

    def test_error_webhook(self, client):
        resp = client.post("/api/events/error", json={"message": "Empty file uploaded", "type": "EMPTY_FILE_ERROR"})
        assert resp.status_code == 200
        logs = client.get("/api/dashboard/error-logs").json()
        assert logs[0]["type"] == "EMPTY_FILE_ERROR"
        assert logs[0]["level"] == "ERROR"

    def test_error_logs_default_limit_is_fifty(self, client, service):
        for i in range(60):
            service.record_error(f"failure {i}", "DETECTION_ERROR")
        logs = client.get("/api/dashboard/error-logs").json()
        assert len(logs) == 50
        assert logs[0]["message"] == "failure 59"


class TestDashboardEndpoints:
    def test_metrics(self, client):
        client.post("/api/events/detection", json=DETECTION)
        metrics = client.get("/api/dashboard/metrics").json()
        assert metrics["apiCalls"] == 1
        assert metrics["responseTime"] == 240
        assert metrics["errorRate"] == 0

    def test_categories_cold_start(self, client):
        data = client.get("/api/dashboard/detection-categories").json()
        assert data == {"labels": ["People", "Vehicles", "Animals", "Objects"], "data": [42, 23, 15, 20]}

    def test_chart_endpoints_default_to_day(self, client):
        assert len(client.get("/api/dashboard/chart-data").json()["labels"]) == 9
        assert len(client.get("/api/dashboard/response-time-data?timeframe=bogus").json()["data"]) == 9
        assert len(client.get("/api/dashboard/chart-data?timeframe=month").json()["labels"]) == 4

    def test_recent_detections_and_analytics(self, client):
        client.post("/api/events/detection", json=DETECTION)
        recent = client.get("/api/dashboard/recent-detections?limit=5").json()
        assert recent[0]["fileName"] == "street.jpg"
        analytics = client.get("/api/dashboard/analytics").json()
        assert analytics["deviceDistribution"] == {"labels": ["iPhone Safari"], "data": [1]}

    def test_system_status(self, client):
        assert len(client.get("/api/dashboard/system-status").json()) == 4


class TestDetectionEndpoints:
    def test_empty_listing(self, client):
        page = client.get("/api/detect").json()
        assert page["totalElements"] == 0
        assert page["totalPages"] == 0
        assert page["hasNext"] is False

    def test_listing_clamps_size(self, client):
        assert client.get("/api/detect?size=500").json()["pageSize"] == 20
        assert client.get("/api/detect?page=-1").json()["currentPage"] == 0

    def test_lookup_and_delete(self, client):
        client.post("/api/events/detection", json=DETECTION)
        detection_id = client.get("/api/detect").json()["content"][0]["id"]

        found = client.get(f"/api/detect/{detection_id}")
        assert found.status_code == 200
        assert found.json()["imageUrl"] == DETECTION["imageUrl"]

        deleted = client.delete(f"/api/detect/{detection_id}", headers={"User-Agent": "curl/8.4.0"})
        assert deleted.status_code == 200
        assert deleted.json()["success"] is True
        assert deleted.json()["deletedBy"] == "cURL Client"

        assert client.delete(f"/api/detect/{detection_id}").status_code == 404
        assert client.get(f"/api/detect/{detection_id}").status_code == 404

    def test_statistics(self, client):
        client.post("/api/events/detection", json=DETECTION)
        stats = client.get("/api/detect/statistics?timeframe=week").json()
        assert stats["timeframe"] == "week"
        assert stats["totalDetections"] == 1
        assert stats["categoryBreakdown"] == {"vehicles": 1}

    def test_health(self, client):
        assert client.get("/api/detect/health").json()["status"] == "UP"
        health = client.get("/api/health").json()
        assert health["detections"] == {"stored": 0, "capacity": 100}
