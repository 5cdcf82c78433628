# tests/conftest.py
"""Shared fixtures: a controllable clock and an isolated DashboardService per test."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from detection_dashboard.services.dashboard_service import DashboardService

NOW = datetime(2026, 10, 19, 12, 0, 0)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(clock):
    return DashboardService(capacity=100, clock=clock)
