# tests/test_device_info.py
"""Unit tests for request-header → device label resolution."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from detection_dashboard.utils.device_info import resolve_device

IPHONE_SAFARI = ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
                 "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1")
WINDOWS_EDGE = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0 Safari/537.36 Edg/120.0")
ANDROID_CHROME = ("Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/120.0 Mobile Safari/537.36")


class TestResolveDevice:
    def test_frontend_device_json_wins(self):
        headers = {"x-device-info": '{"deviceType": "Desktop", "os": "macOS", "browser": "Firefox"}',
                   "x-client-type": "Web Portal", "user-agent": "curl/8.0"}
        assert resolve_device(headers) == "Web Portal (Desktop macOS Firefox)"

    def test_bad_device_json_falls_back_to_user_agent(self):
        assert resolve_device({"x-device-info": "{not json", "user-agent": "curl/8.0"}) == "cURL Client"

    @pytest.mark.parametrize("user_agent,expected", [
        (IPHONE_SAFARI, "iPhone Safari"),
        (WINDOWS_EDGE, "Windows Edge"),
        (ANDROID_CHROME, "Android Chrome"),
        ("okhttp/4.12.0", "Mobile App (OkHttp 4.12.0)"),
        ("PostmanRuntime/7.36", "Postman API Client"),
        ("python-requests/2.31.0", "Client (python-requests/2.31.0)"),
    ])
    def test_user_agent_sniffing(self, user_agent, expected):
        assert resolve_device({"user-agent": user_agent}) == expected

    def test_no_headers(self):
        assert resolve_device({}) == "Unknown Device"
        assert resolve_device({"x-client-type": "Kiosk"}) == "Kiosk"
