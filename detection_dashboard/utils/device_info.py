# detection_dashboard/utils/device_info.py
"""
Resolves a short device label ("iPhone Safari", "cURL Client", ...) from request headers.
Prefers the frontend's X-Device-Info JSON, falls back to User-Agent sniffing.
"""

import json
import re
from typing import Mapping, Optional

UNKNOWN_DEVICE = "Unknown Device"

# (substring, label), first match wins
_HTTP_CLIENTS = (("curl", "cURL Client"), ("postman", "Postman API Client"),
                 ("insomnia", "Insomnia API Client"), ("httpie", "HTTPie Client"))


def _parse_device_json(raw: str, client_type: Optional[str]) -> Optional[str]:
    try:
        info = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(info, dict):
        return None
    parts = [str(info[key]) for key in ("deviceType", "os", "browser")
             if info.get(key) and info.get(key) != "Unknown"]
    if not parts:
        return None
    label = " ".join(parts)
    if client_type and "Portal" in client_type:
        return f"Web Portal ({label})"
    return label


def _browser_on(ua: str, platform: str) -> str:
    if "edg" in ua:
        return f"{platform} Edge"
    if "chrome" in ua:
        return f"{platform} Chrome"
    if "firefox" in ua:
        return f"{platform} Firefox"
    if "safari" in ua:
        return f"{platform} Safari"
    return platform


def _from_user_agent(user_agent: str) -> str:
    ua = user_agent.lower()
    if "okhttp" in ua:
        match = re.search(r"okhttp/([0-9.]+)", ua)
        return f"Mobile App (OkHttp {match.group(1)})" if match else "Mobile App (OkHttp)"
    for token, label in _HTTP_CLIENTS:
        if token in ua:
            return label
    if "iphone" in ua:
        return _browser_on(ua, "iPhone")
    if "ipad" in ua:
        return _browser_on(ua, "iPad")
    if "android" in ua or "mobile" in ua:
        if "samsungbrowser" in ua:
            return "Samsung Browser"
        label = _browser_on(ua, "Android")
        return label if label != "Android" else "Android Device"
    if "windows" in ua:
        return _browser_on(ua, "Windows")
    if "macintosh" in ua or "mac os" in ua:
        return _browser_on(ua, "Mac")
    if "linux" in ua:
        return _browser_on(ua, "Linux")
    if "mozilla" in ua:
        return "Web Browser"
    cleaned = re.sub(r"\s+", " ", re.sub(r"\([^)]*\)", "", user_agent)).strip()
    if len(cleaned) > 25:
        cleaned = cleaned[:22] + "..."
    return f"Client ({cleaned})"


def resolve_device(headers: Mapping[str, str]) -> str:
    """Best-effort device label. Never raises."""
    client_type = headers.get("x-client-type")
    device_info = headers.get("x-device-info")
    if device_info and device_info.strip():
        label = _parse_device_json(device_info, client_type)
        if label:
            return label

    user_agent = headers.get("user-agent")
    if not user_agent or not user_agent.strip():
        return client_type or UNKNOWN_DEVICE
    if client_type and "Web Portal" in client_type:
        return "Web Portal"
    return _from_user_agent(user_agent)
