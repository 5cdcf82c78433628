# scripts/simulate_detection.py
"""Send synthetic detection / error reports to a running backend."""

import argparse
import random
import requests

BACKEND_URL = "http://localhost:8080/api/events"

LABELS = ["person", "car", "truck", "dog", "cat", "bicycle", "cup", "laptop", "bird", "bus"]
DEVICES = ["iPhone Safari", "Android Chrome", "Windows Edge", "Mac Safari", "cURL Client"]


def random_object():
    x, y = random.uniform(0, 500), random.uniform(0, 500)
    return {
        "label": random.choice(LABELS),
        "confidence": round(random.uniform(0.5, 0.99), 3),
        "box": {"xMin": x, "yMin": y, "xMax": x + random.uniform(20, 200), "yMax": y + random.uniform(20, 200)},
    }


def simulate_detection(base_url, device=None):
    payload = {
        "objects": [random_object() for _ in range(random.randint(0, 5))],
        "processingTime": random.randint(150, 1500),
        "device": device or random.choice(DEVICES),
        "fileName": f"sim_{random.randint(1000, 9999)}.jpg",
    }
    resp = requests.post(f"{base_url}/detection", json=payload, timeout=10)
    print(f"✅ detection ({len(payload['objects'])} objects, {payload['device']}) "
          f"→ HTTP {resp.status_code}: {resp.json()}")


def simulate_error(base_url, error_type):
    resp = requests.post(f"{base_url}/error",
                         json={"message": "Simulated failure", "type": error_type}, timeout=10)
    print(f"⚠️  error {error_type} → HTTP {resp.status_code}: {resp.json()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate detection telemetry for testing")
    parser.add_argument("--url", default=BACKEND_URL)
    parser.add_argument("--count", type=int, default=10)
    parser.add_argument("--device", default=None)
    parser.add_argument("--error-every", type=int, default=0,
                        help="Send one error report after every N detections (0 = never)")
    parser.add_argument("--error-type", default="DETECTION_ERROR")
    args = parser.parse_args()

    for i in range(1, args.count + 1):
        simulate_detection(args.url, args.device)
        if args.error_every and i % args.error_every == 0:
            simulate_error(args.url, args.error_type)
