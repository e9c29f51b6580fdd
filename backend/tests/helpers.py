"""Payload builders shared by the API tests."""

API_KEY = "test-ingest-key"

# Default geofence center from settings
CENTER_LAT = 28.2036569
CENTER_LNG = 76.8400441

# Roughly 50 km north of the center, well outside the 10 km radius
OUTSIDE_LAT = 28.65
OUTSIDE_LNG = 76.8400441


def make_fix(device_id="device-1", latitude=CENTER_LAT, longitude=CENTER_LNG, **extra):
    """Build an ingest payload in wire format."""
    payload = {
        "deviceId": device_id,
        "deviceName": f"Phone {device_id}",
        "latitude": latitude,
        "longitude": longitude,
        "accuracy": 5.0,
    }
    payload.update(extra)
    return payload


async def post_fix(client, payload, api_key=API_KEY):
    headers = {"x-api-key": api_key} if api_key is not None else {}
    return await client.post("/api/ingest", json=payload, headers=headers)
