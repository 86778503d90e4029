"""
iReporter - Geographic Helpers
Location value type shared by reports and location search.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Check latitude/longitude are within WGS84 bounds."""
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


@dataclass(frozen=True)
class Location:
    """Geographic point attached to a report."""
    lat: float
    lng: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    def to_json(self) -> str:
        """Encode for multipart form fields, which carry location as a JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_api(cls, value: Any) -> Optional["Location"]:
        """
        Parse a location as returned by the API.

        The backend stores location as a JSON string, so both a mapping and
        its JSON encoding are accepted. Keys may be lat/lng, lat/lon or
        latitude/longitude. Returns None for empty or unparseable values.
        """
        if value in (None, "", "null"):
            return None
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return None
        if not isinstance(value, dict):
            return None

        lat = value.get("lat", value.get("latitude"))
        lng = value.get("lng", value.get("lon", value.get("longitude")))
        try:
            lat, lng = float(lat), float(lng)
        except (TypeError, ValueError):
            return None

        if not is_valid_coordinate(lat, lng):
            return None
        return cls(lat=lat, lng=lng)
