"""Location domain logic - coordinates and movement. No I/O."""

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6_371_000
# Smaller moves don't change sunrise or sunset enough to matter.
SIGNIFICANT_CHANGE_METERS = 500


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


def distance_meters(a: Location, b: Location) -> float:
    """Great-circle distance between two points (haversine)."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))


def is_significant_change(old: Location | None, new: Location) -> bool:
    if old is None:
        return True
    return distance_meters(old, new) >= SIGNIFICANT_CHANGE_METERS
