"""
Geofencing - restricts the service to a fixed radius around Coro.

Pure functions, no I/O.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


CORO_COORDS = Coordinates(lat=11.4095, lng=-69.6817)

MAX_DISTANCE_KM = 30.0


class RegionStatus(str, Enum):
    IN_REGION = "in_region"
    OUT_OF_REGION = "out_of_region"
    UNKNOWN = "unknown"  # no coordinates available


@dataclass(frozen=True)
class GeofenceResult:
    status: RegionStatus
    distance_km: Optional[float] = None

    @property
    def allowed(self) -> bool:
        """Unknown location does not block the buyer."""
        return self.status != RegionStatus.OUT_OF_REGION

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "distance_km": self.distance_km,
            "allowed": self.allowed,
        }


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in km (Haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_location_in_region(
    lat: float,
    lng: float,
    center: Coordinates = CORO_COORDS,
    radius_km: float = MAX_DISTANCE_KM,
) -> bool:
    """True when the point is within radius_km of center (inclusive)."""
    if radius_km < 0:
        raise ValueError("radius_km must be non-negative")
    return calculate_distance(lat, lng, center.lat, center.lng) <= radius_km


def check_region(
    location: Optional[Coordinates],
    center: Coordinates = CORO_COORDS,
    radius_km: float = MAX_DISTANCE_KM,
) -> GeofenceResult:
    """
    Classify a device/selected location against the service region.

    A missing location (geolocation denied or unsupported) yields UNKNOWN,
    which is allowed.
    """
    if radius_km < 0:
        raise ValueError("radius_km must be non-negative")
    if location is None:
        return GeofenceResult(status=RegionStatus.UNKNOWN)

    distance = calculate_distance(location.lat, location.lng, center.lat, center.lng)
    status = RegionStatus.IN_REGION if distance <= radius_km else RegionStatus.OUT_OF_REGION
    return GeofenceResult(status=status, distance_km=distance)
