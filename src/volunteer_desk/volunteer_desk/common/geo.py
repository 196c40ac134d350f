from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS, GEOFENCE_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance using the haversine formula."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_near_position(
    user_location: Optional[GeoPoint],
    position_location: Optional[GeoPoint],
    *,
    radius_m: float = GEOFENCE_RADIUS_METERS,
) -> bool:
    """Advisory geofence check. Passes when either location is unknown."""
    if user_location is None or position_location is None:
        return True
    if not position_location.latitude or not position_location.longitude:
        return True
    return distance_meters(user_location, position_location) <= radius_m
