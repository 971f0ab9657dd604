"""Great-circle distance helpers."""

from __future__ import annotations

import math

from .models import Coordinate

EARTH_RADIUS_M = 6_371_000

# Flat approximation of meters per degree of latitude.
METERS_PER_DEGREE = 111_000


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between two coordinates in meters.

    NaN components propagate to the result.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    x = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(x), math.sqrt(1 - x))


def meters_to_degrees(meters: float, *, latitude: float | None = None) -> tuple[float, float]:
    """Convert a distance to (lat_degrees, lng_degrees).

    Without ``latitude`` both axes use the flat approximation. With it, the
    longitude span is widened by ``1 / cos(latitude)``.
    """
    lat_degrees = meters / METERS_PER_DEGREE
    if latitude is None:
        return lat_degrees, lat_degrees

    cos_lat = math.cos(math.radians(latitude))
    if cos_lat <= 1e-12:
        return lat_degrees, lat_degrees
    return lat_degrees, meters / (METERS_PER_DEGREE * cos_lat)


def format_meters(meters: float) -> str:
    if not math.isfinite(meters):
        return "—"
    if meters < 1000:
        return f"{math.floor(meters + 0.5)} m"
    return f"{meters / 1000:.2f} km"
