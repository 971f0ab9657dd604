"""Deterministic per-player spawn placement."""

from __future__ import annotations

import math

from .geodesy import meters_to_degrees
from .models import Coordinate
from .rng import hash_to_seed, make_generator, rand_between

SEED_SEPARATOR = ":"

BBox = tuple[float, float, float, float]


def compute_spawn_point(
    anchor: Coordinate,
    radius_meters: float,
    artefact_id: str,
    player_identity: str,
    *,
    latitude_corrected: bool = False,
) -> Coordinate:
    """Return the pickup coordinate for ``artefact_id`` as seen by ``player_identity``.

    The point is drawn uniformly by area from the circle of ``radius_meters``
    around ``anchor``. Identical inputs always produce identical output, so
    it never needs to be stored.

    By default the radius is converted with a flat 111 km per degree on both
    axes. ``latitude_corrected`` widens the longitude offset by
    ``1 / cos(latitude)`` so the circle stays round away from the equator.
    """
    if radius_meters <= 0:
        return anchor

    rng = make_generator(hash_to_seed(f"{artefact_id}{SEED_SEPARATOR}{player_identity}"))
    angle = rng() * 2 * math.pi
    radial = math.sqrt(rng())

    lat_span, lng_span = meters_to_degrees(
        radius_meters,
        latitude=anchor.lat if latitude_corrected else None,
    )
    return Coordinate(
        lat=anchor.lat + radial * lat_span * math.cos(angle),
        lng=anchor.lng + radial * lng_span * math.sin(angle),
    )


def scatter_in_bbox(bbox: BBox, count: int, seed: int) -> list[Coordinate]:
    """Scatter ``count`` anchors uniformly (in degrees) over ``bbox``.

    ``bbox`` is ``(min_lng, min_lat, max_lng, max_lat)``.
    """
    min_lng, min_lat, max_lng, max_lat = bbox
    rng = make_generator(seed)
    points: list[Coordinate] = []
    for _ in range(count):
        lat = rand_between(rng, min_lat, max_lat)
        lng = rand_between(rng, min_lng, max_lng)
        points.append(Coordinate(lat=lat, lng=lng))
    return points
