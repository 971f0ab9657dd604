from __future__ import annotations

import math

from heartlands.geodesy import distance_meters
from heartlands.models import Coordinate
from heartlands.rng import hash_to_seed
from heartlands.spawn import compute_spawn_point, scatter_in_bbox

ANCHOR = Coordinate(lat=1.33936, lng=103.72579)


def test_spawn_point_is_deterministic() -> None:
    first = compute_spawn_point(ANCHOR, 70, "lantern", "user_abc")
    second = compute_spawn_point(ANCHOR, 70, "lantern", "user_abc")

    assert first == second
    assert first != ANCHOR


def test_spawn_point_varies_by_player_and_artefact() -> None:
    base = compute_spawn_point(ANCHOR, 70, "lantern", "user_abc")

    assert compute_spawn_point(ANCHOR, 70, "lantern", "user_xyz") != base
    assert compute_spawn_point(ANCHOR, 70, "bell", "user_abc") != base


def test_non_positive_radius_returns_anchor() -> None:
    assert compute_spawn_point(ANCHOR, 0, "lantern", "user_abc") == ANCHOR
    assert compute_spawn_point(ANCHOR, -5, "lantern", "user_abc") == ANCHOR


def test_spawn_points_stay_inside_circle_with_uniform_area() -> None:
    radius = 70.0
    radius_degrees = radius / 111_000
    rings = [0, 0, 0, 0]

    for index in range(10_000):
        point = compute_spawn_point(ANCHOR, radius, "lantern", f"player-{index}")
        # The flat 111 km/degree conversion slightly undershoots the haversine metre.
        assert distance_meters(ANCHOR, point) <= radius * 1.005

        fraction = math.hypot(point.lat - ANCHOR.lat, point.lng - ANCHOR.lng) / radius_degrees
        rings[min(int(fraction**2 * 4), 3)] += 1

    for count in rings:
        assert 2_300 <= count <= 2_700


def test_latitude_corrected_spawn_stays_round_at_high_latitude() -> None:
    anchor = Coordinate(lat=60.0, lng=10.0)
    for index in range(500):
        point = compute_spawn_point(anchor, 70, "lantern", f"player-{index}", latitude_corrected=True)
        assert distance_meters(anchor, point) <= 70 * 1.01


def test_scatter_in_bbox_is_seeded_and_bounded() -> None:
    bbox = (103.7240, 1.3310, 103.7370, 1.3445)
    seed = hash_to_seed("jurong:rnd-jtc-marker")

    points = scatter_in_bbox(bbox, 5, seed)

    assert points == scatter_in_bbox(bbox, 5, seed)
    assert len(points) == 5
    for point in points:
        assert 1.3310 <= point.lat <= 1.3445
        assert 103.7240 <= point.lng <= 103.7370
