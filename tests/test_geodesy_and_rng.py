from __future__ import annotations

import math

from heartlands.geodesy import distance_meters, format_meters, meters_to_degrees
from heartlands.models import Coordinate
from heartlands.rng import hash_to_seed, make_generator

PAIRS = [
    (Coordinate(1.33936, 103.72579), Coordinate(1.2926, 103.8537)),
    (Coordinate(51.5007, -0.1246), Coordinate(48.8584, 2.2945)),
    (Coordinate(-33.8568, 151.2153), Coordinate(40.6892, -74.0445)),
    (Coordinate(0.0, 179.9), Coordinate(0.0, -179.9)),
]


def test_distance_is_symmetric_and_zero_on_identity() -> None:
    for a, b in PAIRS:
        assert distance_meters(a, b) == distance_meters(b, a)
        assert distance_meters(a, a) == 0


def test_distance_matches_known_values() -> None:
    london, paris = PAIRS[1]
    assert 340_000 < distance_meters(london, paris) < 345_000

    one_degree = distance_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    assert math.isclose(one_degree, 6_371_000 * math.pi / 180, rel_tol=1e-9)


def test_distance_propagates_nan() -> None:
    assert math.isnan(distance_meters(Coordinate(float("nan"), 0.0), Coordinate(0.0, 0.0)))


def test_meters_to_degrees_flat_and_corrected() -> None:
    assert meters_to_degrees(111_000) == (1.0, 1.0)

    lat_span, lng_span = meters_to_degrees(111_000, latitude=60.0)
    assert lat_span == 1.0
    assert math.isclose(lng_span, 2.0, rel_tol=1e-9)


def test_format_meters() -> None:
    assert format_meters(42.4) == "42 m"
    assert format_meters(1534) == "1.53 km"
    assert format_meters(float("inf")) == "—"


def test_hash_to_seed_is_stable_uint32() -> None:
    seed = hash_to_seed("lantern:user_abc")

    assert seed == hash_to_seed("lantern:user_abc")
    assert 0 <= seed < 2**32
    assert seed != hash_to_seed("lantern:user_abd")


def test_generator_is_reproducible_and_in_unit_interval() -> None:
    first = make_generator(12345)
    second = make_generator(12345)

    draws = [first() for _ in range(1_000)]
    assert draws == [second() for _ in range(1_000)]
    assert all(0.0 <= value < 1.0 for value in draws)
    assert len(set(draws)) > 990


def test_generators_with_different_seeds_diverge() -> None:
    a = make_generator(1)
    b = make_generator(2)

    assert [a() for _ in range(5)] != [b() for _ in range(5)]


def test_format_meters_rounds_halves_up() -> None:
    assert format_meters(42.5) == "43 m"
    assert format_meters(0.5) == "1 m"
    assert format_meters(999.4) == "999 m"
