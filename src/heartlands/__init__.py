"""Geospatial collection engine for the Heartlands walking game."""

from .engine import CollectionEngine
from .geodesy import distance_meters
from .heading import HeadingFilter, normalize_heading, update_heading
from .models import (
    Artefact,
    ArtefactKind,
    CollectResult,
    Coordinate,
    PositionFix,
    ProgressRecord,
    RevealState,
    VisibleState,
)
from .progress import InMemoryProgressStore, JsonFileProgressStore, ProgressLedger, ProgressStore
from .rng import hash_to_seed, make_generator
from .spawn import compute_spawn_point

__all__ = [
    "Artefact",
    "ArtefactKind",
    "CollectResult",
    "CollectionEngine",
    "Coordinate",
    "HeadingFilter",
    "InMemoryProgressStore",
    "JsonFileProgressStore",
    "PositionFix",
    "ProgressLedger",
    "ProgressRecord",
    "ProgressStore",
    "RevealState",
    "VisibleState",
    "compute_spawn_point",
    "distance_meters",
    "hash_to_seed",
    "make_generator",
    "normalize_heading",
    "update_heading",
]
