from __future__ import annotations

import pytest

from heartlands.engine import CollectionEngine
from heartlands.models import Artefact, ArtefactKind, Coordinate
from heartlands.progress import InMemoryProgressStore, ProgressLedger

LANTERN_ANCHOR = Coordinate(lat=1.33936, lng=103.72579)


@pytest.fixture
def store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def ledger(store: InMemoryProgressStore) -> ProgressLedger:
    ticks = iter(range(1_000, 1_000_000, 1_000))
    return ProgressLedger(store, clock=lambda: next(ticks))


@pytest.fixture
def engine(ledger: ProgressLedger) -> CollectionEngine:
    return CollectionEngine(ledger, "user_abc", max_fix_speed_mps=5.0)


@pytest.fixture
def lantern() -> Artefact:
    return Artefact(
        id="lantern",
        kind=ArtefactKind.COLLECTIBLE,
        anchor=LANTERN_ANCHOR,
        collection_radius_m=25,
        search_radius_m=70,
        points=10,
        name="Lantern",
    )
