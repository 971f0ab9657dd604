from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ArtefactKind(str, Enum):
    COLLECTIBLE = "collectible"
    LANDMARK = "landmark"


class RevealState(str, Enum):
    """Per-artefact proximity states."""

    HIDDEN = "hidden"
    DISCOVERABLE = "discoverable"
    COLLECTABLE = "collectable"
    COLLECTED = "collected"
    LANDMARK = "landmark"


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class PositionFix:
    """A position sample already extracted from the device sensor."""

    lat: float
    lng: float
    accuracy_meters: float | None = None
    speed: float | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Artefact:
    """A collectible or landmark placed in a quest."""

    id: str
    kind: ArtefactKind
    anchor: Coordinate
    collection_radius_m: float
    search_radius_m: float
    points: int = 0
    name: str = ""
    rarity: str | None = None
    linked_artefact_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.collection_radius_m > self.search_radius_m:
            raise ValueError(
                f"Artefact {self.id!r}: collection radius {self.collection_radius_m} "
                f"exceeds search radius {self.search_radius_m}"
            )
        if self.points < 0:
            raise ValueError(f"Artefact {self.id!r}: points must be >= 0")

    @property
    def is_landmark(self) -> bool:
        return self.kind is ArtefactKind.LANDMARK


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """Immutable proof that an artefact was collected."""

    quest_id: str
    artefact_id: str
    collected_at_epoch_millis: int
    points_awarded: int

    @property
    def key(self) -> str:
        return progress_key(self.quest_id, self.artefact_id)


@dataclass(slots=True)
class VisibleState:
    state: RevealState
    distance_m: float
    spawn_point: Coordinate | None = None
    discovered: bool | None = None


@dataclass(slots=True)
class CollectResult:
    success: bool
    record: ProgressRecord | None = None
    reason: str | None = None


@dataclass(slots=True)
class QuestTotals:
    total_items: int
    collected_items: int
    total_points: int
    collected_points: int


def progress_key(quest_id: str, artefact_id: str) -> str:
    return f"{quest_id}:{artefact_id}"
