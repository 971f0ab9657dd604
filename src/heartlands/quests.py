"""Quest catalog loading and deterministic template expansion."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .models import Artefact, ArtefactKind, Coordinate
from .rng import hash_to_seed
from .spawn import BBox, scatter_in_bbox


class CatalogError(ValueError):
    """Raised when a quest catalog cannot be parsed or is inconsistent."""


class CoordinateModel(BaseModel):
    lat: float
    lng: float


class ArtefactModel(BaseModel):
    id: str = Field(min_length=1)
    kind: ArtefactKind
    coords: CoordinateModel
    name: str = ""
    points: int = Field(default=0, ge=0)
    rarity: str | None = None
    search_radius_m: float | None = Field(default=None, ge=0)
    collection_radius_m: float | None = Field(default=None, ge=0)
    linked: list[str] = Field(default_factory=list)


class SpawnTemplateModel(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    rarity: str | None = None
    points: int = Field(default=0, ge=0)
    bbox: tuple[float, float, float, float]
    count: int = Field(ge=0)
    search_radius_m: float = Field(default=60.0, ge=0)
    collection_radius_m: float | None = Field(default=None, ge=0)


class QuestModel(BaseModel):
    id: str = Field(min_length=1, pattern=r"^[^:]+$")
    name: str
    description: str = ""
    bbox: tuple[float, float, float, float]
    artefacts: list[ArtefactModel] = Field(default_factory=list)
    templates: list[SpawnTemplateModel] = Field(default_factory=list)


class CatalogModel(BaseModel):
    quests: list[QuestModel]


@dataclass(frozen=True, slots=True)
class Quest:
    id: str
    name: str
    description: str
    bbox: BBox
    artefacts: tuple[Artefact, ...]

    def artefact(self, artefact_id: str) -> Artefact:
        for artefact in self.artefacts:
            if artefact.id == artefact_id:
                return artefact
        raise KeyError(f"Unknown artefact {artefact_id!r} in quest {self.id!r}")

    @property
    def collectibles(self) -> tuple[Artefact, ...]:
        return tuple(artefact for artefact in self.artefacts if not artefact.is_landmark)

    @property
    def landmarks(self) -> tuple[Artefact, ...]:
        return tuple(artefact for artefact in self.artefacts if artefact.is_landmark)


class QuestCatalog:
    """Read-only lookup over the quests available to the player."""

    def __init__(self, quests: list[Quest]) -> None:
        self._quests = {quest.id: quest for quest in quests}

    @property
    def quests(self) -> list[Quest]:
        return list(self._quests.values())

    def get(self, quest_id: str) -> Quest:
        if quest_id not in self._quests:
            raise KeyError(f"Unknown quest id: {quest_id}")
        return self._quests[quest_id]


def _build_artefact(model: ArtefactModel, default_collection_radius_m: float) -> Artefact:
    search = model.search_radius_m if model.search_radius_m is not None else default_collection_radius_m
    collection = model.collection_radius_m if model.collection_radius_m is not None else min(
        search, default_collection_radius_m
    )
    return Artefact(
        id=model.id,
        kind=model.kind,
        anchor=Coordinate(model.coords.lat, model.coords.lng),
        collection_radius_m=collection,
        search_radius_m=search,
        points=model.points,
        name=model.name,
        rarity=model.rarity,
        linked_artefact_ids=frozenset(model.linked),
    )


def expand_template(quest_id: str, template: SpawnTemplateModel, default_collection_radius_m: float) -> list[Artefact]:
    """Expand a random template into ``count`` collectibles ``"{template_id}-{i}"``."""
    anchors = scatter_in_bbox(template.bbox, template.count, hash_to_seed(f"{quest_id}:{template.id}"))
    collection = template.collection_radius_m
    if collection is None:
        collection = min(template.search_radius_m, default_collection_radius_m)
    return [
        Artefact(
            id=f"{template.id}-{index}",
            kind=ArtefactKind.COLLECTIBLE,
            anchor=anchor,
            collection_radius_m=collection,
            search_radius_m=template.search_radius_m,
            points=template.points,
            name=template.name,
            rarity=template.rarity,
        )
        for index, anchor in enumerate(anchors)
    ]


def _build_quest(model: QuestModel, default_collection_radius_m: float) -> Quest:
    try:
        artefacts = [_build_artefact(item, default_collection_radius_m) for item in model.artefacts]
        for template in model.templates:
            artefacts.extend(expand_template(model.id, template, default_collection_radius_m))
    except ValueError as exc:
        raise CatalogError(f"Quest {model.id!r}: {exc}") from exc

    ids = [artefact.id for artefact in artefacts]
    duplicates = sorted({artefact_id for artefact_id in ids if ids.count(artefact_id) > 1})
    if duplicates:
        raise CatalogError(f"Quest {model.id!r} has duplicate artefact ids: {', '.join(duplicates)}")

    collectible_ids = {artefact.id for artefact in artefacts if not artefact.is_landmark}
    for artefact in artefacts:
        if not artefact.linked_artefact_ids:
            continue
        if not artefact.is_landmark:
            raise CatalogError(f"Collectible {artefact.id!r} cannot link other artefacts")
        missing = sorted(artefact.linked_artefact_ids - set(ids))
        if missing:
            raise CatalogError(f"Landmark {artefact.id!r} links unknown artefacts: {', '.join(missing)}")
        not_collectible = sorted(artefact.linked_artefact_ids - collectible_ids)
        if not_collectible:
            raise CatalogError(f"Landmark {artefact.id!r} links non-collectibles: {', '.join(not_collectible)}")

    return Quest(
        id=model.id,
        name=model.name,
        description=model.description,
        bbox=model.bbox,
        artefacts=tuple(artefacts),
    )


def parse_catalog(payload: Any, *, default_collection_radius_m: float = 80.0) -> QuestCatalog:
    try:
        model = CatalogModel.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(str(exc)) from exc
    return QuestCatalog([_build_quest(quest, default_collection_radius_m) for quest in model.quests])


def load_catalog(path: str | Path | None = None, *, default_collection_radius_m: float = 80.0) -> QuestCatalog:
    """Load a JSON catalog, or the bundled demo catalog when ``path`` is empty."""
    if not path:
        return parse_catalog(DEMO_CATALOG, default_collection_radius_m=default_collection_radius_m)

    target = Path(path).expanduser()
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"Catalog not found: {target}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog is not valid JSON: {target} ({exc})") from exc
    return parse_catalog(payload, default_collection_radius_m=default_collection_radius_m)


def _landmark(artefact_id: str, name: str, lat: float, lng: float, radius: float = 120.0) -> dict:
    stamp_id = f"{artefact_id}-stamp"
    return {
        "landmark": {
            "id": artefact_id,
            "kind": "landmark",
            "name": name,
            "coords": {"lat": lat, "lng": lng},
            "search_radius_m": radius,
            "collection_radius_m": radius,
            "linked": [stamp_id],
        },
        "stamp": {
            "id": stamp_id,
            "kind": "collectible",
            "name": f"{name} stamp",
            "points": 10,
            "coords": {"lat": lat, "lng": lng},
            "search_radius_m": radius,
            "collection_radius_m": 40.0,
        },
    }


def _landmarks(*entries: tuple) -> list[dict]:
    items: list[dict] = []
    for entry in entries:
        pair = _landmark(*entry)
        items.extend([pair["landmark"], pair["stamp"]])
    return items


_JURONG_BBOX = [103.7240, 1.3310, 103.7370, 1.3445]
_CIVIC_BBOX = [103.8490, 1.2880, 103.8565, 1.2952]

DEMO_CATALOG: dict = {
    "quests": [
        {
            "id": "jurong",
            "name": "Jurong Lake Workers' Garden",
            "description": "Industrialisation, leisure, and the West's weekend commons.",
            "bbox": _JURONG_BBOX,
            "artefacts": _landmarks(
                ("grand-arch", "Grand Arch", 1.3386, 103.7300),
                ("double-beauty-bridge", "Bridge of Double Beauty", 1.3369, 103.7286),
                ("bonsai-garden", "Bonsai Garden", 1.3361, 103.7295),
                ("cloud-pagoda", "Cloud Pagoda", 1.3380, 103.7306, 140.0),
                ("stoneboat", "Stoneboat", 1.3375, 103.7292),
                ("seiwaen", "Japanese Garden (Seiwaen)", 1.3349, 103.7251, 140.0),
            ),
            "templates": [
                {"id": "rnd-shift-siren", "name": "Shift Siren", "rarity": "rare", "points": 25,
                 "bbox": _JURONG_BBOX, "count": 3, "search_radius_m": 60, "collection_radius_m": 25},
                {"id": "rnd-mangrove-root", "name": "Mangrove Root", "rarity": "uncommon", "points": 15,
                 "bbox": _JURONG_BBOX, "count": 4, "search_radius_m": 60, "collection_radius_m": 25},
                {"id": "rnd-jtc-marker", "name": "JTC Marker", "rarity": "common", "points": 10,
                 "bbox": _JURONG_BBOX, "count": 5, "search_radius_m": 60, "collection_radius_m": 25},
            ],
        },
        {
            "id": "civic",
            "name": "Civic — Lost Shoreline",
            "description": "Where land met sea, then policy.",
            "bbox": _CIVIC_BBOX,
            "artefacts": _landmarks(("esplanade-park", "Esplanade Park", 1.2926, 103.8537)),
            "templates": [
                {"id": "rnd-sandbag", "name": "Shore Sandbag", "rarity": "rare", "points": 30,
                 "bbox": _CIVIC_BBOX, "count": 3, "search_radius_m": 60, "collection_radius_m": 25},
                {"id": "rnd-sea-glass", "name": "Sea Glass", "rarity": "uncommon", "points": 15,
                 "bbox": _CIVIC_BBOX, "count": 4, "search_radius_m": 60, "collection_radius_m": 25},
                {"id": "rnd-foreshore", "name": "Foreshore Marker", "rarity": "common", "points": 10,
                 "bbox": _CIVIC_BBOX, "count": 5, "search_radius_m": 60, "collection_radius_m": 25},
            ],
        },
    ]
}
