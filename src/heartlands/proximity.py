"""Proximity-driven reveal state for collectibles and landmarks.

States are recomputed from the current position on every call; nothing is
latched before an artefact is actually collected.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable

from .geodesy import distance_meters
from .models import Artefact, Coordinate, PositionFix, RevealState, VisibleState
from .spawn import compute_spawn_point


def usable_position(fix: PositionFix | None, *, max_speed_mps: float | None = None) -> Coordinate | None:
    """Return the fix as a coordinate, or ``None`` when it cannot be trusted.

    Fixes with non-finite coordinates, and fixes moving at ``max_speed_mps``
    or faster, are dropped.
    """
    if fix is None:
        return None
    if not (math.isfinite(fix.lat) and math.isfinite(fix.lng)):
        return None
    if max_speed_mps is not None and fix.speed is not None and fix.speed >= max_speed_mps:
        return None
    return fix.coordinate


def spawn_point_for(artefact: Artefact, player_identity: str, *, latitude_corrected: bool = False) -> Coordinate:
    """Landmarks sit on their anchor; collectibles on their per-player spawn point."""
    if artefact.is_landmark:
        return artefact.anchor
    return compute_spawn_point(
        artefact.anchor,
        artefact.search_radius_m,
        artefact.id,
        player_identity,
        latitude_corrected=latitude_corrected,
    )


def landmark_discovered(artefact: Artefact, is_collected: Callable[[str], bool]) -> bool:
    """A landmark is discovered once every linked collectible is collected.

    A landmark without links is never discovered.
    """
    if not artefact.linked_artefact_ids:
        return False
    return all(is_collected(artefact_id) for artefact_id in sorted(artefact.linked_artefact_ids))


def evaluate_state(
    artefact: Artefact,
    position: Coordinate | None,
    player_identity: str,
    *,
    collected: bool = False,
    discovered: bool | None = None,
    latitude_corrected: bool = False,
) -> VisibleState:
    anchor_distance = distance_meters(position, artefact.anchor) if position is not None else math.inf

    if artefact.is_landmark:
        return VisibleState(
            state=RevealState.LANDMARK,
            distance_m=anchor_distance,
            spawn_point=artefact.anchor,
            discovered=bool(discovered),
        )

    spawn_point = spawn_point_for(artefact, player_identity, latitude_corrected=latitude_corrected)
    if collected:
        return VisibleState(state=RevealState.COLLECTED, distance_m=anchor_distance, spawn_point=spawn_point)
    if position is None:
        return VisibleState(state=RevealState.HIDDEN, distance_m=anchor_distance)

    # NaN distances compare False and fall through to HIDDEN.
    if distance_meters(position, spawn_point) <= artefact.collection_radius_m:
        return VisibleState(state=RevealState.COLLECTABLE, distance_m=anchor_distance, spawn_point=spawn_point)
    if anchor_distance <= artefact.search_radius_m:
        return VisibleState(state=RevealState.DISCOVERABLE, distance_m=anchor_distance)
    return VisibleState(state=RevealState.HIDDEN, distance_m=anchor_distance)


def nearest_first(entries: Iterable[tuple[Artefact, VisibleState]]) -> list[tuple[Artefact, VisibleState]]:
    """Order entries by ascending anchor distance, ties broken by artefact id."""
    return sorted(entries, key=lambda entry: (entry[1].distance_m, entry[0].id))
