"""CLI entrypoint for the Heartlands collection engine."""

from __future__ import annotations

import time

import typer
from rich import print

from heartlands.config import settings
from heartlands.engine import CollectionEngine
from heartlands.geodesy import format_meters
from heartlands.heading import normalize_heading, update_heading
from heartlands.identity import init_player_identity
from heartlands.models import PositionFix
from heartlands.progress import JsonFileProgressStore, ProgressLedger
from heartlands.proximity import spawn_point_for
from heartlands.quests import CatalogError, Quest, QuestCatalog, load_catalog
from heartlands.telemetry.logging import configure_logging

app = typer.Typer(help="Heartlands collection engine")


@app.callback()
def _main() -> None:
    configure_logging(settings.log_level)


def _build_engine() -> CollectionEngine:
    ledger = ProgressLedger(JsonFileProgressStore(settings.progress_path))
    return CollectionEngine(
        ledger,
        init_player_identity(settings.identity_path),
        max_fix_speed_mps=settings.max_fix_speed_mps,
        latitude_corrected=settings.latitude_corrected_offsets,
    )


def _build_catalog() -> QuestCatalog:
    try:
        return load_catalog(settings.catalog_path, default_collection_radius_m=settings.default_collection_radius_m)
    except CatalogError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)


def _quest(catalog: QuestCatalog, quest_id: str) -> Quest:
    try:
        return catalog.get(quest_id)
    except KeyError:
        raise typer.BadParameter(f"Unknown quest: {quest_id}")


def _position(lat: float | None, lng: float | None, speed: float | None) -> PositionFix | None:
    if lat is None or lng is None:
        return None
    return PositionFix(lat=lat, lng=lng, speed=speed)


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "progress_path": str(settings.progress_path),
            "identity_path": str(settings.identity_path),
            "catalog_path": settings.catalog_path or "<demo catalog>",
            "latitude_corrected_offsets": settings.latitude_corrected_offsets,
        }
    )


@app.command()
def identity() -> None:
    """Print the player identity, creating it on first run."""
    print({"player_identity": init_player_identity(settings.identity_path)})


@app.command()
def quests() -> None:
    """List quests with collection progress."""
    engine = _build_engine()
    for quest in _build_catalog().quests:
        totals = engine.quest_totals(quest)
        print(
            {
                "id": quest.id,
                "name": quest.name,
                "items": f"{totals.collected_items}/{totals.total_items}",
                "points": f"{totals.collected_points}/{totals.total_points}",
            }
        )


@app.command()
def status(
    quest: str = typer.Option(..., help="Quest id"),
    lat: float = typer.Option(None, help="Player latitude"),
    lng: float = typer.Option(None, help="Player longitude"),
    speed: float = typer.Option(None, help="Player speed in m/s"),
) -> None:
    """Show the hunt list (nearest first) and landmark discovery for a position."""
    engine = _build_engine()
    target = _quest(_build_catalog(), quest)
    position = _position(lat, lng, speed)

    hunt = [
        {
            "id": artefact.id,
            "name": artefact.name,
            "state": visible.state.value,
            "distance": format_meters(visible.distance_m),
            "points": artefact.points,
        }
        for artefact, visible in engine.hunt_list(target, position)
    ]
    landmarks = [
        {"id": artefact.id, "discovered": engine.landmark_discovered(target.id, artefact)}
        for artefact in target.landmarks
    ]
    collected = [artefact.id for artefact in engine.collected_list(target)]
    print({"hunt": hunt, "landmarks": landmarks, "collected": collected})


@app.command()
def spawn(
    quest: str = typer.Option(..., help="Quest id"),
    artefact: str = typer.Option(..., help="Artefact id"),
) -> None:
    """Print an artefact's spawn point for this player (debugging aid)."""
    engine = _build_engine()
    target = _quest(_build_catalog(), quest)
    try:
        item = target.artefact(artefact)
    except KeyError:
        raise typer.BadParameter(f"Unknown artefact: {artefact}")
    point = spawn_point_for(item, engine.player_identity, latitude_corrected=settings.latitude_corrected_offsets)
    print({"artefact": item.id, "lat": point.lat, "lng": point.lng})


@app.command()
def collect(
    quest: str = typer.Option(..., help="Quest id"),
    artefact: str = typer.Option(..., help="Artefact id"),
    lat: float = typer.Option(..., help="Player latitude"),
    lng: float = typer.Option(..., help="Player longitude"),
    speed: float = typer.Option(None, help="Player speed in m/s"),
) -> None:
    """Attempt to collect an artefact at the given position."""
    engine = _build_engine()
    target = _quest(_build_catalog(), quest)
    try:
        item = target.artefact(artefact)
    except KeyError:
        raise typer.BadParameter(f"Unknown artefact: {artefact}")

    result = engine.attempt_collect(target.id, item, _position(lat, lng, speed))
    if not result.success:
        print({"collected": False, "reason": result.reason})
        raise typer.Exit(code=1)

    record = result.record
    print({"collected": True, "artefact": record.artefact_id, "points": record.points_awarded, "score": engine.score()})


@app.command()
def score() -> None:
    """Print the running total across all quests."""
    print({"score": _build_engine().score()})


@app.command()
def reset(quest: str = typer.Option(..., help="Quest id")) -> None:
    """Remove every collection record for a quest."""
    engine = _build_engine()
    target = _quest(_build_catalog(), quest)
    engine.reset_quest(target.id)
    print({"reset": target.id, "score": engine.score()})


@app.command()
def heading(
    raw: float = typer.Option(..., help="Raw compass heading in degrees"),
    offset: float = typer.Option(0.0, help="Calibration offset in degrees"),
) -> None:
    """Normalize a raw heading with a calibration offset."""
    value, _ = update_heading(raw, offset, None, int(time.monotonic() * 1000), settings.heading_min_interval_ms)
    print({"heading": value, "raw_normalized": normalize_heading(raw)})


if __name__ == "__main__":
    app()
