from __future__ import annotations

import json
from pathlib import Path

from heartlands.progress import InMemoryProgressStore, JsonFileProgressStore, ProgressLedger


def test_record_collection_is_idempotent(ledger: ProgressLedger, store: InMemoryProgressStore) -> None:
    first = ledger.record_collection("jurong", "lantern", 10)
    second = ledger.record_collection("jurong", "lantern", 99)

    assert second == first
    assert store.snapshot() == {"jurong:lantern": {"when": first.collected_at_epoch_millis, "points": 10}}
    assert ledger.total_score() == 10


def test_reset_quest_only_touches_matching_prefix(ledger: ProgressLedger) -> None:
    ledger.record_collection("jurong", "a", 10)
    ledger.record_collection("jurong", "b", 15)
    ledger.record_collection("jurong-east", "c", 20)
    ledger.record_collection("civic", "d", 30)

    ledger.reset_quest("jurong")

    assert ledger.has_collected("jurong", "a") is False
    assert ledger.has_collected("jurong", "b") is False
    assert ledger.has_collected("jurong-east", "c") is True
    assert ledger.total_score() == 50


def test_records_are_newest_first(ledger: ProgressLedger) -> None:
    ledger.record_collection("jurong", "a", 10)
    ledger.record_collection("jurong", "b", 15)
    ledger.record_collection("civic", "c", 30)

    assert [record.artefact_id for record in ledger.records("jurong")] == ["b", "a"]
    assert [record.artefact_id for record in ledger.records()] == ["c", "b", "a"]


def test_json_store_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "data" / "progress.json"
    ledger = ProgressLedger(JsonFileProgressStore(path), clock=lambda: 1_700_000_000_000)

    record = ledger.record_collection("jurong", "rnd-jtc-marker-0", 10)

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "jurong:rnd-jtc-marker-0": {"when": 1_700_000_000_000, "points": 10}
    }
    reloaded = ProgressLedger(JsonFileProgressStore(path))
    assert reloaded.get_record("jurong", "rnd-jtc-marker-0") == record

    reloaded.reset_quest("jurong")
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_json_store_treats_corrupt_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "progress.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileProgressStore(path)

    assert store.snapshot() == {}
    assert ProgressLedger(store).total_score() == 0


def test_json_store_treats_undecodable_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "progress.json"
    path.write_bytes(b"\xff\xfe{bad")

    store = JsonFileProgressStore(path)

    assert store.snapshot() == {}


def test_json_store_drops_malformed_entries(tmp_path: Path) -> None:
    path = tmp_path / "progress.json"
    path.write_text(
        json.dumps(
            {
                "jurong:lantern": {"when": "soon", "points": "ten"},
                "jurong:bell": {"when": 1_000, "points": True},
                "no-separator": {"when": 1_000, "points": 5},
                "civic:glass": {"when": 2_000, "points": 15},
            }
        ),
        encoding="utf-8",
    )

    ledger = ProgressLedger(JsonFileProgressStore(path))

    assert ledger.has_collected("jurong", "lantern") is False
    assert ledger.has_collected("jurong", "bell") is False
    assert [record.artefact_id for record in ledger.records()] == ["glass"]
    assert ledger.total_score() == 15
    assert ledger.record_collection("jurong", "lantern", 10).points_awarded == 10
