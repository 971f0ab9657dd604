"""Progress ledger and its key-value persistence backends."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Iterator, Protocol

from .models import ProgressRecord, progress_key


class ProgressStore(Protocol):
    """Flat key-value persistence for ``"{quest_id}:{artefact_id}"`` records."""

    def get(self, key: str) -> dict | None:
        """Return the stored payload for ``key`` if present."""

    def put(self, key: str, payload: dict) -> None:
        """Store ``payload`` under ``key``."""

    def delete_many(self, keys: list[str]) -> None:
        """Remove every key in ``keys``."""

    def items(self) -> Iterator[tuple[str, dict]]:
        """Iterate over all stored entries."""


class InMemoryProgressStore:
    """Dictionary-backed store used for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, dict] | None = None) -> None:
        self._data: dict[str, dict] = dict(initial or {})

    def get(self, key: str) -> dict | None:
        return self._data.get(key)

    def put(self, key: str, payload: dict) -> None:
        self._data[key] = dict(payload)

    def delete_many(self, keys: list[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def items(self) -> Iterator[tuple[str, dict]]:
        return iter(list(self._data.items()))

    def snapshot(self) -> dict[str, dict]:
        return {key: dict(value) for key, value in self._data.items()}


class JsonFileProgressStore(InMemoryProgressStore):
    """JSON-file store persisting the whole progress map on every write."""

    def __init__(self, file_path: str | Path, *, logger: logging.Logger | None = None) -> None:
        self._path = Path(file_path).expanduser()
        self._logger = logger or logging.getLogger("heartlands.progress")
        super().__init__(self._load())

    @property
    def path(self) -> Path:
        return self._path

    def put(self, key: str, payload: dict) -> None:
        super().put(key, payload)
        self._flush()

    def delete_many(self, keys: list[str]) -> None:
        super().delete_many(keys)
        self._flush()

    def _load(self) -> dict[str, dict]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            self._logger.warning("progress_file_unreadable", extra={"path": str(self._path)})
            return {}

        if not isinstance(payload, dict):
            self._logger.warning("progress_file_unreadable", extra={"path": str(self._path)})
            return {}
        entries: dict[str, dict] = {}
        for key, value in payload.items():
            if _valid_entry(key, value):
                entries[key] = value
            else:
                self._logger.warning("progress_entry_dropped", extra={"key": key})
        return entries

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".progress-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self.snapshot(), handle, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _valid_entry(key: str, value: object) -> bool:
    if ":" not in key or not isinstance(value, dict):
        return False
    return all(
        isinstance(value.get(field), int) and not isinstance(value.get(field), bool) for field in ("when", "points")
    )


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class ProgressLedger:
    """Append-only collection records with at most one record per key."""

    def __init__(
        self,
        store: ProgressStore,
        *,
        clock: Callable[[], int] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _epoch_millis
        self._logger = logger or logging.getLogger("heartlands.progress")

    def has_collected(self, quest_id: str, artefact_id: str) -> bool:
        return self._store.get(progress_key(quest_id, artefact_id)) is not None

    def get_record(self, quest_id: str, artefact_id: str) -> ProgressRecord | None:
        payload = self._store.get(progress_key(quest_id, artefact_id))
        if payload is None:
            return None
        return _record_from_payload(quest_id, artefact_id, payload)

    def record_collection(self, quest_id: str, artefact_id: str, points: int) -> ProgressRecord:
        """Create the record for a key, or return the one already there."""
        existing = self.get_record(quest_id, artefact_id)
        if existing is not None:
            self._logger.debug(
                "collection_already_recorded",
                extra={"quest_id": quest_id, "artefact_id": artefact_id},
            )
            return existing

        record = ProgressRecord(
            quest_id=quest_id,
            artefact_id=artefact_id,
            collected_at_epoch_millis=self._clock(),
            points_awarded=points,
        )
        self._store.put(record.key, {"when": record.collected_at_epoch_millis, "points": record.points_awarded})
        self._logger.info(
            "collection_recorded",
            extra={"quest_id": quest_id, "artefact_id": artefact_id, "points": points},
        )
        return record

    def reset_quest(self, quest_id: str) -> None:
        prefix = f"{quest_id}:"
        keys = [key for key, _ in self._store.items() if key.startswith(prefix)]
        self._store.delete_many(keys)
        self._logger.info("quest_reset", extra={"quest_id": quest_id, "removed": len(keys)})

    def records(self, quest_id: str | None = None) -> list[ProgressRecord]:
        """Return records, newest first, optionally limited to one quest."""
        found: list[ProgressRecord] = []
        for key, payload in self._store.items():
            record_quest, _, artefact_id = key.partition(":")
            if quest_id is not None and record_quest != quest_id:
                continue
            found.append(_record_from_payload(record_quest, artefact_id, payload))
        return sorted(found, key=lambda record: record.collected_at_epoch_millis, reverse=True)

    def total_score(self) -> int:
        return sum(int(payload.get("points") or 0) for _, payload in self._store.items())


def _record_from_payload(quest_id: str, artefact_id: str, payload: dict) -> ProgressRecord:
    return ProgressRecord(
        quest_id=quest_id,
        artefact_id=artefact_id,
        collected_at_epoch_millis=int(payload.get("when") or 0),
        points_awarded=int(payload.get("points") or 0),
    )
