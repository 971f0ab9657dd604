"""Collection engine facade consumed by the presentation layer."""

from __future__ import annotations

import logging
import time

from .heading import HeadingFilter
from .models import Artefact, CollectResult, PositionFix, QuestTotals, RevealState, VisibleState
from .progress import ProgressLedger
from .proximity import evaluate_state, landmark_discovered, nearest_first, usable_position
from .quests import Quest


class CollectionEngine:
    """Answers visibility queries and collect attempts for one player."""

    def __init__(
        self,
        ledger: ProgressLedger,
        player_identity: str,
        *,
        heading_filter: HeadingFilter | None = None,
        max_fix_speed_mps: float | None = None,
        latitude_corrected: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.ledger = ledger
        self.player_identity = player_identity
        self.heading_filter = heading_filter or HeadingFilter()
        self._max_fix_speed_mps = max_fix_speed_mps
        self._latitude_corrected = latitude_corrected
        self._logger = logger or logging.getLogger("heartlands.engine")

    def get_visible_state(self, quest_id: str, artefact: Artefact, position: PositionFix | None) -> VisibleState:
        """Pure query: no ledger writes happen here."""
        coordinate = usable_position(position, max_speed_mps=self._max_fix_speed_mps)
        if position is not None and coordinate is None:
            self._logger.debug("position_fix_ignored", extra={"speed": position.speed})

        discovered = None
        if artefact.is_landmark:
            discovered = self.landmark_discovered(quest_id, artefact)

        return evaluate_state(
            artefact,
            coordinate,
            self.player_identity,
            collected=not artefact.is_landmark and self.ledger.has_collected(quest_id, artefact.id),
            discovered=discovered,
            latitude_corrected=self._latitude_corrected,
        )

    def attempt_collect(self, quest_id: str, artefact: Artefact, position: PositionFix | None) -> CollectResult:
        if artefact.is_landmark:
            return CollectResult(success=False, reason="not_collectible")

        existing = self.ledger.get_record(quest_id, artefact.id)
        if existing is not None:
            return CollectResult(success=True, record=existing)

        visible = self.get_visible_state(quest_id, artefact, position)
        if visible.state is not RevealState.COLLECTABLE:
            reason = "out_of_range" if usable_position(position, max_speed_mps=self._max_fix_speed_mps) else "no_position"
            self._logger.info(
                "collect_rejected",
                extra={"quest_id": quest_id, "artefact_id": artefact.id, "reason": reason},
            )
            return CollectResult(success=False, reason=reason)

        record = self.ledger.record_collection(quest_id, artefact.id, artefact.points)
        return CollectResult(success=True, record=record)

    def landmark_discovered(self, quest_id: str, artefact: Artefact) -> bool:
        return landmark_discovered(artefact, lambda artefact_id: self.ledger.has_collected(quest_id, artefact_id))

    def current_heading(self, raw: float | None = None, now_ms: int | None = None) -> float | None:
        """Feed an optional raw sample, then return the current heading.

        A sample without ``now_ms`` is stamped with the monotonic clock.
        """
        if raw is not None:
            if now_ms is None:
                now_ms = int(time.monotonic() * 1000)
            self.heading_filter.update(raw, now_ms)
        return self.heading_filter.current

    def score(self) -> int:
        return self.ledger.total_score()

    def reset_quest(self, quest_id: str) -> None:
        self.ledger.reset_quest(quest_id)

    def survey(self, quest: Quest, position: PositionFix | None) -> list[tuple[Artefact, VisibleState]]:
        return [(artefact, self.get_visible_state(quest.id, artefact, position)) for artefact in quest.artefacts]

    def hunt_list(self, quest: Quest, position: PositionFix | None) -> list[tuple[Artefact, VisibleState]]:
        """Uncollected collectibles, nearest anchor first."""
        pending = [
            (artefact, visible)
            for artefact, visible in self.survey(quest, position)
            if visible.state not in (RevealState.COLLECTED, RevealState.LANDMARK)
        ]
        return nearest_first(pending)

    def collected_list(self, quest: Quest) -> list[Artefact]:
        """Collected artefacts of ``quest``, most recent first."""
        by_id = {artefact.id: artefact for artefact in quest.artefacts}
        return [by_id[record.artefact_id] for record in self.ledger.records(quest.id) if record.artefact_id in by_id]

    def quest_totals(self, quest: Quest) -> QuestTotals:
        collectibles = quest.collectibles
        collected = [artefact for artefact in collectibles if self.ledger.has_collected(quest.id, artefact.id)]
        return QuestTotals(
            total_items=len(collectibles),
            collected_items=len(collected),
            total_points=sum(artefact.points for artefact in collectibles),
            collected_points=sum(artefact.points for artefact in collected),
        )
