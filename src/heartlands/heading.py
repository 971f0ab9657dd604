"""Rate-limited compass heading with a manual calibration offset."""

from __future__ import annotations

import logging
import math

DEFAULT_MIN_INTERVAL_MS = 100


def normalize_heading(raw: float) -> float:
    """Fold any angle in degrees into [0, 360)."""
    folded = raw % 360.0
    # Tiny negative inputs round up to exactly 360.0.
    return 0.0 if folded >= 360.0 else folded


def update_heading(
    raw: float,
    offset_calibration: float,
    last_update_time_ms: int | None,
    now_ms: int,
    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
) -> tuple[float | None, int | None]:
    """Return ``(heading, last_update_time_ms)`` for one raw sample.

    Samples arriving less than ``min_interval_ms`` after the last accepted
    one (including late samples stamped before it) are rejected with a
    ``None`` heading and the timestamp left unchanged.
    """
    if not math.isfinite(raw):
        return None, last_update_time_ms
    if last_update_time_ms is not None and now_ms - last_update_time_ms < min_interval_ms:
        return None, last_update_time_ms
    return normalize_heading(raw + offset_calibration), now_ms


class HeadingFilter:
    """Holds the current heading for a marker that rotates with the player."""

    def __init__(self, *, min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS, logger: logging.Logger | None = None) -> None:
        self._min_interval_ms = min_interval_ms
        self._logger = logger or logging.getLogger("heartlands.heading")
        self._offset = 0.0
        self._last_update_ms: int | None = None
        self._last_raw: float | None = None
        self._current: float | None = None

    @property
    def current(self) -> float | None:
        """Latest accepted heading, or ``None`` while no sample has been accepted."""
        return self._current

    @property
    def offset(self) -> float:
        return self._offset

    def update(self, raw: float, now_ms: int) -> float | None:
        heading, self._last_update_ms = update_heading(
            raw,
            self._offset,
            self._last_update_ms,
            now_ms,
            self._min_interval_ms,
        )
        if heading is None:
            return None
        self._last_raw = raw
        self._current = heading
        return heading

    def calibrate(self, true_heading: float = 0.0) -> bool:
        """Make the latest raw sample read as ``true_heading``.

        Returns ``False`` when no sample has been accepted yet.
        """
        if self._last_raw is None:
            return False
        self._offset = normalize_heading(true_heading - self._last_raw)
        self._current = normalize_heading(self._last_raw + self._offset)
        self._logger.info("heading_calibrated", extra={"offset": self._offset})
        return True

    def reset(self) -> None:
        self._offset = 0.0
        self._last_update_ms = None
        self._last_raw = None
        self._current = None
