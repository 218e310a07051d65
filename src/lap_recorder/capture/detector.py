"""Lap boundary detection and per-lap capture.

The detector is a two-state machine fed one sample at a time:

* **ARMED**: waiting for a timed lap to start.  Every sample is dropped;
  only the previous distance is tracked so the start can be recognised.
* **ACTIVE**: recording.  Position samples fill the time-normalised map,
  channel samples are resampled onto the per-meter grid, and a lap-number
  change freezes the lap into the :class:`CompletedLapStore`.

A timed lap starts on either signal:

* neg-to-pos crossing: distance goes from ``< 0`` to ``>= 0`` (leaving the
  garage, distance is negative until the start line);
* distance wrap: distance drops from above ``wrap_from_m`` to below
  ``wrap_to_m`` on tracks that never report negative distances.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from lap_recorder.capture.models import FinalizeReason, LapCapture, LapRecord
from lap_recorder.capture.rounding import as_decimal, round_half_away, round_to_int
from lap_recorder.capture.series import CHANNELS, Point, channel_values, upsert
from lap_recorder.capture.stats import compute_lap_stats
from lap_recorder.capture.store import CompletedLapStore
from lap_recorder.telemetry.models import ChannelSample, PositionSample, Sample

_logger = logging.getLogger(__name__)


class DetectorState(enum.Enum):
    ARMED = "armed"
    ACTIVE = "active"


@dataclass(frozen=True)
class DetectorConfig:
    """Thresholds for start detection and jitter filtering.

    Args:
        wrap_from_m: Previous distance above which a sudden drop counts as a
            distance wrap.  Assumes the track is longer than this.
        wrap_to_m: Current distance below which the drop counts as a wrap.
        jitter_tolerance_m: How far a position sample may fall behind the
            last accepted distance before it is dropped as jitter.
    """

    wrap_from_m: float = 1000.0
    wrap_to_m: float = 50.0
    jitter_tolerance_m: float = 2.0


class LapBoundaryDetector:
    """Segments the sample stream into laps and records the active one.

    Parameters
    ----------
    store:
        Where finished laps are published.
    config:
        Start-detection and jitter thresholds.
    clock:
        Returns the capture timestamp for finalized laps.  Injected for tests.
    """

    def __init__(
        self,
        store: CompletedLapStore,
        config: DetectorConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._cfg = config or DetectorConfig()
        self._clock = clock
        self._state = DetectorState.ARMED
        self._prev_distance_m: float | None = None
        self._capture = LapCapture()
        self.accepted: int = 0
        self.dropped: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def capture(self) -> LapCapture:
        """The capture being recorded.  Only the ingestion thread may touch it."""
        return self._capture

    @property
    def store(self) -> CompletedLapStore:
        return self._store

    def arm(self) -> None:
        """Reset to ARMED with an empty capture and zeroed counters (start of a session)."""
        self._state = DetectorState.ARMED
        self._prev_distance_m = None
        self._capture = LapCapture()
        self.accepted = 0
        self.dropped = 0

    def process(self, sample: Sample) -> bool:
        """Feed one sample.  Returns True if it was applied to the capture."""
        if isinstance(sample, PositionSample):
            applied = self._on_position(sample)
        elif isinstance(sample, ChannelSample):
            applied = self._on_channel(sample)
        else:
            raise TypeError(f"unsupported sample type: {type(sample).__name__}")

        if applied:
            self.accepted += 1
        else:
            self.dropped += 1
        return applied

    def finalize(self, reason: FinalizeReason) -> LapRecord | None:
        """Freeze the current capture into the store and start a fresh one.

        Returns the new record, or None when the capture recorded no meters
        (nothing is stored in that case).
        """
        capture, self._capture = self._capture, LapCapture()
        if capture.is_empty():
            return None

        stats = compute_lap_stats(capture)
        record = LapRecord.freeze(
            capture,
            stats,
            index=self._store.next_index(),
            captured_at=self._clock(),
            reason=reason,
        )
        self._store.append(record)
        return record

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _start_trigger(self, curr: float) -> str | None:
        prev = self._prev_distance_m
        if prev is None:
            return None
        if prev < 0 <= curr:
            return "neg->pos crossing"
        if prev > self._cfg.wrap_from_m and curr < self._cfg.wrap_to_m:
            return "distance wrap"
        return None

    def _on_position(self, sample: PositionSample) -> bool:
        dist = sample.distance_m

        if self._state is DetectorState.ARMED:
            trigger = self._start_trigger(dist)
            if trigger is not None:
                # Anything collected before the line is junk.
                self._capture = LapCapture()
                self._state = DetectorState.ACTIVE
                _logger.info("Timed lap START (%s)", trigger)
        self._prev_distance_m = dist

        if self._state is DetectorState.ARMED:
            return False

        if dist < 0:
            return False

        capture = self._capture
        if capture.last_lap_number is not None and sample.lap_number != capture.last_lap_number:
            # This sample belongs to the new lap; keep processing it below.
            self.finalize(FinalizeReason.LAP_COMPLETE)
            capture = self._capture

        if capture.last_lap_number is None:
            capture.last_lap_number = sample.lap_number

        last = capture.last_distance_m
        if last is not None:
            # Decimal, so a sample exactly at the tolerance is kept.
            behind = as_decimal(last) - as_decimal(dist)
            if behind > as_decimal(self._cfg.jitter_tolerance_m):
                return False

        capture.last_distance_m = dist
        key = round_to_int(dist)
        capture.time_normalized[key] = round_half_away(sample.lap_time_ms, 2)
        return True

    def _on_channel(self, sample: ChannelSample) -> bool:
        if self._state is DetectorState.ARMED:
            return False
        capture = self._capture
        if capture.last_distance_m is None:
            return False

        x = round_to_int(capture.last_distance_m)
        values = channel_values(
            sample.speed_kph,
            sample.brake,
            sample.throttle,
            sample.gear,
            sample.steer,
            sample.drs,
        )
        for channel in CHANNELS:
            upsert(capture.series(channel), Point(x, values[channel]))
        return True
