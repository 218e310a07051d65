"""Lap capture data models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from lap_recorder.capture.series import CHANNELS, Point


class FinalizeReason(str, enum.Enum):
    """Why a capture was frozen into a :class:`LapRecord`."""

    LAP_COMPLETE = "lap complete"
    MANUAL_STOP = "manual stop"


@dataclass
class LapCapture:
    """The lap currently being recorded.

    Owned by the boundary detector; never handed to other threads.  Finished
    captures are copied into a :class:`LapRecord` and the capture is replaced.
    """

    time_normalized: dict[int, float] = field(default_factory=dict)
    """Whole-meter distance → elapsed lap time (ms, 2 decimals)."""

    speed: list[Point] = field(default_factory=list)
    brake: list[Point] = field(default_factory=list)
    throttle: list[Point] = field(default_factory=list)
    gear: list[Point] = field(default_factory=list)
    steer: list[Point] = field(default_factory=list)
    drs: list[Point] = field(default_factory=list)

    last_distance_m: float | None = None
    """Distance of the last accepted position sample."""

    last_lap_number: int | None = None
    """Lap number fixed by the first accepted position sample."""

    def series(self, channel: str) -> list[Point]:
        """Return the live series for *channel* (one of :data:`CHANNELS`)."""
        if channel not in CHANNELS:
            raise KeyError(channel)
        return getattr(self, channel)

    def is_empty(self) -> bool:
        """True when no meter has been recorded yet."""
        return not self.time_normalized


@dataclass(frozen=True)
class LapStats:
    """Summary statistics computed once when a lap is finalized."""

    speed_top_kph: float = 0.0
    speed_avg_kph: float = 0.0
    throttle_avg_pct: float = 0.0
    """Mean throttle as a percentage (0–100)."""

    brake_avg_pct: float = 0.0
    """Mean brake as a percentage (0–100)."""


@dataclass(frozen=True)
class LapRecord:
    """A finished lap, frozen at finalize time.

    All containers are value copies (tuples and a read-only mapping) so the
    record never changes after it is published to the store.
    """

    index: int
    """1-based position in the session's completed lap store."""

    captured_at: datetime
    reason: FinalizeReason
    suggested_file_name: str
    time_normalized: Mapping[int, float]
    speed: tuple[Point, ...]
    brake: tuple[Point, ...]
    throttle: tuple[Point, ...]
    gear: tuple[Point, ...]
    steer: tuple[Point, ...]
    drs: tuple[Point, ...]
    stats: LapStats

    @classmethod
    def freeze(
        cls,
        capture: LapCapture,
        stats: LapStats,
        index: int,
        captured_at: datetime,
        reason: FinalizeReason,
    ) -> LapRecord:
        """Copy *capture* into a new record; nothing is shared with the capture."""
        return cls(
            index=index,
            captured_at=captured_at,
            reason=reason,
            suggested_file_name=suggested_file_name(index, captured_at),
            time_normalized=MappingProxyType(dict(capture.time_normalized)),
            speed=tuple(capture.speed),
            brake=tuple(capture.brake),
            throttle=tuple(capture.throttle),
            gear=tuple(capture.gear),
            steer=tuple(capture.steer),
            drs=tuple(capture.drs),
            stats=stats,
        )

    def series(self, channel: str) -> tuple[Point, ...]:
        """Return the frozen series for *channel*."""
        if channel not in CHANNELS:
            raise KeyError(channel)
        return getattr(self, channel)


def suggested_file_name(index: int, captured_at: datetime) -> str:
    """``lap_001_20260214_153012.json`` style export name."""
    return f"lap_{index:03d}_{captured_at:%Y%m%d_%H%M%S}.json"
