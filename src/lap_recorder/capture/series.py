"""Per-meter resampling of telemetry channels."""

from __future__ import annotations

from bisect import bisect_left
from typing import NamedTuple

from lap_recorder.capture.rounding import round_half_away


class Point(NamedTuple):
    """One resampled value at a whole-meter distance."""

    x: int
    y: float


# Channel order used everywhere a capture is walked or exported.
CHANNELS: tuple[str, ...] = ("speed", "brake", "throttle", "gear", "steer", "drs")


def upsert(series: list[Point], point: Point) -> None:
    """Append *point*, or replace the point already at the same meter.

    The common case is O(1): ``x`` moves forward (append) or stays on the
    last meter (replace).  A point behind the tip can only come from the
    backward-jitter window, so it replaces its meter's point or is inserted
    in order; the series stays strictly increasing in ``x``.
    """
    if not series or series[-1].x < point.x:
        series.append(point)
        return
    if series[-1].x == point.x:
        series[-1] = point
        return

    i = bisect_left(series, point.x, key=lambda p: p.x)
    if series[i].x == point.x:
        series[i] = point
    else:
        series.insert(i, point)


def channel_values(speed_kph: float, brake: float, throttle: float,
                   gear: int, steer: float, drs: bool) -> dict[str, float]:
    """Apply the per-channel transforms applied before upsert.

    Speed is stored as received; pedals and steering keep 3 decimals; gear is
    integral; DRS becomes 0/1.
    """
    return {
        "speed": speed_kph,
        "brake": round_half_away(brake, 3),
        "throttle": round_half_away(throttle, 3),
        "gear": int(gear),
        "steer": round_half_away(steer, 3),
        "drs": 1 if drs else 0,
    }
