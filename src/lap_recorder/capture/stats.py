"""Lap summary statistics."""

from __future__ import annotations

from collections.abc import Sequence

from lap_recorder.capture.models import LapCapture, LapStats
from lap_recorder.capture.series import Point


def _mean(series: Sequence[Point]) -> float:
    if not series:
        return 0.0
    return sum(p.y for p in series) / len(series)


def compute_lap_stats(capture: LapCapture) -> LapStats:
    """Compute top/average speed and average pedal usage for *capture*.

    Empty series yield 0 for the corresponding statistic.
    """
    speed = capture.speed
    return LapStats(
        speed_top_kph=max((p.y for p in speed), default=0.0),
        speed_avg_kph=_mean(speed),
        throttle_avg_pct=_mean(capture.throttle) * 100.0,
        brake_avg_pct=_mean(capture.brake) * 100.0,
    )
