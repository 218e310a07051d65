"""Shared helpers and fixtures for capture tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from lap_recorder.capture.detector import DetectorConfig, LapBoundaryDetector
from lap_recorder.capture.models import FinalizeReason, LapCapture, LapRecord
from lap_recorder.capture.series import Point
from lap_recorder.capture.stats import compute_lap_stats
from lap_recorder.capture.store import CompletedLapStore
from lap_recorder.telemetry.models import ChannelSample, PositionSample

CAPTURED_AT = datetime(2026, 2, 14, 15, 30, 12)


def pos(distance_m: float, lap_time_ms: float = 0.0, lap_number: int = 1) -> PositionSample:
    return PositionSample(distance_m=distance_m, lap_time_ms=lap_time_ms, lap_number=lap_number)


def chan(**overrides) -> ChannelSample:
    defaults = dict(
        speed_kph=200.0,
        brake=0.0,
        throttle=1.0,
        gear=6,
        steer=0.0,
        drs=False,
    )
    defaults.update(overrides)
    return ChannelSample(**defaults)


def make_detector(
    store: CompletedLapStore | None = None,
    config: DetectorConfig | None = None,
) -> LapBoundaryDetector:
    return LapBoundaryDetector(
        store if store is not None else CompletedLapStore(),
        config,
        clock=lambda: CAPTURED_AT,
    )


def start_lap(detector: LapBoundaryDetector, first_distance_m: float = 0.0, lap_number: int = 1) -> None:
    """Cross the start line: -1 m then *first_distance_m* (which is recorded)."""
    detector.process(pos(-1.0, lap_number=lap_number))
    detector.process(pos(first_distance_m, lap_number=lap_number))


def make_capture(speeds=(100.0, 200.0, 150.0), throttle=(0.5, 1.0), brake=(0.25, 0.0)) -> LapCapture:
    capture = LapCapture()
    for i, y in enumerate(speeds):
        capture.speed.append(Point(i, y))
        capture.time_normalized[i] = i * 10.25
    for i, y in enumerate(throttle):
        capture.throttle.append(Point(i, y))
    for i, y in enumerate(brake):
        capture.brake.append(Point(i, y))
    capture.gear.extend([Point(0, 3), Point(1, 4)])
    capture.steer.extend([Point(0, -0.125), Point(1, 0.3)])
    capture.drs.extend([Point(0, 0), Point(1, 1)])
    return capture


def make_record(
    capture: LapCapture | None = None,
    index: int = 1,
    reason: FinalizeReason = FinalizeReason.LAP_COMPLETE,
) -> LapRecord:
    capture = capture if capture is not None else make_capture()
    return LapRecord.freeze(
        capture,
        compute_lap_stats(capture),
        index=index,
        captured_at=CAPTURED_AT,
        reason=reason,
    )


@pytest.fixture
def store() -> CompletedLapStore:
    return CompletedLapStore()


@pytest.fixture
def detector(store) -> LapBoundaryDetector:
    return make_detector(store)
