"""Lap capture: boundary detection, per-meter resampling, stats and export.

Public API
----------
LapBoundaryDetector - ARMED/ACTIVE state machine recording the current lap
DetectorConfig      - start-detection and jitter thresholds
CaptureSession      - background ingestion loop with manual-stop finalize
CompletedLapStore   - append-only store of finished laps
LapRecord           - frozen finished lap
to_export_dict      - LapRecord → lap JSON object
load_lap_json       - read and validate a lap JSON file
"""

from lap_recorder.capture.detector import DetectorConfig, DetectorState, LapBoundaryDetector
from lap_recorder.capture.export import (
    LapExport,
    LapFileError,
    load_lap_json,
    to_export_dict,
    to_json,
)
from lap_recorder.capture.models import FinalizeReason, LapCapture, LapRecord, LapStats
from lap_recorder.capture.series import CHANNELS, Point, upsert
from lap_recorder.capture.session import CaptureSession
from lap_recorder.capture.stats import compute_lap_stats
from lap_recorder.capture.store import CompletedLapStore

__all__ = [
    "CHANNELS",
    "CaptureSession",
    "CompletedLapStore",
    "DetectorConfig",
    "DetectorState",
    "FinalizeReason",
    "LapBoundaryDetector",
    "LapCapture",
    "LapExport",
    "LapFileError",
    "LapRecord",
    "LapStats",
    "Point",
    "compute_lap_stats",
    "load_lap_json",
    "to_export_dict",
    "to_json",
    "upsert",
]
