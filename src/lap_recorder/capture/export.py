"""Export of finished laps to the lap JSON format, and loading it back.

The document layout::

    {
      "time_normalized": {"<meter>": <ms, 2dp>, ...},
      "speed": [{"x": <int>, "y": <float>}, ...],
      "brake": ..., "throttle": ..., "gear": ..., "steer": ..., "drs": ...,
      "lap_stats": {"speed_top": <int>, "speed_average": <float, 1dp>,
                    "throttle_average": <int>, "brake_average": <int>}
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from lap_recorder.capture.models import LapRecord, LapStats
from lap_recorder.capture.rounding import round_half_away, round_to_int
from lap_recorder.capture.series import CHANNELS

# Channels whose y values are whole numbers in the export.
_INT_CHANNELS = frozenset({"gear", "drs"})


class LapFileError(Exception):
    """Raised when a lap JSON file cannot be read or does not match the format."""


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class XY(BaseModel):
    x: float
    y: float


class LapStatsExport(BaseModel):
    speed_top: int
    speed_average: float
    throttle_average: int
    brake_average: int


class LapExport(BaseModel):
    """Validated lap JSON document.  ``lap_stats`` may be absent in older files."""

    time_normalized: dict[str, float]
    speed: list[XY]
    brake: list[XY]
    throttle: list[XY]
    gear: list[XY]
    steer: list[XY]
    drs: list[XY]
    lap_stats: LapStatsExport | None = None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def export_stats(stats: LapStats) -> dict:
    """Round *stats* the way the lap JSON stores them."""
    return {
        "speed_top": round_to_int(stats.speed_top_kph),
        "speed_average": round_half_away(stats.speed_avg_kph, 1),
        "throttle_average": round_to_int(stats.throttle_avg_pct),
        "brake_average": round_to_int(stats.brake_avg_pct),
    }


def to_export_dict(record: LapRecord) -> dict:
    """Return the JSON-serializable export object for *record*."""
    doc: dict = {
        "time_normalized": {str(k): v for k, v in record.time_normalized.items()},
    }
    for channel in CHANNELS:
        if channel in _INT_CHANNELS:
            doc[channel] = [{"x": p.x, "y": int(p.y)} for p in record.series(channel)]
        else:
            doc[channel] = [{"x": p.x, "y": p.y} for p in record.series(channel)]
    doc["lap_stats"] = export_stats(record.stats)
    return doc


def to_json(record: LapRecord) -> str:
    """Indented JSON text of :func:`to_export_dict`."""
    return json.dumps(to_export_dict(record), indent=2)


def load_lap_json(path: str | Path) -> LapExport:
    """Read and validate a lap JSON file.

    Raises
    ------
    LapFileError
        If the file cannot be read, is not JSON, or misses required fields.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LapFileError(f"Failed to read {path}: {exc}") from exc
    try:
        return LapExport.model_validate_json(text)
    except ValidationError as exc:
        raise LapFileError(f"Invalid lap JSON {path}: {exc}") from exc
