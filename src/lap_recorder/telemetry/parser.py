"""SampleParser — converts decoded telemetry datagrams to typed samples.

Datagrams are JSON objects carrying the player car's fields under the names
the game's UDP packets use.  A ``"packet"`` tag selects the sample kind:

``{"packet": "lap_data", "LapDistance": 812.4, "CurrentLapTimeInMS": 20311, "CurrentLapNum": 2}``

``{"packet": "car_telemetry", "Speed": 287, "Throttle": 1.0, "Brake": 0.0,
"Gear": 7, "Steer": -0.02, "Drs": 1}``
"""

from __future__ import annotations

import json
import math

from lap_recorder.telemetry.models import ChannelSample, PositionSample, Sample

# packet field → (sample field, converter)
_POSITION_FIELDS: tuple[tuple[str, str, type], ...] = (
    ("LapDistance",        "distance_m",   float),
    ("CurrentLapTimeInMS", "lap_time_ms",  float),
    ("CurrentLapNum",      "lap_number",   int),
)

_CHANNEL_FIELDS: tuple[tuple[str, str, type], ...] = (
    ("Speed",    "speed_kph", float),
    ("Brake",    "brake",     float),
    ("Throttle", "throttle",  float),
    ("Gear",     "gear",      int),
    ("Steer",    "steer",     float),
    ("Drs",      "drs",       bool),
)

_PACKETS = {
    "lap_data": (PositionSample, _POSITION_FIELDS),
    "car_telemetry": (ChannelSample, _CHANNEL_FIELDS),
}


class SampleDecodeError(ValueError):
    """Raised when a datagram cannot be turned into a sample."""


def _convert(raw_key: str, value, conv: type):
    if conv is bool:
        if isinstance(value, bool) or (isinstance(value, int) and value in (0, 1)):
            return bool(value)
        raise SampleDecodeError(f"field {raw_key!r} is not a flag: {value!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SampleDecodeError(f"field {raw_key!r} is not numeric: {value!r}")
    if not math.isfinite(value):
        raise SampleDecodeError(f"field {raw_key!r} is not finite: {value!r}")
    return conv(value)


class SampleParser:
    """Parses a raw datagram into a :class:`PositionSample` or :class:`ChannelSample`.

    Packets of any other kind raise :class:`SampleDecodeError`; the ingestion
    loop drops them and carries on.
    """

    def parse(self, raw: dict) -> Sample:
        """Convert one decoded datagram *raw* into a sample."""
        if not isinstance(raw, dict):
            raise SampleDecodeError(f"datagram is not an object: {type(raw).__name__}")
        try:
            cls, fields = _PACKETS[raw.get("packet")]
        except (KeyError, TypeError):
            raise SampleDecodeError(f"unknown packet type: {raw.get('packet')!r}") from None

        kwargs: dict = {}
        for raw_key, sample_field, conv in fields:
            if raw_key not in raw:
                raise SampleDecodeError(f"missing field {raw_key!r}")
            kwargs[sample_field] = _convert(raw_key, raw[raw_key], conv)
        return cls(**kwargs)

    def parse_bytes(self, datagram: bytes) -> Sample:
        """Decode a UTF-8 JSON *datagram* and parse it."""
        try:
            raw = json.loads(datagram.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SampleDecodeError(f"undecodable datagram: {exc}") from exc
        return self.parse(raw)
