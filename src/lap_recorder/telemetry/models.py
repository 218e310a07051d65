"""Telemetry sample models.

The decoder hands the capture engine one of two sample kinds per tick.  They
form a closed union (:data:`Sample`); consumers dispatch on the concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionSample:
    """Where the player car is on the lap."""

    distance_m: float
    """Lap distance in metres.  Negative before the start line of a timed lap."""

    lap_time_ms: float
    """Current lap elapsed time in milliseconds."""

    lap_number: int
    """Current lap number as reported by the game."""


@dataclass(frozen=True)
class ChannelSample:
    """Driver inputs and car state for one tick.

    Channel samples carry no distance; they are placed on the grid at the
    distance of the most recently accepted :class:`PositionSample`.
    """

    speed_kph: float
    brake: float
    """Brake pedal [0.0, 1.0]."""

    throttle: float
    """Throttle pedal [0.0, 1.0]."""

    gear: int
    """-1=reverse, 0=neutral, 1-8=forward."""

    steer: float
    """Steering [-1.0, 1.0].  Positive = right."""

    drs: bool


Sample = PositionSample | ChannelSample
