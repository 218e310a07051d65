"""Telemetry samples and their inbound transport.

Public API
----------
PositionSample      - lap distance / lap time / lap number for one tick
ChannelSample       - speed, pedals, gear, steering and DRS for one tick
SampleParser        - decoded datagram → PositionSample | ChannelSample
SampleDecodeError   - raised on datagrams that cannot be parsed
UdpSampleSource     - receives datagrams from the game over UDP
"""

from lap_recorder.telemetry.models import ChannelSample, PositionSample, Sample
from lap_recorder.telemetry.parser import SampleDecodeError, SampleParser
from lap_recorder.telemetry.source import UdpSampleSource

__all__ = [
    "ChannelSample",
    "PositionSample",
    "Sample",
    "SampleDecodeError",
    "SampleParser",
    "UdpSampleSource",
]
