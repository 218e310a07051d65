"""Lap recorder: timed-lap capture from racing-game telemetry."""
