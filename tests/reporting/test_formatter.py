"""Tests for lap labels, stats lines and the Markdown session summary."""

from __future__ import annotations

from lap_recorder.capture.models import FinalizeReason
from lap_recorder.reporting.formatter import (
    MarkdownFormatter,
    format_record_label,
    format_stats_line,
)
from tests.capture.conftest import make_capture, make_record


def test_record_label():
    rec = make_record(index=3, reason=FinalizeReason.MANUAL_STOP)
    assert format_record_label(rec) == "Lap #003 @ 15:30:12 (manual stop)"


def test_stats_line_uses_export_rounding():
    rec = make_record(make_capture(speeds=(100.0, 200.0, 150.0), throttle=(0.5, 1.0), brake=(0.25, 0.0)))
    assert format_stats_line(rec.stats) == (
        "Top 200 kph | Avg 150.0 kph | Throttle 75% | Brake 13%"
    )


def test_markdown_contains_each_lap():
    records = [make_record(index=1), make_record(index=2, reason=FinalizeReason.MANUAL_STOP)]
    md = MarkdownFormatter().format(records)
    assert md.startswith("# Lap capture summary")
    assert "**Laps stored**: 2" in md
    assert "| 001 | 15:30:12 | lap complete |" in md
    assert "| 002 | 15:30:12 | manual stop |" in md
    assert "lap_002_20260214_153012.json" in md


def test_markdown_lap_time_from_last_meter():
    capture = make_capture()
    capture.time_normalized[1500] = 91234.56
    md = MarkdownFormatter().format([make_record(capture)])
    assert "| 1500 | 91.235 |" in md


def test_markdown_empty_session():
    md = MarkdownFormatter().format([])
    assert "No laps recorded" in md


def test_markdown_write(tmp_path):
    path = tmp_path / "summary.md"
    MarkdownFormatter().write([make_record()], path)
    assert path.read_text(encoding="utf-8").startswith("# Lap capture summary")
