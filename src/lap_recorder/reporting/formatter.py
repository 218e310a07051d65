"""Text output for stored laps: list labels, stats lines, Markdown summary."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from lap_recorder.capture.export import export_stats
from lap_recorder.capture.models import LapRecord, LapStats


def format_record_label(record: LapRecord) -> str:
    """``Lap #003 @ 14:02:11 (lap complete)``"""
    return f"Lap #{record.index:03d} @ {record.captured_at:%H:%M:%S} ({record.reason.value})"


def format_stats_line(stats: LapStats) -> str:
    """One-line summary using the same rounding as the lap JSON."""
    s = export_stats(stats)
    return (
        f"Top {s['speed_top']} kph | Avg {s['speed_average']:.1f} kph | "
        f"Throttle {s['throttle_average']}% | Brake {s['brake_average']}%"
    )


def _lap_time_s(record: LapRecord) -> float | None:
    if not record.time_normalized:
        return None
    last_meter = max(record.time_normalized)
    return record.time_normalized[last_meter] / 1000.0


class MarkdownFormatter:
    """Format a session's stored laps as a Markdown table."""

    def format(self, records: Iterable[LapRecord]) -> str:
        """Return the full Markdown summary as a string."""
        records = list(records)
        lines = [
            "# Lap capture summary",
            "",
            f"**Laps stored**: {len(records)}",
            "",
        ]
        if not records:
            lines += ["_No laps recorded._", ""]
            return "\n".join(lines)

        lines += [
            "| Lap | Captured | Reason | Distance (m) | Lap time (s) | Top (kph) | Avg (kph) | Throttle | Brake | File |",
            "|-----|----------|--------|--------------|--------------|-----------|-----------|----------|-------|------|",
        ]
        for r in records:
            s = export_stats(r.stats)
            lap_time = _lap_time_s(r)
            lap_time_str = f"{lap_time:.3f}" if lap_time is not None else "-"
            distance = max(r.time_normalized) if r.time_normalized else 0
            lines.append(
                f"| {r.index:03d} | {r.captured_at:%H:%M:%S} | {r.reason.value} | "
                f"{distance} | {lap_time_str} | {s['speed_top']} | {s['speed_average']:.1f} | "
                f"{s['throttle_average']}% | {s['brake_average']}% | {r.suggested_file_name} |"
            )
        lines.append("")
        return "\n".join(lines)

    def write(self, records: Iterable[LapRecord], path: str | Path) -> None:
        """Write the summary to *path* (UTF-8)."""
        Path(path).write_text(self.format(records), encoding="utf-8")
