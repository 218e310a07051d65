"""Human-readable output for stored laps."""

from lap_recorder.reporting.formatter import (
    MarkdownFormatter,
    format_record_label,
    format_stats_line,
)

__all__ = [
    "MarkdownFormatter",
    "format_record_label",
    "format_stats_line",
]
