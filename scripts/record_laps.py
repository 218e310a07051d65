"""Record timed laps from the game's UDP telemetry to lap JSON files.

Start the script, drive out of the garage and cross the start line; every
completed lap is stored (and auto-saved when a folder is set).  Ctrl+C stores
the partial lap and stops.

Usage:
    uv run python scripts/record_laps.py --autosave-dir laps/
    uv run python scripts/record_laps.py --port 20778 --no-autosave --summary session.md
"""

from __future__ import annotations

import argparse
import logging
import time

from dotenv import load_dotenv

load_dotenv()

from lap_recorder.capture.detector import LapBoundaryDetector  # noqa: E402
from lap_recorder.capture.session import CaptureSession  # noqa: E402
from lap_recorder.capture.store import CompletedLapStore  # noqa: E402
from lap_recorder.config import load_config, save_config  # noqa: E402
from lap_recorder.persistence.autosave import AutoSaver  # noqa: E402
from lap_recorder.reporting.formatter import (  # noqa: E402
    MarkdownFormatter,
    format_record_label,
    format_stats_line,
)
from lap_recorder.telemetry.parser import SampleParser  # noqa: E402
from lap_recorder.telemetry.source import UdpSampleSource  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Record timed laps from UDP telemetry")
    ap.add_argument("--port", type=int, default=None, help="UDP port to listen on")
    ap.add_argument("--autosave-dir", default=None, help="Folder for auto-saved laps (remembered)")
    ap.add_argument("--no-autosave", action="store_true", help="Do not write lap files")
    ap.add_argument("--summary", default=None, help="Write a Markdown session summary here on exit")
    ap.add_argument("--config", default=None, help="Config file path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    config = load_config(args.config)
    if args.autosave_dir:
        config.auto_save_folder = args.autosave_dir
        save_config(config, args.config)
    config = config.apply_env()
    if args.port is not None:
        config.port = args.port

    store = CompletedLapStore()
    saver = AutoSaver(
        folder=lambda: config.auto_save_folder,
        enabled=lambda: config.auto_save_enabled and not args.no_autosave,
    )
    store.register_callback(saver)
    store.register_callback(
        lambda r: print(f"  {format_record_label(r)}  {format_stats_line(r.stats)}", flush=True)
    )

    detector = LapBoundaryDetector(store, config.detector_config())
    session = CaptureSession(
        UdpSampleSource(port=config.port),
        SampleParser(),
        detector,
        status_every=config.status_every,
    )

    print("Idle. Drive a Time Trial lap; press Ctrl+C to stop.", flush=True)
    session.start()
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()
        if session.is_running:
            session.stop(timeout=10.0)
        if session.is_running:
            print("Warning: capture thread did not stop; the partial lap was not stored.", flush=True)

    records = store.records()
    print(f"\n{len(records)} lap(s) stored, {session.packets} packets, {session.malformed} malformed.")
    for r in records:
        print(f"  {format_record_label(r)}  {format_stats_line(r.stats)}")
    if args.summary:
        MarkdownFormatter().write(records, args.summary)
        print(f"Summary written to {args.summary}")


if __name__ == "__main__":
    main()
