"""Writing lap JSON files and auto-saving laps as they are stored."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from pathlib import Path

from lap_recorder.capture.export import to_json
from lap_recorder.capture.models import LapRecord

_logger = logging.getLogger(__name__)

_MAX_SUFFIX = 10_000


def ensure_unique_path(path: str | Path) -> Path:
    """Return *path*, or the first free ``name_N.ext`` for N in 2..9999.

    Falls back to a random ``name_<hex>.ext`` if every numbered name is taken.
    """
    path = Path(path)
    if not path.exists():
        return path

    for i in range(2, _MAX_SUFFIX):
        candidate = path.with_name(f"{path.stem}_{i}{path.suffix}")
        if not candidate.exists():
            return candidate

    return path.with_name(f"{path.stem}_{uuid.uuid4().hex}{path.suffix}")


def save_lap_json(record: LapRecord, path: str | Path) -> Path:
    """Write *record* as indented lap JSON to *path* (UTF-8)."""
    path = Path(path)
    path.write_text(to_json(record), encoding="utf-8")
    return path


class AutoSaver:
    """Store callback that writes every stored lap into a folder.

    Args:
        folder: Returns the current auto-save folder (or None).  Read on every
            lap so a folder change takes effect for the next lap.
        enabled: Returns whether auto-save is switched on.

    Failures are logged and never propagate: the lap stays in memory and
    later laps are still attempted.
    """

    def __init__(
        self,
        folder: Callable[[], str | Path | None],
        enabled: Callable[[], bool] = lambda: True,
    ) -> None:
        self._folder = folder
        self._enabled = enabled
        self.saved: list[Path] = []

    def __call__(self, record: LapRecord) -> Path | None:
        if not self._enabled():
            return None

        folder = self._folder()
        if not folder or not Path(folder).is_dir():
            _logger.warning("Auto-save folder not set; lap #%03d kept in memory only.", record.index)
            return None

        try:
            path = save_lap_json(record, ensure_unique_path(Path(folder) / record.suggested_file_name))
        except OSError as exc:
            _logger.warning("Auto-save failed: %s", exc)
            return None

        self.saved.append(path)
        _logger.info("Auto-saved: %s", path)
        return path
