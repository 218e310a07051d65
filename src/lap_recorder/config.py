"""Persisted recorder settings.

Settings live in a small JSON file under the user's application-data folder.
``LAP_RECORDER_PORT`` and ``LAP_RECORDER_AUTOSAVE_DIR`` (e.g. from a ``.env``
file loaded by the entry script) override what is on disk.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter

from lap_recorder.capture.detector import DetectorConfig

_logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / "LapRecorder" / "config.json"
    return Path.home() / ".config" / "lap_recorder" / "config.json"


@dataclass
class AppConfig:
    port: int = 20777
    auto_save_enabled: bool = True
    auto_save_folder: str | None = None
    wrap_from_m: float = 1000.0
    wrap_to_m: float = 50.0
    jitter_tolerance_m: float = 2.0
    status_every: int = 600  # datagrams between status log lines

    def detector_config(self) -> DetectorConfig:
        return DetectorConfig(
            wrap_from_m=self.wrap_from_m,
            wrap_to_m=self.wrap_to_m,
            jitter_tolerance_m=self.jitter_tolerance_m,
        )

    def apply_env(self, environ: Mapping[str, str] = os.environ) -> AppConfig:
        """Return a copy with environment overrides applied."""
        updates: dict = {}
        port = environ.get("LAP_RECORDER_PORT")
        if port:
            try:
                updates["port"] = int(port)
            except ValueError:
                _logger.warning("Ignoring LAP_RECORDER_PORT=%r (not a number)", port)
        folder = environ.get("LAP_RECORDER_AUTOSAVE_DIR")
        if folder:
            updates["auto_save_folder"] = folder
        return dataclasses.replace(self, **updates)


_ADAPTER = TypeAdapter(AppConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load settings from *path*; a missing, unreadable or mistyped file gives defaults."""
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return _ADAPTER.validate_python(data)
    except (OSError, ValueError) as exc:
        _logger.warning("Config load failed (%s); using defaults", exc)
        return AppConfig()


def save_config(config: AppConfig, path: str | Path | None = None) -> bool:
    """Write *config* as indented JSON.  Returns False (and logs) on failure."""
    path = Path(path) if path is not None else default_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(dataclasses.asdict(config), indent=2), encoding="utf-8")
    except OSError as exc:
        _logger.warning("Config save failed: %s", exc)
        return False
    return True
