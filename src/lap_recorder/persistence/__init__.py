"""Lap JSON files on disk."""

from lap_recorder.persistence.autosave import AutoSaver, ensure_unique_path, save_lap_json

__all__ = [
    "AutoSaver",
    "ensure_unique_path",
    "save_lap_json",
]
