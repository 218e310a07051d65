"""Tests for lap file writing and auto-save."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from lap_recorder.capture.export import to_export_dict
from lap_recorder.persistence import autosave
from lap_recorder.persistence.autosave import AutoSaver, ensure_unique_path, save_lap_json
from tests.capture.conftest import make_record

# ---------------------------------------------------------------------------
# ensure_unique_path
# ---------------------------------------------------------------------------


def test_unique_path_free_name_unchanged(tmp_path):
    path = tmp_path / "lap_001.json"
    assert ensure_unique_path(path) == path


def test_unique_path_adds_numeric_suffix(tmp_path):
    (tmp_path / "lap_001.json").write_text("{}")
    assert ensure_unique_path(tmp_path / "lap_001.json") == tmp_path / "lap_001_2.json"


def test_unique_path_skips_taken_suffixes(tmp_path):
    (tmp_path / "lap_001.json").write_text("{}")
    (tmp_path / "lap_001_2.json").write_text("{}")
    (tmp_path / "lap_001_3.json").write_text("{}")
    assert ensure_unique_path(tmp_path / "lap_001.json") == tmp_path / "lap_001_4.json"


def test_unique_path_random_fallback(tmp_path, monkeypatch):
    # Every numbered candidate "exists"; only a 32-hex suffix is free.
    monkeypatch.setattr(Path, "exists", lambda self: len(self.stem.rsplit("_", 1)[-1]) != 32)
    result = ensure_unique_path(tmp_path / "lap.json")
    suffix = result.stem.rsplit("_", 1)[-1]
    assert len(suffix) == 32
    assert result.suffix == ".json"


# ---------------------------------------------------------------------------
# save_lap_json
# ---------------------------------------------------------------------------


def test_save_lap_json_writes_export(tmp_path):
    record = make_record()
    path = save_lap_json(record, tmp_path / "out.json")
    assert json.loads(path.read_text(encoding="utf-8")) == to_export_dict(record)


# ---------------------------------------------------------------------------
# AutoSaver
# ---------------------------------------------------------------------------


def test_autosaver_writes_suggested_name(tmp_path):
    saver = AutoSaver(folder=lambda: tmp_path)
    path = saver(make_record())
    assert path == tmp_path / "lap_001_20260214_153012.json"
    assert path.exists()
    assert saver.saved == [path]


def test_autosaver_never_overwrites(tmp_path):
    saver = AutoSaver(folder=lambda: str(tmp_path))
    first = saver(make_record())
    second = saver(make_record())
    assert first != second
    assert second.name == "lap_001_20260214_153012_2.json"


def test_autosaver_disabled(tmp_path):
    saver = AutoSaver(folder=lambda: tmp_path, enabled=lambda: False)
    assert saver(make_record()) is None
    assert list(tmp_path.iterdir()) == []


def test_autosaver_without_folder_logs_hint(caplog):
    saver = AutoSaver(folder=lambda: None)
    with caplog.at_level(logging.WARNING, logger="lap_recorder.persistence.autosave"):
        assert saver(make_record()) is None
    assert "folder not set" in caplog.text


def test_autosaver_missing_folder_skips(tmp_path):
    saver = AutoSaver(folder=lambda: tmp_path / "does_not_exist")
    assert saver(make_record()) is None


def test_autosaver_write_failure_is_reported_not_raised(tmp_path, monkeypatch, caplog):
    def fail(record, path):
        raise OSError("disk full")

    monkeypatch.setattr(autosave, "save_lap_json", fail)
    saver = AutoSaver(folder=lambda: tmp_path)
    with caplog.at_level(logging.WARNING, logger="lap_recorder.persistence.autosave"):
        assert saver(make_record()) is None
    assert "Auto-save failed: disk full" in caplog.text
    assert saver.saved == []


def test_autosaver_as_store_callback(tmp_path):
    from lap_recorder.capture.store import CompletedLapStore

    store = CompletedLapStore()
    store.register_callback(AutoSaver(folder=lambda: tmp_path))
    store.append(make_record(index=1))
    store.append(make_record(index=2))
    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == ["lap_001_20260214_153012.json", "lap_002_20260214_153012.json"]
