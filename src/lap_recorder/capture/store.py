"""CompletedLapStore — append-only collection of finished laps.

Records are published by the ingestion thread and read by whoever presents
them (CLI summary, auto-save).  The store only ever grows: a long session
keeps every lap in memory until the process exits.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator

from lap_recorder.capture.models import LapRecord

_logger = logging.getLogger(__name__)


class CompletedLapStore:
    """Ordered, append-only store of :class:`LapRecord`.

    :meth:`append` is the only way to publish a record.  Readers on other
    threads take a snapshot with :meth:`records` and see either the full
    record or nothing.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[LapRecord] = []
        self._callbacks: list[Callable[[LapRecord], None]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def next_index(self) -> int:
        """Index the next appended record will carry (1-based)."""
        with self._lock:
            return len(self._records) + 1

    def append(self, record: LapRecord) -> None:
        """Publish *record* and notify callbacks.

        Raises
        ------
        ValueError
            If ``record.index`` is not the next index in sequence.
        """
        with self._lock:
            expected = len(self._records) + 1
            if record.index != expected:
                raise ValueError(
                    f"record index {record.index} out of sequence (expected {expected})"
                )
            self._records.append(record)
            callbacks = list(self._callbacks)

        _logger.info(
            "Lap stored #%03d (%s). time_points=%d",
            record.index,
            record.reason.value,
            len(record.time_normalized),
        )
        for cb in callbacks:
            try:
                cb(record)
            except Exception:
                _logger.exception("Lap store callback failed for lap #%03d", record.index)

    def records(self) -> tuple[LapRecord, ...]:
        """Snapshot of all records in the order they were stored."""
        with self._lock:
            return tuple(self._records)

    def latest(self) -> LapRecord | None:
        """The most recently stored record, or None if the store is empty."""
        with self._lock:
            return self._records[-1] if self._records else None

    def register_callback(self, callback: Callable[[LapRecord], None]) -> None:
        """Register *callback* to be called with every newly stored record."""
        with self._lock:
            self._callbacks.append(callback)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[LapRecord]:
        return iter(self.records())
