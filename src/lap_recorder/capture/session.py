"""CaptureSession — the ingestion loop feeding the boundary detector.

One background thread reads datagrams, decodes them, and hands each sample to
the detector strictly in order.  The stop flag is only checked between
samples, so a capture is never left half-updated.
"""

from __future__ import annotations

import logging
import threading

from lap_recorder.capture.detector import LapBoundaryDetector
from lap_recorder.capture.models import FinalizeReason, LapRecord
from lap_recorder.telemetry.parser import SampleDecodeError

_logger = logging.getLogger(__name__)


class CaptureSession:
    """Runs the sample source → detector pipeline on a background thread.

    Parameters
    ----------
    source:
        Object with ``open()``, ``read_datagram() -> bytes | None`` and
        ``close()``.
    parser:
        Object with ``parse_bytes(datagram: bytes) -> Sample``.
    detector:
        The :class:`LapBoundaryDetector` receiving the samples.
    status_every:
        Log a status line every *status_every* datagrams (0 disables).
    """

    def __init__(
        self,
        source,
        parser,
        detector: LapBoundaryDetector,
        status_every: int = 600,
    ) -> None:
        self._source = source
        self._parser = parser
        self._detector = detector
        self._status_every = status_every
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._finalized_on_stop = False
        self.packets: int = 0
        self.malformed: int = 0
        self.errors: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    @property
    def detector(self) -> LapBoundaryDetector:
        return self._detector

    def start(self) -> None:
        """Arm the detector and start listening.  No-op if already running."""
        if self._thread is not None:
            return
        self.packets = 0
        self.malformed = 0
        self.errors = 0
        self._finalized_on_stop = False
        self._detector.arm()
        self._source.open()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="LapCapture")
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> LapRecord | None:
        """Stop listening and store any partial lap as a manual stop.

        The partial lap is finalized once per session, after the ingestion
        thread has exited.  If the thread is still running after *timeout*
        nothing is finalized and ``stop()`` may be called again.  Returns the
        stored record, if any.
        """
        if self._thread is None:
            return None
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            _logger.warning("Ingestion thread did not stop within %.1fs", timeout)
            return None
        self._thread = None
        self._source.close()

        record = None
        if not self._finalized_on_stop:
            self._finalized_on_stop = True
            record = self._detector.finalize(FinalizeReason.MANUAL_STOP)
        _logger.info(
            "Stopped. packets=%d completed=%d", self.packets, len(self._detector.store)
        )
        return record

    def process_datagram(self, datagram: bytes) -> bool:
        """Decode and apply one datagram.  Malformed input is dropped (returns False)."""
        self.packets += 1
        try:
            sample = self._parser.parse_bytes(datagram)
        except SampleDecodeError as exc:
            self.malformed += 1
            _logger.debug("Dropped malformed datagram: %s", exc)
            return False

        applied = self._detector.process(sample)

        if self._status_every and self.packets % self._status_every == 0:
            capture = self._detector.capture
            _logger.info(
                "Packets=%d time_points=%d speed_points=%d completed=%d",
                self.packets,
                len(capture.time_normalized),
                len(capture.speed),
                len(self._detector.store),
            )
        return applied

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            datagram = self._source.read_datagram()
            if not datagram:
                continue
            try:
                self.process_datagram(datagram)
            except Exception:
                self.errors += 1
                _logger.exception("Dropped datagram after processing error")
