"""UdpSampleSource — receives telemetry datagrams from the game over UDP."""

from __future__ import annotations

import logging
import socket
from typing import Any

_logger = logging.getLogger(__name__)

_MAX_DATAGRAM = 2048


class UdpSampleSource:
    """Listens on ``host:port`` and hands out raw datagrams one at a time.

    Parameters
    ----------
    port:
        UDP port the game broadcasts telemetry to.
    host:
        Interface to bind.  ``"0.0.0.0"`` listens on all interfaces.
    timeout:
        Receive timeout in seconds.  Bounds how long :meth:`read_datagram`
        blocks so the ingestion loop can notice a stop request.
    sock:
        A pre-built socket.  Injected for testability; a UDP socket is
        created on :meth:`open` when not provided.
    """

    def __init__(
        self,
        port: int = 20777,
        host: str = "0.0.0.0",
        timeout: float = 1.0,
        sock: Any | None = None,
    ) -> None:
        self.port = port
        self.host = host
        self._timeout = timeout
        self._sock = sock
        self._owns_socket = sock is None
        self.received: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Bind the listening socket."""
        if self._sock is None:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self._sock.bind((self.host, self.port))
            self._owns_socket = True
        self._sock.settimeout(self._timeout)
        _logger.info("Listening on %s:%d", self.host, self.port)

    def read_datagram(self) -> bytes | None:
        """Return the next datagram, or None on timeout or socket error (never raises)."""
        if self._sock is None:
            return None
        try:
            data, _addr = self._sock.recvfrom(_MAX_DATAGRAM)
        except (socket.timeout, TimeoutError):
            return None
        except OSError as exc:
            _logger.debug("UDP receive failed: %s", exc)
            return None
        self.received += 1
        return data

    def close(self) -> None:
        """Close the socket if this source created it."""
        if self._sock is not None and self._owns_socket:
            self._sock.close()
        self._sock = None
