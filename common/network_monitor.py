"""
Host network accounting around a benchmark run.

Compares bytes the benchmark asked for against bytes the network interfaces
actually received, to tell client-side over-reading apart from amplification
inside the storage cluster.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import psutil

logger = logging.getLogger(__name__)


@dataclass
class NetworkUsage:
    """Network bytes observed on this host between two samples."""

    bytes_recv: int = 0
    bytes_sent: int = 0

    def receive_ratio(self, bytes_requested: int) -> float:
        """Received bytes per requested byte; 1.0 means no client-side overhead."""
        if bytes_requested <= 0:
            return 0.0
        return self.bytes_recv / bytes_requested


class NetworkBytesTracker:
    """Samples host NIC counters with psutil.

    Counters are host-wide, so other traffic on the machine is included.
    """

    def __init__(self):
        self._start = None

    def start(self) -> None:
        self._start = psutil.net_io_counters()

    def stop(self) -> Optional[NetworkUsage]:
        """Return usage since ``start``, or None if the counters are unavailable."""
        if self._start is None:
            return None

        end = psutil.net_io_counters()
        start, self._start = self._start, None
        if end is None:
            return None

        return NetworkUsage(
            bytes_recv=end.bytes_recv - start.bytes_recv,
            bytes_sent=end.bytes_sent - start.bytes_sent,
        )
