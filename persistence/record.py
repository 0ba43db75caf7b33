"""
Per-read record for the range-read benchmark.
"""

import time


class ReadRecord:
    """Data structure for one range read, as persisted."""

    def __init__(self, object_key, range_start, range_len, bytes_read,
                 latency_ms, read_calls, read_size,
                 start_ts: float = None, end_ts: float = None):
        self.ts = time.time()  # Record creation timestamp
        self.object_key = object_key
        self.range_start = range_start
        self.range_len = range_len
        self.bytes = bytes_read
        self.latency_ms = latency_ms
        self.read_calls = read_calls
        self.read_size = read_size
        self.start_ts = start_ts or time.time()
        self.end_ts = end_ts or time.time()

    @classmethod
    def from_result(cls, object_key, read_size, result):
        """Build a record from a ReadResult."""
        return cls(
            object_key=object_key,
            range_start=result.offset,
            range_len=result.bytes_read,
            bytes_read=result.bytes_read,
            latency_ms=result.latency_ms,
            read_calls=result.read_calls,
            read_size=read_size,
            start_ts=result.start_ts,
            end_ts=result.end_ts,
        )
