"""
Sequential range-read benchmark.

Reads an object as a series of fixed-size range reads, one fresh handle per
read, the way an HTTP server answers independent range requests for a video.
Every read is timed, and the whole loop is timed separately for the aggregate
throughput figure.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

from configuration import ConfigurationError, MS_PER_SECOND, validate_read_size
from common.metrics_utils import calculate_throughput_mbps, percent_through
from systems.base import ObjectStorageSystem, UnexpectedEndOfObject

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Emitter = Callable[[str], None]


@dataclass(frozen=True)
class ReadTask:
    """One range read: ``length`` bytes starting at ``offset``."""

    offset: int
    length: int


@dataclass(frozen=True)
class ReadPlan:
    """Offsets covering an object in ``read_size`` steps.

    The trailing ``file_size % read_size`` bytes are left out unless
    ``tail`` holds a final partial read.
    """

    file_size: int
    read_size: int
    read_count: int
    tail: Optional[ReadTask] = None

    @property
    def offsets(self) -> List[int]:
        return [self.read_size * i for i in range(self.read_count)]

    @property
    def total_bytes(self) -> int:
        total = self.read_size * self.read_count
        if self.tail is not None:
            total += self.tail.length
        return total

    def tasks(self) -> Iterator[ReadTask]:
        for offset in self.offsets:
            yield ReadTask(offset, self.read_size)
        if self.tail is not None:
            yield self.tail

    def __len__(self):
        return self.read_count + (1 if self.tail is not None else 0)


@dataclass
class ReadResult:
    """Outcome of one range read."""

    offset: int
    bytes_read: int
    elapsed_seconds: float
    percent: float
    read_calls: int
    start_ts: float
    end_ts: float

    @property
    def latency_ms(self) -> float:
        return self.elapsed_seconds * MS_PER_SECOND


@dataclass
class RunSummary:
    """Totals for a completed benchmark run."""

    object_key: str
    file_size: int
    read_size: int
    total_bytes: int = 0
    elapsed_seconds: float = 0.0
    results: List[ReadResult] = field(default_factory=list)

    @property
    def read_count(self) -> int:
        return len(self.results)

    @property
    def megabits_per_second(self) -> float:
        return calculate_throughput_mbps(self.total_bytes, self.elapsed_seconds)


def compute_read_plan(file_size: int, read_size: int, include_tail: bool = False) -> ReadPlan:
    """Build the read plan for an object of ``file_size`` bytes.

    Raises:
        ConfigurationError: If read_size is not positive or file_size is negative
    """
    validate_read_size(read_size)
    if file_size < 0:
        raise ConfigurationError(f"file size must not be negative, got {file_size}")

    read_count = file_size // read_size
    remainder = file_size % read_size

    tail = None
    if include_tail and remainder:
        tail = ReadTask(read_size * read_count, remainder)

    return ReadPlan(file_size=file_size, read_size=read_size, read_count=read_count, tail=tail)


def format_read_line(result: ReadResult) -> str:
    return (
        f"Read {result.bytes_read} bytes at offset {result.offset} "
        f"in {result.elapsed_seconds:.3f}s ({result.percent:.1f}%)"
    )


def format_summary_line(summary: RunSummary) -> str:
    return (
        f"Read {summary.total_bytes} bytes in {summary.elapsed_seconds:.3f} seconds "
        f"at {summary.megabits_per_second:f} Mbps"
    )


async def perform_range_read(
    connection: ObjectStorageSystem,
    key: str,
    offset: int,
    size: int,
    total_bytes: int,
    emit: Emitter = print,
    clock: Clock = time.perf_counter,
) -> ReadResult:
    """Read exactly ``size`` bytes of ``key`` at ``offset`` through a fresh handle.

    The transport may return short reads, so the buffer is filled in a loop
    that only ever asks for the bytes still missing. The handle is closed
    whether or not the read succeeds, and any error propagates unchanged.

    Args:
        connection: Open storage connection
        key: Object key
        offset: Start byte position
        size: Number of bytes to read
        total_bytes: Planned bytes for the whole run, used for the progress figure
        emit: Receives the progress line
        clock: Monotonic time source in seconds

    Returns:
        ReadResult for the completed read
    """
    start_ts = time.time()
    start = clock()

    handle = await connection.open(key)
    try:
        await handle.seek(offset)

        buffer = bytearray(size)
        view = memoryview(buffer)
        cursor = 0
        read_calls = 0
        while cursor < size:
            chunk = await handle.read(size - cursor)
            read_calls += 1
            if not chunk:
                raise UnexpectedEndOfObject(key, offset, size, cursor)
            view[cursor:cursor + len(chunk)] = chunk
            cursor += len(chunk)
        view.release()
    finally:
        await handle.close()

    elapsed = clock() - start

    result = ReadResult(
        offset=offset,
        bytes_read=cursor,
        elapsed_seconds=elapsed,
        percent=percent_through(offset, total_bytes),
        read_calls=read_calls,
        start_ts=start_ts,
        end_ts=time.time(),
    )
    logger.debug(f"{key}@{offset}: {read_calls} read calls for {cursor} bytes")
    emit(format_read_line(result))
    return result


async def run_benchmark(
    connection: ObjectStorageSystem,
    key: str,
    read_size: int,
    include_tail: bool = False,
    emit: Emitter = print,
    clock: Clock = time.perf_counter,
    on_result: Optional[Callable[[ReadResult], None]] = None,
) -> RunSummary:
    """Read ``key`` sequentially in ``read_size`` ranges and report throughput.

    The aggregate figure uses one timer around the whole loop, so it includes
    the open and seek cost of every read, not just the time spent in reads.
    The first failing read aborts the run before any summary is emitted.

    Args:
        connection: Open storage connection
        key: Object key
        read_size: Bytes per range read
        include_tail: Also read the final partial segment
        emit: Receives progress and summary lines
        clock: Monotonic time source in seconds
        on_result: Called with each ReadResult as it completes

    Returns:
        RunSummary for the completed run
    """
    validate_read_size(read_size)

    info = await connection.stat(key)
    plan = compute_read_plan(info.size, read_size, include_tail=include_tail)
    logger.info(
        f"{key}: {info.size} bytes, {len(plan)} reads of {read_size} bytes "
        f"({info.size - plan.total_bytes} trailing bytes skipped)"
    )

    summary = RunSummary(object_key=key, file_size=info.size, read_size=read_size)

    start = clock()
    for task in plan.tasks():
        result = await perform_range_read(
            connection, key, task.offset, task.length, plan.total_bytes, emit=emit, clock=clock
        )
        summary.results.append(result)
        summary.total_bytes += result.bytes_read
        if on_result is not None:
            on_result(result)
    summary.elapsed_seconds = clock() - start

    emit(format_summary_line(summary))
    return summary
