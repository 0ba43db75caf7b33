"""
Sequential range-read benchmark against a single object.

Mimics a web server streaming video out of an S3-compatible store: each read
opens the object, seeks to the next offset and reads one fixed-size range.
Watch the network load and latency of the storage servers while this runs.
"""

import argparse
import logging
import os
import sys

import uvloop

# Ensure project root is in path (for running as script)
# When run as module (python -m cli.range_read), this is not needed
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from configuration import (
    DEFAULT_BUCKET,
    DEFAULT_ENDPOINT,
    DEFAULT_READ_SIZE,
    DEFAULT_REGION,
    RunConfig,
)
from algorithms.range_read import RunSummary, run_benchmark
from common.metrics_utils import calculate_chunk_stats, calculate_latency_stats
from common.network_monitor import NetworkBytesTracker, NetworkUsage
from common.storage_factory import create_storage_system
from persistence.parquet import ParquetPersistence, records_to_dataframe
from persistence.record import ReadRecord

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )
logger = logging.getLogger(__name__)

MISSING_FILENAME_MESSAGE = "Please provide a filename, and optionally --endpoint= and --bucket= args"


class RangeReadRunner:
    """Runs one range-read benchmark described by a RunConfig."""

    def __init__(self, config: RunConfig, emit=print):
        self.config = config
        self.emit = emit
        self.persistence = None
        self.network_tracker = NetworkBytesTracker()

        if config.output_dir:
            self.persistence = ParquetPersistence(config.output_dir)

    def _store_result(self, result):
        if self.persistence is not None:
            self.persistence.store_record(
                ReadRecord.from_result(self.config.object_key, self.config.read_size, result)
            )

    async def run(self) -> RunSummary:
        """Connect, run the benchmark and report. Errors propagate to the caller."""
        storage_system = create_storage_system(self.config)

        async with storage_system:
            self.network_tracker.start()
            summary = await run_benchmark(
                storage_system,
                self.config.object_key,
                self.config.read_size,
                include_tail=self.config.include_tail,
                emit=self.emit,
                on_result=self._store_result,
            )
            usage = self.network_tracker.stop()

        self._report(summary, usage)

        if self.persistence is not None:
            record_file = self.persistence.save_to_file()
            if record_file:
                logger.info(f"Per-read results saved to: {record_file}")

        return summary

    def _report(self, summary: RunSummary, usage: NetworkUsage = None):
        """Log latency, chunking and host network figures for a finished run."""
        if not summary.results:
            logger.warning(
                f"{summary.object_key} is smaller than one read of {summary.read_size} bytes; nothing was read"
            )
            return

        records = [ReadRecord.from_result(summary.object_key, summary.read_size, r) for r in summary.results]
        latency = calculate_latency_stats(records_to_dataframe(records))
        logger.info(
            f"Latency: avg {latency['avg']:.1f} ms, p50 {latency['p50']:.1f} ms, "
            f"p95 {latency['p95']:.1f} ms, p99 {latency['p99']:.1f} ms"
        )

        chunks = calculate_chunk_stats(summary.results)
        logger.info(
            f"Transport: {chunks['read_calls']} read calls, "
            f"{chunks['mean_chunk_bytes']:.0f} bytes per call on average"
        )

        if usage is not None:
            logger.info(
                f"Host network: received {usage.bytes_recv} bytes for {summary.total_bytes} requested "
                f"({usage.receive_ratio(summary.total_bytes):.2f}x)"
            )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Sequential S3 range-read benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 256 kB reads (default) of one object
  range-read-bench --endpoint http://s3:8333 --bucket webvideo my/file/name.mp4

  # 1 MB reads, keeping per-read results
  range-read-bench --readsize 1048576 --output-dir results my/file/name.mp4
        """
    )
    parser.add_argument("--endpoint", default=DEFAULT_ENDPOINT,
                        help=f"S3 API endpoint (default: {DEFAULT_ENDPOINT})")
    parser.add_argument("--bucket", default=DEFAULT_BUCKET,
                        help=f"Bucket to read from (default: {DEFAULT_BUCKET})")
    parser.add_argument("--region", default=DEFAULT_REGION,
                        help=f"Region passed to the S3 client (default: {DEFAULT_REGION})")
    parser.add_argument("--readsize", type=int, default=DEFAULT_READ_SIZE,
                        help=f"Number of bytes to read per file open (default: {DEFAULT_READ_SIZE})")
    parser.add_argument("--include-tail", action="store_true",
                        help="Also read the final partial segment of the object")
    parser.add_argument("--output-dir", default=None,
                        help="Directory to save per-read results as Parquet")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("filename", nargs="?",
                        help="Object key to read")
    return parser


def run(args=None) -> int:
    """Run the CLI with the given arguments and return the exit status."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.filename:
        print(MISSING_FILENAME_MESSAGE)
        return 1

    if parsed_args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = RunConfig(
            object_key=parsed_args.filename,
            endpoint=parsed_args.endpoint,
            bucket=parsed_args.bucket,
            region=parsed_args.region,
            read_size=parsed_args.readsize,
            include_tail=parsed_args.include_tail,
            output_dir=parsed_args.output_dir,
        )
        runner = RangeReadRunner(config)
        uvloop.run(runner.run())
        return 0

    except KeyboardInterrupt:
        logger.info("Benchmark interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Benchmark failed: {e}")
        return 1


def main():
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
