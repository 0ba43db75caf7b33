"""
Tests for the range-read command line entry point.
"""

import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli.range_read import MISSING_FILENAME_MESSAGE, create_parser, run
from configuration import DEFAULT_READ_SIZE
from fakes import FakeStorageSystem


class TestRangeReadCLI(unittest.TestCase):
    """Argument handling and exit status of the CLI."""

    def run_cli(self, args, storage=None):
        stdout = io.StringIO()
        with patch("cli.range_read.create_storage_system", return_value=storage) as factory:
            with redirect_stdout(stdout):
                status = run(args)
        return status, stdout.getvalue().splitlines(), factory

    def test_defaults(self):
        parsed = create_parser().parse_args(["video.mp4"])

        self.assertEqual(parsed.readsize, DEFAULT_READ_SIZE)
        self.assertEqual(parsed.region, "none")
        self.assertFalse(parsed.include_tail)
        self.assertIsNone(parsed.output_dir)

    def test_missing_filename(self):
        status, lines, factory = self.run_cli([])

        self.assertEqual(status, 1)
        self.assertEqual(lines, [MISSING_FILENAME_MESSAGE])
        factory.assert_not_called()

    def test_zero_readsize_fails_before_connecting(self):
        status, lines, factory = self.run_cli(["--readsize", "0", "video.mp4"])

        self.assertEqual(status, 1)
        self.assertEqual(lines, [])
        factory.assert_not_called()

    def test_successful_run(self):
        storage = FakeStorageSystem(key="my/file.mp4", data=bytes(1 << 20))

        status, lines, factory = self.run_cli(
            ["--endpoint", "http://s3:8333", "--bucket", "webvideo", "my/file.mp4"], storage
        )

        self.assertEqual(status, 0)
        self.assertEqual(len(lines), 5)
        self.assertTrue(lines[-1].startswith(f"Read {1 << 20} bytes in "))
        self.assertTrue(lines[-1].endswith(" Mbps"))
        self.assertTrue(storage.entered)
        self.assertTrue(storage.exited)

        config = factory.call_args.args[0]
        self.assertEqual(config.endpoint, "http://s3:8333")
        self.assertEqual(config.bucket, "webvideo")
        self.assertEqual(config.object_key, "my/file.mp4")

    def test_read_error_exits_nonzero_without_summary(self):
        storage = FakeStorageSystem(key="my/file.mp4", data=bytes(1 << 20), fail_on_open_call=3)

        status, lines, _ = self.run_cli(["my/file.mp4"], storage)

        self.assertEqual(status, 1)
        self.assertEqual(len(lines), 2)
        self.assertTrue(storage.exited)

    def test_missing_object_exits_nonzero(self):
        storage = FakeStorageSystem(key="my/file.mp4", data=bytes(1 << 20))

        status, lines, _ = self.run_cli(["other.mp4"], storage)

        self.assertEqual(status, 1)
        self.assertEqual(lines, [])

    def test_output_dir_writes_parquet(self):
        storage = FakeStorageSystem(key="my/file.mp4", data=bytes(1000))

        with tempfile.TemporaryDirectory() as output_dir:
            status, lines, _ = self.run_cli(
                ["--readsize", "100", "--include-tail", "--output-dir", output_dir, "my/file.mp4"],
                storage,
            )
            files = os.listdir(output_dir)

        self.assertEqual(status, 0)
        self.assertEqual(len(lines), 11)
        self.assertEqual(len(files), 1)
        self.assertTrue(files[0].startswith("range_read_"))
        self.assertTrue(files[0].endswith(".parquet"))


if __name__ == '__main__':
    unittest.main()
