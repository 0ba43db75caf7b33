"""
Tests for read plan construction.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from algorithms.range_read import ReadTask, compute_read_plan
from configuration import ConfigurationError, DEFAULT_READ_SIZE


class TestComputeReadPlan(unittest.TestCase):
    """Offsets, counts and truncation of the read plan."""

    def test_offsets_cover_whole_reads_only(self):
        for file_size, read_size in [(0, 1), (1, 1), (99, 10), (100, 10), (101, 10),
                                     (40_000_000, 256_000), (5, 1024)]:
            plan = compute_read_plan(file_size, read_size)
            offsets = plan.offsets

            self.assertEqual(plan.read_count, file_size // read_size)
            self.assertEqual(len(offsets), file_size // read_size)
            if offsets:
                self.assertEqual(offsets[0], 0)
                self.assertLessEqual(offsets[-1] + read_size, file_size)
            for previous, current in zip(offsets, offsets[1:]):
                self.assertEqual(current - previous, read_size)

    def test_trailing_bytes_skipped_by_default(self):
        plan = compute_read_plan(40_304_641, 65_536)

        self.assertEqual(plan.read_count, 615)
        self.assertEqual(plan.total_bytes, 40_304_640)
        self.assertIsNone(plan.tail)
        self.assertEqual(len(plan), 615)

    def test_include_tail_adds_partial_read(self):
        plan = compute_read_plan(105, 10, include_tail=True)
        tasks = list(plan.tasks())

        self.assertEqual(len(tasks), 11)
        self.assertEqual(tasks[-1], ReadTask(100, 5))
        self.assertEqual(plan.total_bytes, 105)

    def test_include_tail_without_remainder(self):
        plan = compute_read_plan(100, 10, include_tail=True)

        self.assertIsNone(plan.tail)
        self.assertEqual(len(list(plan.tasks())), 10)

    def test_tasks_use_read_size(self):
        tasks = list(compute_read_plan(1000, 250).tasks())

        self.assertEqual(tasks, [ReadTask(0, 250), ReadTask(250, 250),
                                 ReadTask(500, 250), ReadTask(750, 250)])

    def test_zero_read_size_rejected(self):
        with self.assertRaises(ConfigurationError):
            compute_read_plan(1000, 0)

    def test_negative_read_size_rejected(self):
        with self.assertRaises(ConfigurationError):
            compute_read_plan(1000, -DEFAULT_READ_SIZE)

    def test_negative_file_size_rejected(self):
        with self.assertRaises(ConfigurationError):
            compute_read_plan(-1, 10)

    def test_plan_is_deterministic(self):
        first = compute_read_plan(143_654_912, 1 << 18)
        second = compute_read_plan(143_654_912, 1 << 18)

        self.assertEqual(first.offsets, second.offsets)
        self.assertEqual(first.total_bytes, second.total_bytes)


if __name__ == '__main__':
    unittest.main()
