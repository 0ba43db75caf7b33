"""
Shared utilities for benchmark metrics calculations: throughput, progress and latency.
"""

import logging
from typing import Iterable

import pandas as pd

from configuration import BITS_PER_BYTE, BITS_PER_MEGABIT

logger = logging.getLogger(__name__)


def calculate_throughput_mbps(total_bytes: float, duration_seconds: float) -> float:
    """
    Calculate throughput in megabits per second (Mbps) from bytes and duration.

    Args:
        total_bytes: Total bytes transferred
        duration_seconds: Duration in seconds

    Returns:
        Throughput in megabits per second, or 0.0 for a non-positive duration
    """
    if duration_seconds <= 0:
        return 0.0
    return total_bytes * BITS_PER_BYTE / duration_seconds / BITS_PER_MEGABIT


def percent_through(offset: int, total_bytes: int) -> float:
    """Position of ``offset`` as a percentage of ``total_bytes``."""
    if total_bytes <= 0:
        return 0.0
    return 100 * offset / total_bytes


def calculate_latency_stats(data: pd.DataFrame, latency_col: str = 'latency_ms') -> dict:
    """
    Calculate latency statistics (mean and percentiles) from a DataFrame.

    Args:
        data: DataFrame with one row per range read
        latency_col: Column name for latency values (default: 'latency_ms')

    Returns:
        Dictionary with avg, p50, p95, p99 latency statistics
    """
    if len(data) == 0 or latency_col not in data.columns:
        return {
            'avg': 0.0,
            'p50': 0.0,
            'p95': 0.0,
            'p99': 0.0
        }

    latencies = data[latency_col]

    return {
        'avg': float(latencies.mean()),
        'p50': float(latencies.quantile(0.5)),
        'p95': float(latencies.quantile(0.95)),
        'p99': float(latencies.quantile(0.99))
    }


def calculate_chunk_stats(results: Iterable) -> dict:
    """
    Summarize how the transport split range reads into read calls.

    Args:
        results: ReadResult objects from a benchmark run

    Returns:
        Dictionary with total read calls and mean bytes per call
    """
    data = pd.DataFrame(
        [{'bytes': r.bytes_read, 'read_calls': r.read_calls} for r in results],
        columns=['bytes', 'read_calls'],
    )
    total_calls = int(data['read_calls'].sum())
    if total_calls == 0:
        return {'read_calls': 0, 'mean_chunk_bytes': 0.0}

    return {
        'read_calls': total_calls,
        'mean_chunk_bytes': float(data['bytes'].sum()) / total_calls,
    }
