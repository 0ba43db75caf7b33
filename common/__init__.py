"""
Common utilities for the range-read benchmark.
"""

from .metrics_utils import calculate_throughput_mbps
from .network_monitor import NetworkBytesTracker

__all__ = ['calculate_throughput_mbps', 'NetworkBytesTracker']
