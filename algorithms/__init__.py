"""
Benchmark algorithms.
"""
