"""
Persistence of benchmark results.
"""
