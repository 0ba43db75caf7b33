"""
Configuration for the range-read benchmark.

This module contains all configuration parameters including:
- Object storage endpoint, bucket and region defaults
- Read size defaults
- Client timeouts
- Unit conversion constants
"""

import os
from dataclasses import dataclass
from typing import Optional

# =============================================================================
# OBJECT STORAGE CONFIGURATION
# =============================================================================

# SeaweedFS serves its S3 gateway on port 8333 by default
DEFAULT_ENDPOINT: str = os.getenv("S3_ENDPOINT", "http://localhost:8333")
DEFAULT_BUCKET: str = os.getenv("BUCKET_NAME", "webvideo")
DEFAULT_REGION: str = os.getenv("S3_REGION", "none")

# =============================================================================
# TEST PARAMETERS
# =============================================================================

DEFAULT_READ_SIZE: int = 1 << 18  # 256 KiB per file open

# =============================================================================
# CLIENT TIMEOUTS
# =============================================================================

CONNECT_TIMEOUT_SECONDS: int = 5
READ_TIMEOUT_SECONDS: int = 60

# =============================================================================
# UNIT CONSTANTS
# =============================================================================

BITS_PER_BYTE: int = 8
BITS_PER_MEGABIT: int = 1_000_000
MS_PER_SECOND: int = 1000

# =============================================================================
# CLI DEFAULTS
# =============================================================================

RECORD_FILE_PREFIX: str = "range_read"


class ConfigurationError(ValueError):
    """Raised when the run configuration cannot produce a valid benchmark."""


def validate_read_size(read_size: int) -> int:
    """Return read_size unchanged, or raise ConfigurationError if it is not a positive int."""
    if isinstance(read_size, bool) or not isinstance(read_size, int):
        raise ConfigurationError(f"read size must be an integer, got {read_size!r}")
    if read_size <= 0:
        raise ConfigurationError(f"read size must be positive, got {read_size}")
    return read_size


@dataclass(frozen=True)
class RunConfig:
    """Settings for one benchmark run, fixed at startup."""

    object_key: str
    endpoint: str = DEFAULT_ENDPOINT
    bucket: str = DEFAULT_BUCKET
    region: str = DEFAULT_REGION
    read_size: int = DEFAULT_READ_SIZE
    include_tail: bool = False
    output_dir: Optional[str] = None

    def __post_init__(self):
        if not self.object_key:
            raise ConfigurationError("object key must not be empty")
        if not self.bucket:
            raise ConfigurationError("bucket must not be empty")
        validate_read_size(self.read_size)
