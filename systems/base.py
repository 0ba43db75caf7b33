"""
Base classes for object storage systems used by the range-read benchmark.

An ``ObjectStorageSystem`` is the connection: it looks up object metadata and
opens read handles. An ``ObjectHandle`` is a seekable, readable view of one
object, and is the narrowest interface the benchmark driver needs.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class ObjectNotFoundError(LookupError):
    """Raised when the requested object key does not exist in the bucket."""

    def __init__(self, bucket: str, key: str):
        super().__init__(f"Object not found: s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


class UnexpectedEndOfObject(EOFError):
    """Raised when an object stream ends before the requested bytes were read."""

    def __init__(self, key: str, offset: int, expected: int, received: int):
        super().__init__(
            f"Unexpected end of {key} reading {expected} bytes at offset {offset}: "
            f"got {received} bytes"
        )
        self.key = key
        self.offset = offset
        self.expected = expected
        self.received = received


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata for a stored object."""

    key: str
    size: int
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class ObjectHandle:
    """A read handle for a single object.

    ``read`` may return fewer bytes than requested; callers that need an exact
    byte count must loop. An empty result means the end of the object.
    """

    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        raise NotImplementedError

    async def read(self, size: int) -> bytes:
        raise NotImplementedError

    async def close(self) -> None:
        raise NotImplementedError


class ObjectStorageSystem:
    """Connection to a bucket in an object storage system.

    Implementations are async context managers: the connection is usable
    between ``__aenter__`` and ``__aexit__``.
    """

    def __init__(self, endpoint: str, bucket_name: str):
        self.endpoint = endpoint
        self.bucket_name = bucket_name

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def stat(self, key: str) -> ObjectInfo:
        """Look up the metadata of ``key``."""
        raise NotImplementedError

    async def open(self, key: str) -> ObjectHandle:
        """Open a fresh read handle positioned at the start of ``key``."""
        raise NotImplementedError
