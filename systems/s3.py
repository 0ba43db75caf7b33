"""
S3-compatible object storage system (SeaweedFS, MinIO, AWS S3) backed by aioboto3.
"""

import logging
import os
from typing import Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from configuration import CONNECT_TIMEOUT_SECONDS, READ_TIMEOUT_SECONDS
from systems.base import ObjectHandle, ObjectInfo, ObjectNotFoundError, ObjectStorageSystem

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


def _is_not_found(error: ClientError) -> bool:
    error_code = error.response.get("Error", {}).get("Code", "")
    status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    return error_code in NOT_FOUND_CODES or status_code == 404


class S3ObjectReader(ObjectHandle):
    """Seekable reader over one S3 object.

    Behaves like the read-seeker an HTTP file server streams from: nothing is
    fetched until the first read after a seek, which then issues an open-ended
    ranged GET (``bytes=<pos>-``) and streams the body. A seek to a new position
    drops the current body. Each ``read`` returns whatever the transport hands
    back, which is often much less than requested.
    """

    def __init__(self, client, bucket_name: str, key: str, size: int):
        self._client = client
        self.bucket_name = bucket_name
        self.key = key
        self.size = size
        self._position = 0
        self._body = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def tell(self) -> int:
        return self._position

    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._check_open()

        if whence == os.SEEK_SET:
            position = offset
        elif whence == os.SEEK_CUR:
            position = self._position + offset
        elif whence == os.SEEK_END:
            position = self.size + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")

        if position < 0:
            raise ValueError(f"Negative seek position {position} in {self.key}")

        if position != self._position:
            self._release_body()
        self._position = position
        return position

    async def read(self, size: int) -> bytes:
        self._check_open()
        if size < 0:
            raise ValueError(f"Read size must not be negative, got {size}")
        if size == 0 or self._position >= self.size:
            return b""

        if self._body is None:
            range_header = f"bytes={self._position}-"
            logger.debug(f"GET {self.key} Range={range_header}")
            try:
                response = await self._client.get_object(
                    Bucket=self.bucket_name, Key=self.key, Range=range_header
                )
            except ClientError as e:
                if _is_not_found(e):
                    raise ObjectNotFoundError(self.bucket_name, self.key) from e
                raise
            self._body = response["Body"]

        chunk = await self._body.read(size)
        self._position += len(chunk)
        return chunk

    async def close(self) -> None:
        self._release_body()
        self._closed = True

    def _release_body(self):
        if self._body is not None:
            body, self._body = self._body, None
            body.close()

    def _check_open(self):
        if self._closed:
            raise ValueError(f"I/O operation on closed reader for {self.key}")


class S3CompatibleSystem(ObjectStorageSystem):
    """Async S3 connection to one bucket."""

    def __init__(self, endpoint: str, bucket_name: str, region: str, credentials: Optional[dict] = None):
        super().__init__(endpoint=endpoint, bucket_name=bucket_name)
        self.region = region
        credentials = credentials or {}

        self._config = self._create_config()

        # Unset keys fall through to the default AWS credential chain
        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id"),
            aws_secret_access_key=credentials.get("secret_access_key"),
            region_name=region,
        )

        self.client = None
        self._client_context = None

        logger.debug(f"Initialized S3 storage for {endpoint} (bucket={bucket_name}, region={region})")

    def _create_config(self) -> Config:
        """Create the botocore config: path-style addressing and no retries."""
        return Config(
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            # A failed request must surface, not be retried away
            retries={
                "total_max_attempts": 1,
                "mode": "standard",
            },
            s3={
                "addressing_style": "path",
            },
            # SeaweedFS does not return the newer flexible checksums
            request_checksum_calculation="when_required",
            response_checksum_validation="when_required",
        )

    async def __aenter__(self):
        self._client_context = self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        )
        self.client = await self._client_context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client_context is not None:
            await self._client_context.__aexit__(exc_type, exc_val, exc_tb)
            self._client_context = None
            self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    async def stat(self, key: str) -> ObjectInfo:
        client = self._require_client()
        try:
            response = await client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                raise ObjectNotFoundError(self.bucket_name, key) from e
            raise

        return ObjectInfo(
            key=key,
            size=int(response["ContentLength"]),
            etag=response.get("ETag"),
            last_modified=response.get("LastModified"),
        )

    async def open(self, key: str) -> S3ObjectReader:
        info = await self.stat(key)
        return S3ObjectReader(self._require_client(), self.bucket_name, key, info.size)
