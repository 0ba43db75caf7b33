"""
Factory module for creating storage system instances.
"""

import logging

# Suppress boto3/botocore logging BEFORE importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aiobotocore').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)

from configuration import ConfigurationError, RunConfig
from systems.s3 import S3CompatibleSystem

logger = logging.getLogger(__name__)


def create_storage_system(config: RunConfig) -> S3CompatibleSystem:
    """Create the storage connection described by a run configuration.

    Credentials are not part of the run configuration; the session resolves
    them from the environment or the shared AWS credentials file.

    Args:
        config: Run configuration (endpoint, bucket and region are used)

    Returns:
        An unopened S3CompatibleSystem; enter it with ``async with``

    Raises:
        ConfigurationError: If the endpoint is not an http(s) URL
    """
    if not config.endpoint.startswith(("http://", "https://")):
        raise ConfigurationError(f"Unsupported endpoint: {config.endpoint}. Must start with http:// or https://")

    logger.info(f"Connecting to {config.endpoint} (bucket={config.bucket}, region={config.region})")
    return S3CompatibleSystem(
        endpoint=config.endpoint,
        bucket_name=config.bucket,
        region=config.region,
    )
