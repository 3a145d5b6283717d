"""S3-compatible object store adapter."""

import logging

import boto3
import botocore.config
from botocore.exceptions import BotoCoreError, ClientError

from ._exceptions import TransientStoreError
from ._models import ObjectRef

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """
    List and range-read log segments in an S3 bucket.

    Supports AWS S3 and any S3-compatible store (MinIO, LocalStack, ...) through `endpoint_url`.
    Every botocore failure, including connect and read timeouts, is raised as a `TransientStoreError`.
    """

    def __init__(
        self,
        *,
        bucket: str,
        client=None,
        endpoint_url: str | None = None,
        connect_timeout_in_seconds: float = 10.0,
        read_timeout_in_seconds: float = 30.0,
    ):
        self.bucket = bucket

        if client is None:
            config = botocore.config.Config(
                connect_timeout=connect_timeout_in_seconds,
                read_timeout=read_timeout_in_seconds,
                retries={"max_attempts": 3, "mode": "standard"},
            )
            client = boto3.client("s3", endpoint_url=endpoint_url, config=config)
            logger.debug(
                "Created S3 client for bucket '%s' with endpoint: %s", self.bucket, endpoint_url or "default"
            )
        self.client = client

    def list_objects(self, prefix: str, recursive: bool = True) -> list[ObjectRef]:
        paginate_kwargs = dict(Bucket=self.bucket, Prefix=prefix)
        if recursive is False:
            paginate_kwargs["Delimiter"] = "/"

        # Pages are consumed eagerly so that a failure on any page fails the whole listing
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            object_refs = [
                ObjectRef(identity=content["Key"], modified=content.get("LastModified"), size=content.get("Size", 0))
                for page in paginator.paginate(**paginate_kwargs)
                for content in page.get("Contents", [])
            ]
        except (BotoCoreError, ClientError) as exception:
            raise TransientStoreError(f"Listing 's3://{self.bucket}/{prefix}' failed: {exception}") from exception

        return object_refs

    def read_range(self, identity: str, offset: int, length: int) -> bytes:
        byte_range = f"bytes={offset}-{offset + length - 1}"
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=identity, Range=byte_range)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exception:
            raise TransientStoreError(
                f"Reading {byte_range} of 's3://{self.bucket}/{identity}' failed: {exception}"
            ) from exception
