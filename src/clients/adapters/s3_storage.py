# src/clients/adapters/s3_storage.py — v1
"""S3 implementation of BaseStorageClient."""

from __future__ import annotations

import json
import logging
from typing import Any

from sitestack.clients.adapters.boto import remote_call
from sitestack.clients.base import BaseStorageClient
from sitestack.clients.models import BucketInfo

logger = logging.getLogger(__name__)

# Buckets in this region must not carry a LocationConstraint.
_DEFAULT_REGION = "us-east-1"


class S3StorageClient(BaseStorageClient):
    """Bucket operations through a boto3 S3 client."""

    def __init__(self, client: Any) -> None:
        self._s3 = client

    async def create_bucket(self, name: str, region: str) -> BucketInfo:
        kwargs: dict[str, Any] = {"Bucket": name}
        if region and region != _DEFAULT_REGION:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
        with remote_call("CreateBucket"):
            response = self._s3.create_bucket(**kwargs)
        logger.debug("S3 bucket created: %s (%s)", name, region)
        return BucketInfo(
            name=name,
            arn=f"arn:aws:s3:::{name}",
            location=response.get("Location"),
        )

    async def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        with remote_call("PutBucketPolicy"):
            self._s3.put_bucket_policy(Bucket=name, Policy=json.dumps(policy))
