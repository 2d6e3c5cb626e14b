# src/provisioning/storage.py — v1
"""Bucket creation and the bucket policy granting the CDN read access."""

from __future__ import annotations

import logging
from typing import Any

from sitestack.clients.base import BaseStorageClient

logger = logging.getLogger(__name__)


async def create_bucket(
    client: BaseStorageClient, name: str, region: str
) -> dict[str, Any]:
    """Create the private content bucket.

    Returns:
        ``{bucket_name, bucket_arn, bucket_location}``.
    """
    bucket = await client.create_bucket(name, region)
    logger.info("Bucket %s created in %s", bucket.name, region)
    return {
        "bucket_name": bucket.name,
        "bucket_arn": bucket.arn,
        "bucket_location": bucket.location,
    }


def build_bucket_policy(bucket_name: str, distribution_arn: str) -> dict[str, Any]:
    """Policy letting only the given distribution read objects."""
    return {
        "Version": "2008-10-17",
        "Id": "PolicyForCloudFrontPrivateContent",
        "Statement": [
            {
                "Sid": "AllowCloudFrontServicePrincipal",
                "Effect": "Allow",
                "Principal": {"Service": "cloudfront.amazonaws.com"},
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket_name}/*",
                "Condition": {
                    "StringEquals": {"AWS:SourceArn": distribution_arn},
                },
            }
        ],
    }


async def update_bucket_policy(
    client: BaseStorageClient, bucket_name: str, distribution_arn: str
) -> dict[str, Any]:
    """Attach the distribution read policy to the bucket."""
    policy = build_bucket_policy(bucket_name, distribution_arn)
    await client.put_bucket_policy(bucket_name, policy)
    logger.info("Bucket policy updated for %s", bucket_name)
    return {"bucket_name": bucket_name, "bucket_policy": policy}
