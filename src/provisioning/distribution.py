# src/provisioning/distribution.py — v1
"""CDN flow: edge rewrite function, origin access control and distribution.

The distribution serves the private bucket through an origin access control,
forces HTTPS and maps missing paths to index.html so that client-side routed
sites work. A custom domain and certificate are attached only when both are
available; otherwise the default CloudFront hostname and certificate are used.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sitestack.clients.base import BaseCdnClient
from sitestack.core.errors import ProvisioningError
from sitestack.pipeline.waiter import SleepFn

logger = logging.getLogger(__name__)

ORIGIN_ID = "S3Origin"
DEFAULT_ROOT_OBJECT = "index.html"
FUNCTION_COMMENT = "Redirects for SPA"

# Viewer-request handler: directory URIs get index.html appended, URIs without
# a file extension are treated as directories.
EDGE_FUNCTION_CODE = """\
function handler(event) {
    var request = event.request;
    var uri = request.uri;

    if (uri.endsWith('/')) {
        request.uri += 'index.html';
    } else if (!uri.includes('.')) {
        request.uri += '/index.html';
    }

    return request;
}
"""


async def create_edge_function(
    client: BaseCdnClient,
    name: str,
    publish_delay_s: float = 1.0,
    sleep: SleepFn = asyncio.sleep,
) -> dict[str, Any]:
    """Create the rewrite function and publish it to the live stage.

    Raises:
        ProvisioningError: Creation returned no ETag to publish with, or
            publishing failed (partial output names the created function).
    """
    created = await client.create_function(
        name, EDGE_FUNCTION_CODE, comment=FUNCTION_COMMENT
    )
    if not created.etag:
        raise ProvisioningError(
            f"function {name} was created without an ETag, cannot publish",
            partial={"function_name": created.name},
        )
    if publish_delay_s > 0:
        await sleep(publish_delay_s)

    try:
        published = await client.publish_function(created.name, created.etag)
    except ProvisioningError as exc:
        exc.partial.setdefault("function_name", created.name)
        exc.partial.setdefault("function_arn", created.arn)
        raise
    function_arn = published.arn or created.arn
    logger.info("Edge function %s published (%s)", created.name, function_arn)
    return {"function_name": created.name, "function_arn": function_arn}


def build_distribution_config(
    *,
    bucket_name: str,
    region: str,
    caller_reference: str,
    origin_access_control_id: str | None = None,
    function_arn: str | None = None,
    domain: str | None = None,
    certificate_arn: str | None = None,
    price_class: str = "PriceClass_100",
) -> dict[str, Any]:
    """Build a CloudFront DistributionConfig for the site bucket.

    Args:
        bucket_name: Origin bucket.
        region: Bucket region (selects the regional S3 endpoint).
        caller_reference: Unique string for request idempotency.
        origin_access_control_id: OAC granting signed access to the bucket.
        function_arn: Viewer-request function, associated only when given.
        domain: Custom domain, used only together with ``certificate_arn``.
        certificate_arn: Certificate for ``domain``.
        price_class: CloudFront price class.
    """
    origin: dict[str, Any] = {
        "Id": ORIGIN_ID,
        "DomainName": f"{bucket_name}.s3.{region}.amazonaws.com",
        "S3OriginConfig": {"OriginAccessIdentity": ""},
    }
    if origin_access_control_id:
        origin["OriginAccessControlId"] = origin_access_control_id

    if function_arn:
        function_associations: dict[str, Any] = {
            "Quantity": 1,
            "Items": [{"FunctionARN": function_arn, "EventType": "viewer-request"}],
        }
    else:
        function_associations = {"Quantity": 0}

    custom_domain = bool(domain and certificate_arn)
    if custom_domain:
        aliases: dict[str, Any] = {"Quantity": 1, "Items": [domain]}
        viewer_certificate: dict[str, Any] = {
            "ACMCertificateArn": certificate_arn,
            "SSLSupportMethod": "sni-only",
            "MinimumProtocolVersion": "TLSv1.2_2021",
        }
    else:
        aliases = {"Quantity": 0}
        viewer_certificate = {"CloudFrontDefaultCertificate": True}

    return {
        "CallerReference": caller_reference,
        "Comment": f"Distribution for {bucket_name}",
        "DefaultRootObject": DEFAULT_ROOT_OBJECT,
        "Enabled": True,
        "Origins": {"Quantity": 1, "Items": [origin]},
        "DefaultCacheBehavior": {
            "TargetOriginId": ORIGIN_ID,
            "ViewerProtocolPolicy": "redirect-to-https",
            "AllowedMethods": {
                "Quantity": 2,
                "Items": ["GET", "HEAD"],
                "CachedMethods": {"Quantity": 2, "Items": ["GET", "HEAD"]},
            },
            "Compress": True,
            "MinTTL": 0,
            "DefaultTTL": 86400,
            "MaxTTL": 31536000,
            "ForwardedValues": {
                "QueryString": False,
                "Cookies": {"Forward": "none"},
                "Headers": {"Quantity": 0},
                "QueryStringCacheKeys": {"Quantity": 0},
            },
            "FunctionAssociations": function_associations,
        },
        "CustomErrorResponses": {
            "Quantity": 1,
            "Items": [
                {
                    "ErrorCode": 404,
                    "ResponsePagePath": f"/{DEFAULT_ROOT_OBJECT}",
                    "ResponseCode": "200",
                    "ErrorCachingMinTTL": 300,
                }
            ],
        },
        "PriceClass": price_class,
        "Logging": {
            "Enabled": False,
            "IncludeCookies": False,
            "Bucket": "",
            "Prefix": "",
        },
        "Aliases": aliases,
        "ViewerCertificate": viewer_certificate,
    }


async def create_distribution(
    client: BaseCdnClient,
    *,
    bucket_name: str,
    region: str,
    caller_reference: str,
    origin_access_control_name: str,
    function_arn: str | None = None,
    domain: str | None = None,
    certificate_arn: str | None = None,
    price_class: str = "PriceClass_100",
) -> dict[str, Any]:
    """Create the origin access control, then the distribution.

    Returns:
        ``{distribution_id, distribution_arn, distribution_domain,
        origin_access_control_id, custom_domain}``.
    """
    oac_id = await client.create_origin_access_control(origin_access_control_name)
    logger.debug("Origin access control %s created", oac_id)

    if domain and not certificate_arn:
        logger.warning(
            "No issued certificate for %s; the distribution will use the "
            "default CloudFront hostname only",
            domain,
        )
    config = build_distribution_config(
        bucket_name=bucket_name,
        region=region,
        caller_reference=caller_reference,
        origin_access_control_id=oac_id,
        function_arn=function_arn,
        domain=domain,
        certificate_arn=certificate_arn,
        price_class=price_class,
    )
    try:
        distribution = await client.create_distribution(config)
    except ProvisioningError as exc:
        exc.partial.setdefault("origin_access_control_id", oac_id)
        raise

    custom_domain = domain if domain and certificate_arn else None
    logger.info(
        "Distribution %s created: https://%s",
        distribution.id, custom_domain or distribution.domain_name,
    )
    return {
        "distribution_id": distribution.id,
        "distribution_arn": distribution.arn,
        "distribution_domain": distribution.domain_name,
        "origin_access_control_id": oac_id,
        "custom_domain": custom_domain,
    }
