# src/clients/client_factory.py — v1
"""Factory: instantiate the boto3-backed ClientSet from configuration."""

from __future__ import annotations

import logging

from sitestack.clients.adapters.acm_certificates import AcmCertificateClient
from sitestack.clients.adapters.boto import create_client, create_session
from sitestack.clients.adapters.cloudfront_cdn import CloudFrontCdnClient
from sitestack.clients.adapters.iam_identity import IamIdentityClient
from sitestack.clients.adapters.route53_dns import Route53DnsClient
from sitestack.clients.adapters.s3_storage import S3StorageClient
from sitestack.clients.base import ClientSet
from sitestack.config.settings import Settings

logger = logging.getLogger(__name__)


def create_clients(settings: Settings, region: str | None = None) -> ClientSet:
    """Create all five cloud clients.

    Args:
        settings: Application settings (profile, endpoint, certificate region).
        region: Region for regional services (defaults to AWS_REGION).

    Returns:
        ClientSet wired to boto3. The certificate client is always bound to
        the CloudFront certificate region.
    """
    region = region or settings.aws_region
    session = create_session(settings.aws_profile)
    endpoint = settings.aws_endpoint_url

    def client(service: str, service_region: str = region):
        return create_client(session, service, service_region, endpoint)

    logger.debug(
        "Creating AWS clients: region=%s certificate_region=%s profile=%s",
        region, settings.certificate_region, settings.aws_profile or "<default>",
    )
    return ClientSet(
        storage=S3StorageClient(client("s3")),
        dns=Route53DnsClient(client("route53")),
        certificates=AcmCertificateClient(client("acm", settings.certificate_region)),
        cdn=CloudFrontCdnClient(client("cloudfront")),
        identity=IamIdentityClient(client("iam")),
    )
