# tests/unit/clients/test_client_factory.py — v1
"""Tests for clients/client_factory.py — ClientSet construction."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from sitestack.clients.adapters.acm_certificates import AcmCertificateClient
from sitestack.clients.adapters.cloudfront_cdn import CloudFrontCdnClient
from sitestack.clients.adapters.iam_identity import IamIdentityClient
from sitestack.clients.adapters.route53_dns import Route53DnsClient
from sitestack.clients.adapters.s3_storage import S3StorageClient
from sitestack.clients.client_factory import create_clients
from sitestack.config.settings import Settings


class TestCreateClients:
    def test_builds_all_adapters(self):
        session = MagicMock()
        settings = Settings(_env_file=None, aws_region="eu-west-1", aws_profile="deploy")
        with patch(
            "sitestack.clients.client_factory.create_session", return_value=session,
        ) as create_session:
            clients = create_clients(settings)

        create_session.assert_called_once_with("deploy")
        assert isinstance(clients.storage, S3StorageClient)
        assert isinstance(clients.dns, Route53DnsClient)
        assert isinstance(clients.certificates, AcmCertificateClient)
        assert isinstance(clients.cdn, CloudFrontCdnClient)
        assert isinstance(clients.identity, IamIdentityClient)

        regions = {c.args[0]: c.kwargs["region_name"] for c in session.client.call_args_list}
        assert regions["s3"] == "eu-west-1"
        assert regions["acm"] == "us-east-1"

    def test_region_override_and_endpoint(self):
        session = MagicMock()
        settings = Settings(_env_file=None, aws_endpoint_url="http://localhost:4566")
        with patch("sitestack.clients.client_factory.create_session", return_value=session):
            create_clients(settings, region="ap-southeast-2")

        for call in session.client.call_args_list:
            assert call.kwargs["endpoint_url"] == "http://localhost:4566"
        regions = {c.args[0]: c.kwargs["region_name"] for c in session.client.call_args_list}
        assert regions["s3"] == "ap-southeast-2"
        assert regions["acm"] == "us-east-1"
