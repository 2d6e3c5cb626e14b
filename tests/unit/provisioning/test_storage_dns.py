# tests/unit/provisioning/test_storage_dns.py — v1
"""Tests for provisioning/storage.py and provisioning/dns.py."""

from __future__ import annotations

import logging

import pytest

from sitestack.clients.models import CLOUDFRONT_HOSTED_ZONE_ID
from sitestack.core.models import ValidationRecord
from sitestack.provisioning.dns import (
    create_alias_records,
    create_hosted_zone,
    create_validation_records,
)
from sitestack.provisioning.storage import (
    build_bucket_policy,
    create_bucket,
    update_bucket_policy,
)


class TestStorage:
    @pytest.mark.asyncio
    async def test_create_bucket(self, storage_client):
        output = await create_bucket(storage_client, "mysite-123456", "eu-west-1")
        assert output == {
            "bucket_name": "mysite-123456",
            "bucket_arn": "arn:aws:s3:::mysite-123456",
            "bucket_location": "/mysite-123456",
        }
        assert storage_client.buckets == {"mysite-123456": "eu-west-1"}

    def test_bucket_policy_document(self):
        policy = build_bucket_policy("b", "arn:dist")
        assert policy["Version"] == "2008-10-17"
        statement = policy["Statement"][0]
        assert statement["Principal"] == {"Service": "cloudfront.amazonaws.com"}
        assert statement["Action"] == "s3:GetObject"
        assert statement["Resource"] == "arn:aws:s3:::b/*"
        assert statement["Condition"] == {"StringEquals": {"AWS:SourceArn": "arn:dist"}}

    @pytest.mark.asyncio
    async def test_update_bucket_policy(self, storage_client):
        await update_bucket_policy(storage_client, "b", "arn:dist")
        assert storage_client.policies["b"] == build_bucket_policy("b", "arn:dist")


class TestDns:
    @pytest.mark.asyncio
    async def test_hosted_zone_id_normalized_and_name_servers_logged(self, dns_client, caplog):
        with caplog.at_level(logging.INFO, logger="sitestack"):
            output = await create_hosted_zone(dns_client, "example.com", "ref-1")
        assert output["hosted_zone_id"] == "Z0001"
        assert output["name_servers"] == ["ns-1.awsdns-01.org", "ns-2.awsdns-02.net"]
        assert "ns-1.awsdns-01.org" in caplog.text

    @pytest.mark.asyncio
    async def test_validation_records_upserted(self, dns_client):
        records = [ValidationRecord(name="_a.example.com.", type="CNAME", value="_b.acm.")]
        output = await create_validation_records(dns_client, "Z0001", records)
        assert output == {"validation_record_names": ["_a.example.com."]}
        zone_id, record = dns_client.records[0]
        assert zone_id == "Z0001"
        assert (record.type, record.ttl, record.value) == ("CNAME", 300, "_b.acm.")

    @pytest.mark.asyncio
    async def test_no_validation_records_rejected(self, dns_client):
        with pytest.raises(ValueError):
            await create_validation_records(dns_client, "Z0001", [])

    @pytest.mark.asyncio
    async def test_alias_records(self, dns_client):
        await create_alias_records(dns_client, "Z0001", "example.com", "d1.cloudfront.net")
        types = [r.type for _, r in dns_client.records]
        assert types == ["A", "AAAA"]
        for _, record in dns_client.records:
            assert record.alias_target.dns_name == "d1.cloudfront.net"
            assert record.alias_target.hosted_zone_id == CLOUDFRONT_HOSTED_ZONE_ID == "Z2FDTNDATAQYW2"
