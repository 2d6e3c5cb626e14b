# src/clients/models.py — v1
"""Typed return values of the cloud-service client interfaces."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from sitestack.core.models import ValidationRecord

# Route53 zone that hosts every CloudFront alias target.
CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"


class BucketInfo(BaseModel):
    """A freshly created bucket."""

    name: str
    arn: str
    location: str | None = None


class HostedZoneInfo(BaseModel):
    """A freshly created public hosted zone."""

    zone_id: str
    name_servers: list[str] = Field(default_factory=list)


class AliasTarget(BaseModel):
    """Route53 alias target (used instead of a literal value)."""

    hosted_zone_id: str = CLOUDFRONT_HOSTED_ZONE_ID
    dns_name: str
    evaluate_target_health: bool = False


class DnsRecord(BaseModel):
    """One record set to UPSERT. Exactly one of value / alias_target is set."""

    name: str
    type: Literal["A", "AAAA", "CNAME", "TXT"]
    ttl: int = 300
    value: str | None = None
    alias_target: AliasTarget | None = None


class CertificateDescription(BaseModel):
    """The parts of a DescribeCertificate answer the pipeline looks at."""

    arn: str
    status: str
    failure_reason: str | None = None
    validation_records: list[ValidationRecord] = Field(default_factory=list)


class FunctionInfo(BaseModel):
    """A CDN edge function (created or published)."""

    name: str
    arn: str | None = None
    etag: str | None = None
    stage: str | None = None


class DistributionInfo(BaseModel):
    """A freshly created CDN distribution."""

    id: str
    arn: str
    domain_name: str
    status: str | None = None
