# src/clients/base.py — v1
"""Abstract cloud-service client interfaces, one per resource kind.

Implementations raise sitestack.core.errors.RemoteCallError (or its
ResourceAlreadyExists subclass) for every failed remote call. The boto3
adapters live in clients/adapters; tests use in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from sitestack.clients.models import (
    BucketInfo,
    CertificateDescription,
    DistributionInfo,
    DnsRecord,
    FunctionInfo,
    HostedZoneInfo,
)


class BaseStorageClient(ABC):
    """Object storage (buckets and bucket policies)."""

    @abstractmethod
    async def create_bucket(self, name: str, region: str) -> BucketInfo:
        """Create a private bucket."""

    @abstractmethod
    async def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        """Replace the bucket policy."""


class BaseDnsClient(ABC):
    """Public DNS hosting."""

    @abstractmethod
    async def create_hosted_zone(
        self, domain: str, caller_reference: str
    ) -> HostedZoneInfo:
        """Create a public hosted zone for the domain."""

    @abstractmethod
    async def upsert_records(
        self, zone_id: str, records: list[DnsRecord], comment: str = ""
    ) -> None:
        """Create or replace record sets in one change batch."""


class BaseCertificateClient(ABC):
    """TLS certificate authority."""

    @abstractmethod
    async def request_certificate(self, domain: str) -> str:
        """Request a DNS-validated certificate, return its ARN."""

    @abstractmethod
    async def describe_certificate(self, arn: str) -> CertificateDescription:
        """Return status and (once available) validation records."""


class BaseCdnClient(ABC):
    """CDN: edge functions, origin access controls and distributions."""

    @abstractmethod
    async def create_function(
        self, name: str, code: str, comment: str = ""
    ) -> FunctionInfo:
        """Create an edge function in the development stage."""

    @abstractmethod
    async def publish_function(self, name: str, etag: str) -> FunctionInfo:
        """Publish a function to the live stage."""

    @abstractmethod
    async def create_origin_access_control(self, name: str) -> str:
        """Create an S3 origin access control, return its ID."""

    @abstractmethod
    async def create_distribution(self, config: dict[str, Any]) -> DistributionInfo:
        """Create a distribution from a full DistributionConfig."""


class BaseIdentityClient(ABC):
    """IAM: OIDC providers, policies and roles."""

    @abstractmethod
    async def list_oidc_providers(self) -> list[str]:
        """Return the ARNs of all OIDC providers in the account."""

    @abstractmethod
    async def get_oidc_provider_url(self, arn: str) -> str:
        """Return the issuer URL of a provider."""

    @abstractmethod
    async def create_oidc_provider(
        self, url: str, client_ids: list[str], thumbprints: list[str]
    ) -> str:
        """Create a provider, return its ARN."""

    @abstractmethod
    async def create_policy(self, name: str, document: dict[str, Any]) -> str:
        """Create a managed policy, return its ARN."""

    @abstractmethod
    async def create_role(self, name: str, trust_document: dict[str, Any]) -> str:
        """Create a role, return its ARN."""

    @abstractmethod
    async def attach_role_policy(self, role_name: str, policy_arn: str) -> None:
        """Attach a managed policy to a role."""


@dataclass
class ClientSet:
    """The five clients a provisioning run talks to."""

    storage: BaseStorageClient
    dns: BaseDnsClient
    certificates: BaseCertificateClient
    cdn: BaseCdnClient
    identity: BaseIdentityClient
