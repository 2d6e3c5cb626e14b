# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides in-memory fake cloud clients, a recording observer, settings and
sample requests. No network access: every remote call is served from memory.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from sitestack.clients.base import (
    BaseCdnClient,
    BaseCertificateClient,
    BaseDnsClient,
    BaseIdentityClient,
    BaseStorageClient,
    ClientSet,
)
from sitestack.clients.models import (
    BucketInfo,
    CertificateDescription,
    DistributionInfo,
    DnsRecord,
    FunctionInfo,
    HostedZoneInfo,
)
from sitestack.config.settings import Settings
from sitestack.core.errors import RemoteCallError, ResourceAlreadyExists
from sitestack.core.models import ProvisioningRequest, ValidationRecord
from sitestack.logging.context import clear_context


# === FAKE CLIENTS ===


class _FailureMixin:
    """Raise a configured exception when a named method is called."""

    def __init__(self) -> None:
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        error = self.errors.get(method)
        if error is not None:
            raise error


class FakeStorageClient(_FailureMixin, BaseStorageClient):
    def __init__(self) -> None:
        super().__init__()
        self.buckets: dict[str, str] = {}
        self.policies: dict[str, dict[str, Any]] = {}

    async def create_bucket(self, name: str, region: str) -> BucketInfo:
        self._enter("create_bucket")
        if name in self.buckets:
            raise ResourceAlreadyExists("CreateBucket", "BucketAlreadyExists", name)
        self.buckets[name] = region
        return BucketInfo(name=name, arn=f"arn:aws:s3:::{name}", location=f"/{name}")

    async def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        self._enter("put_bucket_policy")
        self.policies[name] = policy


class FakeDnsClient(_FailureMixin, BaseDnsClient):
    def __init__(self) -> None:
        super().__init__()
        self.zones: dict[str, str] = {}
        self.records: list[tuple[str, DnsRecord]] = []

    async def create_hosted_zone(
        self, domain: str, caller_reference: str
    ) -> HostedZoneInfo:
        self._enter("create_hosted_zone")
        zone_id = f"Z{len(self.zones) + 1:04d}"
        self.zones[zone_id] = domain
        return HostedZoneInfo(
            zone_id=f"/hostedzone/{zone_id}",
            name_servers=["ns-1.awsdns-01.org", "ns-2.awsdns-02.net"],
        )

    async def upsert_records(
        self, zone_id: str, records: list[DnsRecord], comment: str = ""
    ) -> None:
        self._enter("upsert_records")
        self.records.extend((zone_id, r) for r in records)


class FakeCertificateClient(_FailureMixin, BaseCertificateClient):
    """Scripted certificate authority.

    Args:
        statuses: Status returned by successive describe calls; the last one
            repeats forever.
        records_from_call: 1-based describe call from which validation records
            are exposed (None: never).
        failure_reason: Reported alongside a FAILED status.
    """

    def __init__(
        self,
        statuses: list[str] | None = None,
        records_from_call: int | None = 1,
        failure_reason: str | None = None,
    ) -> None:
        super().__init__()
        self.statuses = statuses or ["PENDING_VALIDATION", "ISSUED"]
        self.records_from_call = records_from_call
        self.failure_reason = failure_reason
        self.describe_calls = 0
        self.requested: list[str] = []

    async def request_certificate(self, domain: str) -> str:
        self._enter("request_certificate")
        self.requested.append(domain)
        return f"arn:aws:acm:us-east-1:123456789012:certificate/{len(self.requested)}"

    async def describe_certificate(self, arn: str) -> CertificateDescription:
        self._enter("describe_certificate")
        self.describe_calls += 1
        index = min(self.describe_calls, len(self.statuses)) - 1
        status = self.statuses[index]
        records: list[ValidationRecord] = []
        if self.records_from_call is not None and self.describe_calls >= self.records_from_call:
            domain = self.requested[-1] if self.requested else "example.com"
            records = [ValidationRecord(
                name=f"_abc123.{domain}.",
                type="CNAME",
                value="_xyz789.acm-validations.aws.",
            )]
        return CertificateDescription(
            arn=arn,
            status=status,
            failure_reason=self.failure_reason if status == "FAILED" else None,
            validation_records=records,
        )


class FakeCdnClient(_FailureMixin, BaseCdnClient):
    def __init__(self) -> None:
        super().__init__()
        self.functions: dict[str, str] = {}
        self.published: list[tuple[str, str]] = []
        self.origin_access_controls: list[str] = []
        self.distribution_configs: list[dict[str, Any]] = []

    async def create_function(
        self, name: str, code: str, comment: str = ""
    ) -> FunctionInfo:
        self._enter("create_function")
        self.functions[name] = code
        return FunctionInfo(
            name=name,
            arn=f"arn:aws:cloudfront::123456789012:function/{name}",
            etag="ETAG1",
            stage="DEVELOPMENT",
        )

    async def publish_function(self, name: str, etag: str) -> FunctionInfo:
        self._enter("publish_function")
        self.published.append((name, etag))
        return FunctionInfo(
            name=name,
            arn=f"arn:aws:cloudfront::123456789012:function/{name}",
            stage="LIVE",
        )

    async def create_origin_access_control(self, name: str) -> str:
        self._enter("create_origin_access_control")
        self.origin_access_controls.append(name)
        return f"OAC{len(self.origin_access_controls)}"

    async def create_distribution(self, config: dict[str, Any]) -> DistributionInfo:
        self._enter("create_distribution")
        self.distribution_configs.append(config)
        dist_id = f"E{len(self.distribution_configs):04d}"
        return DistributionInfo(
            id=dist_id,
            arn=f"arn:aws:cloudfront::123456789012:distribution/{dist_id}",
            domain_name=f"d{len(self.distribution_configs)}abc.cloudfront.net",
            status="InProgress",
        )


class FakeIdentityClient(_FailureMixin, BaseIdentityClient):
    def __init__(self, providers: dict[str, str] | None = None) -> None:
        super().__init__()
        # arn -> url as IAM reports it (no scheme)
        self.providers: dict[str, str] = dict(providers or {})
        self.policies: dict[str, dict[str, Any]] = {}
        self.roles: dict[str, dict[str, Any]] = {}
        self.attached: list[tuple[str, str]] = []

    async def list_oidc_providers(self) -> list[str]:
        self._enter("list_oidc_providers")
        return list(self.providers)

    async def get_oidc_provider_url(self, arn: str) -> str:
        self._enter("get_oidc_provider_url")
        if arn not in self.providers:
            raise RemoteCallError("GetOpenIDConnectProvider", "NoSuchEntity", arn)
        return self.providers[arn]

    async def create_oidc_provider(
        self, url: str, client_ids: list[str], thumbprints: list[str]
    ) -> str:
        self._enter("create_oidc_provider")
        host = url.split("://", 1)[-1]
        arn = f"arn:aws:iam::123456789012:oidc-provider/{host}"
        self.providers[arn] = host
        return arn

    async def create_policy(self, name: str, document: dict[str, Any]) -> str:
        self._enter("create_policy")
        self.policies[name] = document
        return f"arn:aws:iam::123456789012:policy/{name}"

    async def create_role(self, name: str, trust_document: dict[str, Any]) -> str:
        self._enter("create_role")
        self.roles[name] = trust_document
        return f"arn:aws:iam::123456789012:role/{name}"

    async def attach_role_policy(self, role_name: str, policy_arn: str) -> None:
        self._enter("attach_role_policy")
        self.attached.append((role_name, policy_arn))


class RecordingObserver:
    """Observer that keeps every notification as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, str]] = []

    def on_step_start(self, name: str) -> None:
        self.events.append(("start", name, ""))

    def on_step_success(self, name: str, summary: str) -> None:
        self.events.append(("success", name, summary))

    def on_step_failure(self, name: str, reason: str) -> None:
        self.events.append(("failure", name, reason))

    def on_step_skipped(self, name: str, reason: str) -> None:
        self.events.append(("skipped", name, reason))

    def names(self, kind: str) -> list[str]:
        return [name for k, name, _ in self.events if k == kind]


# === FIXTURES: clients ===


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def dns_client() -> FakeDnsClient:
    return FakeDnsClient()


@pytest.fixture
def certificate_client() -> FakeCertificateClient:
    return FakeCertificateClient()


@pytest.fixture
def cdn_client() -> FakeCdnClient:
    return FakeCdnClient()


@pytest.fixture
def identity_client() -> FakeIdentityClient:
    return FakeIdentityClient()


@pytest.fixture
def make_identity_client():
    """Factory for identity clients pre-seeded with OIDC providers."""
    return FakeIdentityClient


@pytest.fixture
def clients(
    storage_client: FakeStorageClient,
    dns_client: FakeDnsClient,
    certificate_client: FakeCertificateClient,
    cdn_client: FakeCdnClient,
    identity_client: FakeIdentityClient,
) -> ClientSet:
    return ClientSet(
        storage=storage_client,
        dns=dns_client,
        certificates=certificate_client,
        cdn=cdn_client,
        identity=identity_client,
    )


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Awaitable sleep that returns immediately and records its calls."""
    return AsyncMock(return_value=None)


# === FIXTURES: configuration and requests ===


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Default settings with the store redirected into tmp_path."""
    return Settings(_env_file=None, site_store_path=tmp_path / "sites.json")


@pytest.fixture
def full_request() -> ProvisioningRequest:
    return ProvisioningRequest(
        site_name="mysite",
        domain="example.com",
        region="us-east-1",
        repository="owner/repo",
    )


@pytest.fixture
def bare_request() -> ProvisioningRequest:
    return ProvisioningRequest(site_name="mysite", region="us-east-1")


@pytest.fixture(autouse=True)
def _reset_log_context():
    """Never leak run/step context between tests."""
    clear_context()
    yield
    clear_context()
