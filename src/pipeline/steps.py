# src/pipeline/steps.py — v1
"""Step declarations for provisioning a static site.

Each StepSpec names the steps it depends on. A hard dependency must have
succeeded for the step to run; a soft dependency only contributes its output
when it is there. The declaration order below is the execution order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from sitestack.clients.base import ClientSet
from sitestack.config.settings import Settings
from sitestack.core.errors import PreconditionUnmet
from sitestack.core.models import ProvisioningRequest, ValidationRecord
from sitestack.pipeline.executor import Precondition
from sitestack.pipeline.state import ProvisioningState
from sitestack.pipeline.waiter import SleepFn, attempts_for
from sitestack.provisioning import certificate, dns, identity, storage
from sitestack.provisioning import distribution as cdn

StepFn = Callable[[ProvisioningState], Awaitable[dict[str, Any]]]

# Step names
BUCKET = "bucket"
HOSTED_ZONE = "hosted_zone"
CERTIFICATE_REQUEST = "certificate_request"
CERTIFICATE_VALIDATION_RECORDS = "certificate_validation_records"
DNS_VALIDATION_RECORDS = "dns_validation_records"
CERTIFICATE_WAIT = "certificate_wait"
EDGE_FUNCTION = "edge_function"
DISTRIBUTION = "distribution"
BUCKET_POLICY = "bucket_policy"
DNS_ALIAS_RECORDS = "dns_alias_records"
IDENTITY_PROVIDER = "identity_provider"
DEPLOY_POLICY = "deploy_policy"
DEPLOY_ROLE = "deploy_role"

NO_DOMAIN = "no domain supplied"
NO_REPOSITORY = "no repository supplied"
CERTIFICATE_STATE_UNKNOWN = "validation records unavailable, issuance state unknown"


@dataclass(frozen=True)
class StepSpec:
    """Declaration of one pipeline step.

    Attributes:
        name: Unique step name.
        work: Async callable receiving the pipeline state.
        hard_deps: Steps that must have succeeded.
        soft_deps: Steps whose output is used when available.
        preconditions: Request-level guards, checked before dependencies.
        root: A failed root step aborts the rest of the run.
    """

    name: str
    work: StepFn
    hard_deps: tuple[str, ...] = ()
    soft_deps: tuple[str, ...] = ()
    preconditions: tuple[Precondition, ...] = field(default_factory=tuple)
    root: bool = False

    @property
    def dependencies(self) -> list[str]:
        return [*self.hard_deps, *self.soft_deps]


def _distribution_certificate(state: ProvisioningState) -> str | None:
    """The issued certificate, or the requested one when its issuance state
    is unknown. Rejected and timed-out certificates are never attached.
    """
    issued = state.value(CERTIFICATE_WAIT, "certificate_arn")
    if issued:
        return issued
    wait = state.results.get(CERTIFICATE_WAIT)
    if wait is not None and wait.reason == CERTIFICATE_STATE_UNKNOWN:
        return state.value(CERTIFICATE_REQUEST, "certificate_arn")
    return None


class SiteSteps:
    """Step implementations bound to clients and settings.

    Every method reads its inputs from the state and returns its output
    mapping; none of them mutates the state.
    """

    def __init__(
        self,
        clients: ClientSet,
        settings: Settings,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._clients = clients
        self._settings = settings
        self._sleep = sleep

    # --- storage ---

    async def bucket(self, state: ProvisioningState) -> dict[str, Any]:
        return await storage.create_bucket(
            self._clients.storage, state.names.bucket, state.request.region
        )

    async def bucket_policy(self, state: ProvisioningState) -> dict[str, Any]:
        return await storage.update_bucket_policy(
            self._clients.storage,
            state.value(BUCKET, "bucket_name"),
            state.value(DISTRIBUTION, "distribution_arn"),
        )

    # --- dns ---

    async def hosted_zone(self, state: ProvisioningState) -> dict[str, Any]:
        return await dns.create_hosted_zone(
            self._clients.dns, state.request.domain, state.names.caller_reference
        )

    async def dns_validation_records(self, state: ProvisioningState) -> dict[str, Any]:
        records = [
            ValidationRecord(**r)
            for r in state.value(CERTIFICATE_VALIDATION_RECORDS, "validation_records", [])
        ]
        return await dns.create_validation_records(
            self._clients.dns, state.value(HOSTED_ZONE, "hosted_zone_id"), records
        )

    async def dns_alias_records(self, state: ProvisioningState) -> dict[str, Any]:
        return await dns.create_alias_records(
            self._clients.dns,
            state.value(HOSTED_ZONE, "hosted_zone_id"),
            state.request.domain,
            state.value(DISTRIBUTION, "distribution_domain"),
        )

    # --- certificate ---

    async def certificate_request(self, state: ProvisioningState) -> dict[str, Any]:
        return await certificate.request_certificate(
            self._clients.certificates, state.request.domain
        )

    async def certificate_validation_records(
        self, state: ProvisioningState
    ) -> dict[str, Any]:
        return await certificate.fetch_validation_records(
            self._clients.certificates,
            state.value(CERTIFICATE_REQUEST, "certificate_arn"),
            interval_s=self._settings.validation_poll_interval_s,
            max_attempts=self._settings.validation_max_attempts,
            max_check_errors=self._settings.poll_max_check_errors,
            sleep=self._sleep,
        )

    async def certificate_wait(self, state: ProvisioningState) -> dict[str, Any]:
        if not state.succeeded(CERTIFICATE_VALIDATION_RECORDS):
            raise PreconditionUnmet(CERTIFICATE_STATE_UNKNOWN)
        interval_s = self._settings.certificate_poll_interval_s
        return await certificate.wait_for_issuance(
            self._clients.certificates,
            state.value(CERTIFICATE_REQUEST, "certificate_arn"),
            interval_s=interval_s,
            max_attempts=attempts_for(self._settings.certificate_max_wait_s, interval_s),
            max_check_errors=self._settings.poll_max_check_errors,
            sleep=self._sleep,
        )

    # --- cdn ---

    async def edge_function(self, state: ProvisioningState) -> dict[str, Any]:
        return await cdn.create_edge_function(
            self._clients.cdn,
            state.names.function,
            publish_delay_s=self._settings.function_publish_delay_s,
            sleep=self._sleep,
        )

    async def distribution(self, state: ProvisioningState) -> dict[str, Any]:
        return await cdn.create_distribution(
            self._clients.cdn,
            bucket_name=state.value(BUCKET, "bucket_name"),
            region=state.request.region,
            caller_reference=state.names.caller_reference,
            origin_access_control_name=state.names.origin_access_control,
            function_arn=state.value(EDGE_FUNCTION, "function_arn"),
            domain=state.request.domain,
            certificate_arn=_distribution_certificate(state),
            price_class=self._settings.distribution_price_class,
        )

    # --- identity ---

    async def identity_provider(self, state: ProvisioningState) -> dict[str, Any]:
        return await identity.discover_or_create_provider(
            self._clients.identity,
            self._settings.oidc_issuer_url,
            self._settings.oidc_audience,
            self._settings.oidc_thumbprint,
        )

    async def deploy_policy(self, state: ProvisioningState) -> dict[str, Any]:
        return await identity.create_deploy_policy(
            self._clients.identity,
            state.names.policy,
            state.value(BUCKET, "bucket_arn"),
            state.value(DISTRIBUTION, "distribution_arn"),
        )

    async def deploy_role(self, state: ProvisioningState) -> dict[str, Any]:
        trust = identity.build_trust_policy(
            state.value(IDENTITY_PROVIDER, "oidc_provider_arn"),
            self._settings.oidc_issuer_host,
            self._settings.oidc_audience,
            state.request.repository,
        )
        return await identity.create_deploy_role(
            self._clients.identity,
            state.names.role,
            trust,
            state.value(DEPLOY_POLICY, "policy_arn"),
        )


def build_site_steps(
    request: ProvisioningRequest,
    clients: ClientSet,
    settings: Settings,
    sleep: SleepFn = asyncio.sleep,
) -> list[StepSpec]:
    """Declare the full static-site step graph for ``request``."""
    s = SiteSteps(clients, settings, sleep)
    has_domain = (Precondition(lambda: request.has_domain, NO_DOMAIN),)
    has_repository = (Precondition(lambda: request.has_repository, NO_REPOSITORY),)

    return [
        StepSpec(BUCKET, s.bucket, root=True),
        StepSpec(HOSTED_ZONE, s.hosted_zone, preconditions=has_domain),
        StepSpec(CERTIFICATE_REQUEST, s.certificate_request, preconditions=has_domain),
        StepSpec(
            CERTIFICATE_VALIDATION_RECORDS,
            s.certificate_validation_records,
            hard_deps=(CERTIFICATE_REQUEST,),
            preconditions=has_domain,
        ),
        StepSpec(
            DNS_VALIDATION_RECORDS,
            s.dns_validation_records,
            hard_deps=(CERTIFICATE_VALIDATION_RECORDS, HOSTED_ZONE),
            preconditions=has_domain,
        ),
        StepSpec(
            CERTIFICATE_WAIT,
            s.certificate_wait,
            hard_deps=(CERTIFICATE_REQUEST,),
            soft_deps=(CERTIFICATE_VALIDATION_RECORDS, DNS_VALIDATION_RECORDS),
            preconditions=has_domain,
        ),
        StepSpec(EDGE_FUNCTION, s.edge_function),
        StepSpec(
            DISTRIBUTION,
            s.distribution,
            hard_deps=(BUCKET,),
            soft_deps=(EDGE_FUNCTION, CERTIFICATE_WAIT),
        ),
        StepSpec(BUCKET_POLICY, s.bucket_policy, hard_deps=(DISTRIBUTION,)),
        StepSpec(
            DNS_ALIAS_RECORDS,
            s.dns_alias_records,
            hard_deps=(DISTRIBUTION, HOSTED_ZONE),
            preconditions=has_domain,
        ),
        StepSpec(IDENTITY_PROVIDER, s.identity_provider, preconditions=has_repository),
        StepSpec(
            DEPLOY_POLICY,
            s.deploy_policy,
            hard_deps=(IDENTITY_PROVIDER, BUCKET),
            soft_deps=(DISTRIBUTION,),
            preconditions=has_repository,
        ),
        StepSpec(
            DEPLOY_ROLE,
            s.deploy_role,
            hard_deps=(IDENTITY_PROVIDER, DEPLOY_POLICY),
            preconditions=has_repository,
        ),
    ]
