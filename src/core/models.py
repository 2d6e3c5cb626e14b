# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

ProvisioningRequest is the immutable input of a run, StepResult is what each
step leaves behind, and ResourceRecord is the only thing persisted.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SITE_NAME_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{1,38}[a-z0-9])$")
_DOMAIN_RE = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}$"
)
_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*/[A-Za-z0-9._-]+$")


# === INPUT ===


class ProvisioningRequest(BaseModel):
    """What to provision. Constructed once per invocation."""

    model_config = ConfigDict(frozen=True)

    site_name: str
    domain: str | None = None
    region: str = "us-east-1"
    repository: str | None = None

    @field_validator("site_name")
    @classmethod
    def validate_site_name(cls, v: str) -> str:
        if not _SITE_NAME_RE.match(v):
            raise ValueError(
                "site_name must be 3-40 lowercase letters, digits or hyphens "
                "and must start and end with a letter or digit"
            )
        return v

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        domain = v.strip().lower().rstrip(".")
        if not _DOMAIN_RE.match(domain):
            raise ValueError(f"invalid domain name: {v!r}")
        return domain

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not _REPOSITORY_RE.match(v.strip()):
            raise ValueError(f"repository must look like 'owner/repo', got {v!r}")
        return v.strip()

    @property
    def has_domain(self) -> bool:
        return self.domain is not None

    @property
    def has_repository(self) -> bool:
        return self.repository is not None


# === STEP RESULTS ===


class StepStatus(str, Enum):
    """Terminal state of a single provisioning step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepResult(BaseModel):
    """Outcome of one step. Never mutated after the step returns."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: StepStatus
    output: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    error_kind: str | None = None
    reason: str | None = None
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is StepStatus.SUCCEEDED


class ValidationRecord(BaseModel):
    """DNS record proving domain ownership for a certificate."""

    name: str
    type: str
    value: str


# === PERSISTED RECORD ===


class ResourceRecord(BaseModel):
    """Accumulated output of a provisioning run.

    Every resource field is optional: absence means "not provisioned this
    run". Values are append-only, see merge().
    """

    site_name: str
    domain: str | None = None
    region: str | None = None
    repository: str | None = None

    # Storage
    bucket_name: str | None = None
    bucket_arn: str | None = None
    bucket_location: str | None = None

    # DNS
    hosted_zone_id: str | None = None
    name_servers: list[str] | None = None

    # Certificate
    certificate_arn: str | None = None
    certificate_status: str | None = None
    validation_records: list[ValidationRecord] | None = None

    # CDN
    function_name: str | None = None
    function_arn: str | None = None
    origin_access_control_id: str | None = None
    distribution_id: str | None = None
    distribution_arn: str | None = None
    distribution_domain: str | None = None

    # Identity
    oidc_provider_arn: str | None = None
    policy_arn: str | None = None
    role_arn: str | None = None

    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def merge(self, values: dict[str, Any]) -> list[str]:
        """Record new values without ever clearing an existing one.

        Unknown keys and None values are ignored.

        Returns:
            Names of the fields that changed.
        """
        changed: list[str] = []
        for key, value in values.items():
            if key not in type(self).model_fields or key == "site_name":
                continue
            if value is None:
                continue
            if key == "validation_records":
                value = [
                    v if isinstance(v, ValidationRecord) else ValidationRecord(**v)
                    for v in value
                ]
            if getattr(self, key) != value:
                setattr(self, key, value)
                changed.append(key)
        if changed:
            self.updated_at = datetime.now(timezone.utc)
        return changed

    def provisioned_fields(self) -> dict[str, Any]:
        """Return only the resource fields that hold a value."""
        skip = {"site_name", "domain", "region", "repository", "updated_at"}
        return {
            k: v
            for k, v in self.model_dump(mode="json").items()
            if k not in skip and v is not None
        }


# === RUN REPORT ===


class RunStatus(str, Enum):
    """Overall outcome of a provisioning run."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    ABORTED = "aborted"


class ProvisioningReport(BaseModel):
    """Everything a caller needs after a run."""

    request: ProvisioningRequest
    run_id: str
    status: RunStatus
    steps: list[StepResult] = Field(default_factory=list)
    record: ResourceRecord
    duration_ms: int = 0

    def step(self, name: str) -> StepResult | None:
        """Return the result of the named step, if it was reached."""
        for result in self.steps:
            if result.name == name:
                return result
        return None

    @property
    def failed_steps(self) -> list[str]:
        return [s.name for s in self.steps if s.status is StepStatus.FAILED]

    @property
    def skipped_steps(self) -> list[str]:
        return [s.name for s in self.steps if s.status is StepStatus.SKIPPED]

    @property
    def exit_code(self) -> int:
        """0 when nothing failed, 1 when any step failed or the run aborted."""
        if self.status is RunStatus.ABORTED or self.failed_steps:
            return 1
        return 0
