# src/provisioning/identity.py — v1
"""CI deploy identity: OIDC provider, least-privilege policy, trust role.

The role can only be assumed by workflow tokens whose audience is the
configured one and whose subject names the given repository.
"""

from __future__ import annotations

import logging
from typing import Any

from sitestack.clients.base import BaseIdentityClient
from sitestack.core.errors import ProvisioningError, ResourceAlreadyExists

logger = logging.getLogger(__name__)


def _host(url: str) -> str:
    """Issuer URL without scheme or trailing slash, as IAM reports it."""
    return url.split("://", 1)[-1].rstrip("/")


async def _find_provider(client: BaseIdentityClient, issuer_host: str) -> str | None:
    """Return the ARN of the first provider whose issuer matches, if any."""
    for arn in await client.list_oidc_providers():
        try:
            url = await client.get_oidc_provider_url(arn)
        except ProvisioningError as exc:
            logger.warning("Skipping OIDC provider %s: %s", arn, exc)
            continue
        if _host(url) == issuer_host:
            return arn
    return None


async def discover_or_create_provider(
    client: BaseIdentityClient,
    issuer_url: str,
    audience: str,
    thumbprint: str,
) -> dict[str, Any]:
    """Reuse the account's OIDC provider for ``issuer_url`` or create it.

    Returns:
        ``{oidc_provider_arn, provider_created}``.

    Raises:
        ProvisioningError: Creation reported a conflict but no matching
            provider could be found afterwards.
    """
    issuer_host = _host(issuer_url)
    arn = await _find_provider(client, issuer_host)
    if arn is not None:
        logger.info("Using existing OIDC provider %s", arn)
        return {"oidc_provider_arn": arn, "provider_created": False}

    try:
        arn = await client.create_oidc_provider(issuer_url, [audience], [thumbprint])
    except ResourceAlreadyExists:
        # Created concurrently between listing and creating
        arn = await _find_provider(client, issuer_host)
        if arn is None:
            raise ProvisioningError(
                f"OIDC provider for {issuer_host} reported as existing but not found"
            ) from None
        logger.info("Using existing OIDC provider %s", arn)
        return {"oidc_provider_arn": arn, "provider_created": False}

    logger.info("OIDC provider created: %s", arn)
    return {"oidc_provider_arn": arn, "provider_created": True}


def build_deploy_policy(
    bucket_arn: str, distribution_arn: str | None = None
) -> dict[str, Any]:
    """Permissions a CI job needs to upload the site and invalidate the CDN."""
    if not bucket_arn:
        raise ValueError("bucket_arn is required")
    statements: list[dict[str, Any]] = [
        {
            "Sid": "Statement0",
            "Effect": "Allow",
            "Action": [
                "s3:PutObject",
                "s3:GetObject",
                "s3:ListBucket",
                "s3:DeleteObject",
            ],
            "Resource": [f"{bucket_arn}/*", bucket_arn],
        }
    ]
    if distribution_arn:
        statements.append({
            "Sid": "Statement1",
            "Effect": "Allow",
            "Action": ["cloudfront:CreateInvalidation"],
            "Resource": [distribution_arn],
        })
    return {"Version": "2012-10-17", "Statement": statements}


def build_trust_policy(
    provider_arn: str,
    issuer_host: str,
    audience: str,
    repository: str,
) -> dict[str, Any]:
    """Trust policy binding the role to one repository's workflow tokens.

    Raises:
        ValueError: If any of the binding values is missing.
    """
    if not provider_arn:
        raise ValueError("provider_arn is required")
    if not audience:
        raise ValueError("audience is required")
    if not repository:
        raise ValueError("repository is required")
    issuer_host = _host(issuer_host)
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Federated": provider_arn},
                "Action": "sts:AssumeRoleWithWebIdentity",
                "Condition": {
                    "StringEquals": {f"{issuer_host}:aud": audience},
                    "StringLike": {f"{issuer_host}:sub": f"repo:{repository}:*"},
                },
            }
        ],
    }


async def create_deploy_policy(
    client: BaseIdentityClient,
    name: str,
    bucket_arn: str,
    distribution_arn: str | None = None,
) -> dict[str, Any]:
    """Create the managed deploy policy."""
    if not distribution_arn:
        logger.warning(
            "No distribution available; policy %s will not allow cache invalidation",
            name,
        )
    policy_arn = await client.create_policy(
        name, build_deploy_policy(bucket_arn, distribution_arn)
    )
    logger.info("Deploy policy created: %s", policy_arn)
    return {"policy_arn": policy_arn}


async def create_deploy_role(
    client: BaseIdentityClient,
    role_name: str,
    trust_document: dict[str, Any],
    policy_arn: str,
) -> dict[str, Any]:
    """Create the role and attach the deploy policy.

    Raises:
        ProvisioningError: Attaching failed; ``partial`` holds the role ARN.
    """
    role_arn = await client.create_role(role_name, trust_document)
    logger.info("Deploy role created: %s", role_arn)
    try:
        await client.attach_role_policy(role_name, policy_arn)
    except ProvisioningError as exc:
        exc.partial.setdefault("role_arn", role_arn)
        raise
    return {"role_arn": role_arn, "role_name": role_name}
