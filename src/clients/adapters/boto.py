# src/clients/adapters/boto.py — v1
"""Shared boto3 plumbing: session creation and error translation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from sitestack.core.errors import RemoteCallError, ResourceAlreadyExists

logger = logging.getLogger(__name__)

ALREADY_EXISTS_CODES = frozenset({
    "EntityAlreadyExists",
    "BucketAlreadyExists",
    "BucketAlreadyOwnedByYou",
    "HostedZoneAlreadyExists",
    "FunctionAlreadyExists",
    "OriginAccessControlAlreadyExists",
    "DistributionAlreadyExists",
})

# botocore retries throttling and 5xx on its own; keep it modest so that the
# pipeline's own waits stay the dominant source of delay.
_RETRY_CONFIG = BotoConfig(retries={"max_attempts": 4, "mode": "standard"})


def create_session(profile: str = "") -> boto3.session.Session:
    """Create a boto3 session, optionally bound to a named profile."""
    if profile:
        return boto3.session.Session(profile_name=profile)
    return boto3.session.Session()


def create_client(
    session: boto3.session.Session,
    service: str,
    region: str,
    endpoint_url: str = "",
) -> Any:
    """Create a low-level boto3 client for a service."""
    kwargs: dict[str, Any] = {"region_name": region, "config": _RETRY_CONFIG}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return session.client(service, **kwargs)


@contextmanager
def remote_call(operation: str) -> Iterator[None]:
    """Translate botocore exceptions raised inside the block.

    Raises:
        ResourceAlreadyExists: For the "already exists" family of error codes.
        RemoteCallError: For every other client or transport error.
    """
    try:
        yield
    except ClientError as exc:
        error = exc.response.get("Error", {})
        code = str(error.get("Code", "Unknown"))
        message = str(error.get("Message", exc))
        logger.debug("%s returned %s: %s", operation, code, message)
        if code in ALREADY_EXISTS_CODES:
            raise ResourceAlreadyExists(operation, code, message) from exc
        raise RemoteCallError(operation, code, message) from exc
    except BotoCoreError as exc:
        raise RemoteCallError(operation, type(exc).__name__, str(exc)) from exc
