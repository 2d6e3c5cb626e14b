# src/provisioning/dns.py — v1
"""Hosted zone, certificate validation records and site alias records."""

from __future__ import annotations

import logging
from typing import Any

from sitestack.clients.base import BaseDnsClient
from sitestack.clients.models import AliasTarget, DnsRecord
from sitestack.core.models import ValidationRecord

logger = logging.getLogger(__name__)

RECORD_TTL = 300


async def create_hosted_zone(
    client: BaseDnsClient, domain: str, caller_reference: str
) -> dict[str, Any]:
    """Create the public zone for ``domain``.

    The zone only answers once the registrar delegates to its name servers,
    so they are logged for the operator.

    Returns:
        ``{hosted_zone_id, name_servers}``.
    """
    zone = await client.create_hosted_zone(domain, caller_reference)
    zone_id = zone.zone_id.removeprefix("/hostedzone/")
    logger.info("Hosted zone %s created for %s", zone_id, domain)
    if zone.name_servers:
        logger.info(
            "Configure these name servers at the registrar of %s: %s",
            domain, ", ".join(zone.name_servers),
        )
    return {"hosted_zone_id": zone_id, "name_servers": list(zone.name_servers)}


async def create_validation_records(
    client: BaseDnsClient,
    zone_id: str,
    records: list[ValidationRecord],
) -> dict[str, Any]:
    """UPSERT the certificate's DNS validation records."""
    if not records:
        raise ValueError("no validation records to create")
    dns_records = [
        DnsRecord(name=r.name, type=r.type, ttl=RECORD_TTL, value=r.value)
        for r in records
    ]
    await client.upsert_records(
        zone_id, dns_records, comment="Certificate DNS validation"
    )
    names = [r.name for r in records]
    logger.info("Created %d validation record(s) in zone %s", len(names), zone_id)
    return {"validation_record_names": names}


async def create_alias_records(
    client: BaseDnsClient,
    zone_id: str,
    domain: str,
    distribution_domain: str,
) -> dict[str, Any]:
    """UPSERT A and AAAA aliases pointing the domain at the distribution."""
    target = AliasTarget(dns_name=distribution_domain)
    records = [
        DnsRecord(name=domain, type="A", alias_target=target),
        DnsRecord(name=domain, type="AAAA", alias_target=target),
    ]
    await client.upsert_records(
        zone_id, records, comment=f"Alias {domain} to {distribution_domain}"
    )
    logger.info("DNS aliases %s → %s created", domain, distribution_domain)
    return {"alias_records": [f"{domain} A", f"{domain} AAAA"]}
