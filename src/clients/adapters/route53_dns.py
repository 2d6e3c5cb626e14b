# src/clients/adapters/route53_dns.py — v1
"""Route53 implementation of BaseDnsClient."""

from __future__ import annotations

from typing import Any

from sitestack.clients.adapters.boto import remote_call
from sitestack.clients.base import BaseDnsClient
from sitestack.clients.models import DnsRecord, HostedZoneInfo


def normalize_zone_id(zone_id: str) -> str:
    """Strip the '/hostedzone/' prefix Route53 puts on zone IDs."""
    return zone_id.removeprefix("/hostedzone/")


def _record_set(record: DnsRecord) -> dict[str, Any]:
    """Build a ResourceRecordSet from a DnsRecord."""
    record_set: dict[str, Any] = {"Name": record.name, "Type": record.type}
    if record.alias_target is not None:
        record_set["AliasTarget"] = {
            "HostedZoneId": record.alias_target.hosted_zone_id,
            "DNSName": record.alias_target.dns_name,
            "EvaluateTargetHealth": record.alias_target.evaluate_target_health,
        }
    else:
        record_set["TTL"] = record.ttl
        record_set["ResourceRecords"] = [{"Value": record.value}]
    return record_set


class Route53DnsClient(BaseDnsClient):
    """Hosted zone and record operations through a boto3 Route53 client."""

    def __init__(self, client: Any) -> None:
        self._route53 = client

    async def create_hosted_zone(
        self, domain: str, caller_reference: str
    ) -> HostedZoneInfo:
        with remote_call("CreateHostedZone"):
            response = self._route53.create_hosted_zone(
                Name=domain, CallerReference=caller_reference,
            )
        return HostedZoneInfo(
            zone_id=normalize_zone_id(response["HostedZone"]["Id"]),
            name_servers=list(response.get("DelegationSet", {}).get("NameServers", [])),
        )

    async def upsert_records(
        self, zone_id: str, records: list[DnsRecord], comment: str = ""
    ) -> None:
        if not records:
            return
        change_batch: dict[str, Any] = {
            "Changes": [
                {"Action": "UPSERT", "ResourceRecordSet": _record_set(r)}
                for r in records
            ],
        }
        if comment:
            change_batch["Comment"] = comment
        with remote_call("ChangeResourceRecordSets"):
            self._route53.change_resource_record_sets(
                HostedZoneId=normalize_zone_id(zone_id),
                ChangeBatch=change_batch,
            )
