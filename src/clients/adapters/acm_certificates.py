# src/clients/adapters/acm_certificates.py — v1
"""ACM implementation of BaseCertificateClient.

The boto3 client handed in must be bound to us-east-1, the only region whose
certificates CloudFront accepts.
"""

from __future__ import annotations

from typing import Any

from sitestack.clients.adapters.boto import remote_call
from sitestack.clients.base import BaseCertificateClient
from sitestack.clients.models import CertificateDescription
from sitestack.core.models import ValidationRecord


class AcmCertificateClient(BaseCertificateClient):
    """Certificate operations through a boto3 ACM client."""

    def __init__(self, client: Any) -> None:
        self._acm = client

    async def request_certificate(self, domain: str) -> str:
        with remote_call("RequestCertificate"):
            response = self._acm.request_certificate(
                DomainName=domain, ValidationMethod="DNS",
            )
        return response["CertificateArn"]

    async def describe_certificate(self, arn: str) -> CertificateDescription:
        with remote_call("DescribeCertificate"):
            response = self._acm.describe_certificate(CertificateArn=arn)
        certificate = response.get("Certificate", {})

        records: list[ValidationRecord] = []
        for option in certificate.get("DomainValidationOptions", []):
            resource_record = option.get("ResourceRecord")
            # ACM fills these in asynchronously after the request
            if not resource_record:
                continue
            records.append(ValidationRecord(
                name=resource_record["Name"],
                type=resource_record["Type"],
                value=resource_record["Value"],
            ))

        return CertificateDescription(
            arn=arn,
            status=certificate.get("Status", "UNKNOWN"),
            failure_reason=certificate.get("FailureReason"),
            validation_records=records,
        )
