# src/clients/adapters/cloudfront_cdn.py — v1
"""CloudFront implementation of BaseCdnClient."""

from __future__ import annotations

from typing import Any

from sitestack.clients.adapters.boto import remote_call
from sitestack.clients.base import BaseCdnClient
from sitestack.clients.models import DistributionInfo, FunctionInfo

FUNCTION_RUNTIME = "cloudfront-js-1.0"


def _function_info(summary: dict[str, Any], etag: str | None) -> FunctionInfo:
    metadata = summary.get("FunctionMetadata", {})
    return FunctionInfo(
        name=summary.get("Name", ""),
        arn=metadata.get("FunctionARN"),
        etag=etag,
        stage=metadata.get("Stage"),
    )


class CloudFrontCdnClient(BaseCdnClient):
    """Function and distribution operations through a boto3 CloudFront client."""

    def __init__(self, client: Any) -> None:
        self._cloudfront = client

    async def create_function(
        self, name: str, code: str, comment: str = ""
    ) -> FunctionInfo:
        with remote_call("CreateFunction"):
            response = self._cloudfront.create_function(
                Name=name,
                FunctionConfig={"Comment": comment, "Runtime": FUNCTION_RUNTIME},
                FunctionCode=code.encode("utf-8"),
            )
        info = _function_info(response.get("FunctionSummary", {}), response.get("ETag"))
        return info.model_copy(update={"name": info.name or name})

    async def publish_function(self, name: str, etag: str) -> FunctionInfo:
        with remote_call("PublishFunction"):
            response = self._cloudfront.publish_function(Name=name, IfMatch=etag)
        info = _function_info(response.get("FunctionSummary", {}), None)
        return info.model_copy(update={"name": info.name or name})

    async def create_origin_access_control(self, name: str) -> str:
        with remote_call("CreateOriginAccessControl"):
            response = self._cloudfront.create_origin_access_control(
                OriginAccessControlConfig={
                    "Name": name,
                    "Description": f"Private S3 origin access for {name}",
                    "SigningProtocol": "sigv4",
                    "SigningBehavior": "always",
                    "OriginAccessControlOriginType": "s3",
                },
            )
        return response["OriginAccessControl"]["Id"]

    async def create_distribution(self, config: dict[str, Any]) -> DistributionInfo:
        with remote_call("CreateDistribution"):
            response = self._cloudfront.create_distribution(DistributionConfig=config)
        distribution = response["Distribution"]
        return DistributionInfo(
            id=distribution["Id"],
            arn=distribution["ARN"],
            domain_name=distribution["DomainName"],
            status=distribution.get("Status"),
        )
