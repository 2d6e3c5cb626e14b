# src/clients/adapters/iam_identity.py — v1
"""IAM implementation of BaseIdentityClient."""

from __future__ import annotations

import json
from typing import Any

from sitestack.clients.adapters.boto import remote_call
from sitestack.clients.base import BaseIdentityClient


class IamIdentityClient(BaseIdentityClient):
    """OIDC provider, policy and role operations through a boto3 IAM client."""

    def __init__(self, client: Any) -> None:
        self._iam = client

    async def list_oidc_providers(self) -> list[str]:
        with remote_call("ListOpenIDConnectProviders"):
            response = self._iam.list_open_id_connect_providers()
        return [p["Arn"] for p in response.get("OpenIDConnectProviderList", [])]

    async def get_oidc_provider_url(self, arn: str) -> str:
        with remote_call("GetOpenIDConnectProvider"):
            response = self._iam.get_open_id_connect_provider(
                OpenIDConnectProviderArn=arn,
            )
        return response.get("Url", "")

    async def create_oidc_provider(
        self, url: str, client_ids: list[str], thumbprints: list[str]
    ) -> str:
        with remote_call("CreateOpenIDConnectProvider"):
            response = self._iam.create_open_id_connect_provider(
                Url=url, ClientIDList=client_ids, ThumbprintList=thumbprints,
            )
        return response["OpenIDConnectProviderArn"]

    async def create_policy(self, name: str, document: dict[str, Any]) -> str:
        with remote_call("CreatePolicy"):
            response = self._iam.create_policy(
                PolicyName=name, PolicyDocument=json.dumps(document),
            )
        return response["Policy"]["Arn"]

    async def create_role(self, name: str, trust_document: dict[str, Any]) -> str:
        with remote_call("CreateRole"):
            response = self._iam.create_role(
                RoleName=name, AssumeRolePolicyDocument=json.dumps(trust_document),
            )
        return response["Role"]["Arn"]

    async def attach_role_policy(self, role_name: str, policy_arn: str) -> None:
        with remote_call("AttachRolePolicy"):
            self._iam.attach_role_policy(RoleName=role_name, PolicyArn=policy_arn)
