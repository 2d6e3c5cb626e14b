# tests/unit/pipeline/test_steps.py — v1
"""Tests for pipeline/steps.py — the static-site step graph."""

from __future__ import annotations

from sitestack.pipeline.dag_builder import build_dag
from sitestack.pipeline.steps import build_site_steps


class TestBuildSiteSteps:
    def _steps(self, clients, settings, request):
        return {s.name: s for s in build_site_steps(request, clients, settings)}

    def test_declared_order_is_execution_order(self, clients, settings, full_request):
        steps = build_site_steps(full_request, clients, settings)
        plan = build_dag({s.name: s.dependencies for s in steps})
        assert plan.flat_order == [s.name for s in steps]
        assert plan.flat_order == [
            "bucket", "hosted_zone", "certificate_request",
            "certificate_validation_records", "dns_validation_records",
            "certificate_wait", "edge_function", "distribution", "bucket_policy",
            "dns_alias_records", "identity_provider", "deploy_policy", "deploy_role",
        ]

    def test_only_bucket_is_root(self, clients, settings, full_request):
        steps = self._steps(clients, settings, full_request)
        assert [name for name, s in steps.items() if s.root] == ["bucket"]

    def test_dependency_table(self, clients, settings, full_request):
        steps = self._steps(clients, settings, full_request)
        assert steps["certificate_wait"].hard_deps == ("certificate_request",)
        assert steps["certificate_wait"].soft_deps == (
            "certificate_validation_records", "dns_validation_records",
        )
        assert steps["distribution"].hard_deps == ("bucket",)
        assert steps["distribution"].soft_deps == ("edge_function", "certificate_wait")
        assert steps["dns_alias_records"].hard_deps == ("distribution", "hosted_zone")
        assert steps["deploy_policy"].hard_deps == ("identity_provider", "bucket")
        assert steps["deploy_policy"].soft_deps == ("distribution",)
        assert steps["deploy_role"].hard_deps == ("identity_provider", "deploy_policy")

    def test_preconditions_follow_request(self, clients, settings, full_request, bare_request):
        with_domain = self._steps(clients, settings, full_request)
        without = self._steps(clients, settings, bare_request)

        assert all(p.check() for p in with_domain["hosted_zone"].preconditions)
        assert [p.reason for p in without["hosted_zone"].preconditions] == ["no domain supplied"]
        assert not without["hosted_zone"].preconditions[0].check()
        assert not without["deploy_role"].preconditions[0].check()
        assert without["deploy_role"].preconditions[0].reason == "no repository supplied"
        assert without["bucket"].preconditions == ()
        assert without["distribution"].preconditions == ()
