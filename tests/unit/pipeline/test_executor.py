# tests/unit/pipeline/test_executor.py — v1
"""Tests for pipeline/executor.py — single step execution."""

from __future__ import annotations

import asyncio

import pytest

from sitestack.core.errors import PreconditionUnmet, RemoteCallError
from sitestack.core.models import StepStatus
from sitestack.logging.context import get_context
from sitestack.pipeline.executor import Precondition, StepExecutor


class TestStepExecutor:
    @pytest.mark.asyncio
    async def test_success(self, observer):
        async def work():
            return {"bucket_name": "mysite-123456"}

        result = await StepExecutor(observer).run("bucket", work)
        assert result.status is StepStatus.SUCCEEDED
        assert result.output == {"bucket_name": "mysite-123456"}
        assert result.error is None
        assert observer.events[0] == ("start", "bucket", "")
        assert observer.events[1][:2] == ("success", "bucket")
        assert "bucket_name=mysite-123456" in observer.events[1][2]

    @pytest.mark.asyncio
    async def test_unmet_precondition_never_runs_work(self, observer):
        called = []

        async def work():
            called.append(True)
            return {}

        result = await StepExecutor(observer).run(
            "hosted_zone", work, Precondition(lambda: False, "no domain supplied"),
        )
        assert result.status is StepStatus.SKIPPED
        assert result.reason == "no domain supplied"
        assert called == []
        assert observer.events == [("skipped", "hosted_zone", "no domain supplied")]

    @pytest.mark.asyncio
    async def test_met_precondition_runs_work(self, observer):
        async def work():
            return {"x": 1}

        result = await StepExecutor(observer).run(
            "s", work, Precondition(lambda: True, "unused"),
        )
        assert result.succeeded

    @pytest.mark.asyncio
    async def test_failure_captured_with_partial(self, observer):
        async def work():
            raise RemoteCallError(
                "AttachRolePolicy", "AccessDenied", "denied",
                partial={"role_arn": "arn:role"},
            )

        result = await StepExecutor(observer).run("deploy_role", work)
        assert result.status is StepStatus.FAILED
        assert result.error_kind == "remote_call"
        assert "AccessDenied" in result.error
        assert result.output == {"role_arn": "arn:role"}
        assert observer.names("failure") == ["deploy_role"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_captured(self, observer):
        async def work():
            raise KeyError("missing")

        result = await StepExecutor(observer).run("distribution", work)
        assert result.status is StepStatus.FAILED
        assert result.error_kind == "unexpected"

    @pytest.mark.asyncio
    async def test_precondition_raised_from_work_is_skip(self, observer):
        async def work():
            raise PreconditionUnmet("validation records unavailable")

        result = await StepExecutor(observer).run("certificate_wait", work)
        assert result.status is StepStatus.SKIPPED
        assert result.reason == "validation records unavailable"
        assert observer.events == [
            ("start", "certificate_wait", ""),
            ("skipped", "certificate_wait", "validation records unavailable"),
        ]

    @pytest.mark.asyncio
    async def test_step_context_set_during_work_only(self):
        seen = []

        async def work():
            seen.append(get_context().step)
            return {}

        await StepExecutor().run("edge_function", work)
        assert seen == ["edge_function"]
        assert get_context().step is None

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        async def work():
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await StepExecutor().run("bucket", work)

    def test_skip(self, observer):
        result = StepExecutor(observer).skip("deploy_role", "no repository supplied")
        assert result.status is StepStatus.SKIPPED
        assert observer.events == [("skipped", "deploy_role", "no repository supplied")]
