# tests/unit/core/test_errors.py — v1
"""Tests for core/errors.py — error taxonomy."""

from __future__ import annotations

from sitestack.core.errors import (
    PreconditionUnmet,
    ProvisioningError,
    RemoteCallError,
    ResourceAlreadyExists,
    TerminalRemoteState,
    TimeoutExceeded,
    error_kind,
)


class TestErrors:
    def test_remote_call_message(self):
        err = RemoteCallError("CreateBucket", "AccessDenied", "no permission")
        assert str(err) == "CreateBucket failed (AccessDenied): no permission"
        assert err.operation == "CreateBucket"
        assert err.error_code == "AccessDenied"
        assert err.partial == {}

    def test_already_exists_is_remote_call(self):
        err = ResourceAlreadyExists("CreateRole", "EntityAlreadyExists", "exists")
        assert isinstance(err, RemoteCallError)
        assert error_kind(err) == "already_exists"

    def test_partial_copied(self):
        partial = {"role_arn": "arn:role"}
        err = ProvisioningError("boom", partial=partial)
        partial["role_arn"] = "changed"
        assert err.partial == {"role_arn": "arn:role"}

    def test_kinds(self):
        assert error_kind(RemoteCallError("Op", "X", "y")) == "remote_call"
        assert error_kind(PreconditionUnmet("no")) == "precondition_unmet"
        assert error_kind(TerminalRemoteState("failed")) == "terminal_state"
        assert error_kind(TimeoutExceeded("late")) == "timeout"
        assert error_kind(ProvisioningError("generic")) == "provisioning_error"

    def test_foreign_exception_is_unexpected(self):
        assert error_kind(KeyError("x")) == "unexpected"
