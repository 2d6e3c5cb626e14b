# tests/unit/core/test_naming.py — v1
"""Tests for core/naming.py — per-run resource names."""

from __future__ import annotations

from sitestack.core.naming import derive_names


class TestDeriveNames:
    def test_names_from_site(self):
        names = derive_names("mysite", now_ms=1_700_000_123_456)
        assert names.bucket == "mysite-123456"
        assert names.function == "mysite-redirect-function"
        assert names.origin_access_control == "mysite-oac"
        assert names.policy == "mysite-deploy-policy"
        assert names.role == "mysite-github-actions-role"
        assert names.caller_reference == "mysite-1700000123456"

    def test_bucket_suffix_changes_between_runs(self):
        first = derive_names("mysite", now_ms=1_700_000_000_001)
        second = derive_names("mysite", now_ms=1_700_000_000_002)
        assert first.bucket != second.bucket
        assert first.role == second.role

    def test_defaults_to_current_time(self):
        names = derive_names("mysite")
        suffix = names.bucket.rsplit("-", 1)[1]
        assert len(suffix) == 6
        assert suffix.isdigit()
