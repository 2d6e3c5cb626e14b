# tests/unit/pipeline/test_observer.py — v1
"""Tests for pipeline/observer.py — logging observer and output summaries."""

from __future__ import annotations

import logging

from sitestack.pipeline.observer import (
    LoggingObserver,
    ProvisioningObserver,
    summarize_output,
)


class TestSummarizeOutput:
    def test_skips_empty_values(self):
        assert summarize_output({"a": 1, "b": None, "c": ""}) == "a=1"

    def test_lists_shown_as_counts(self):
        assert summarize_output({"name_servers": ["ns1", "ns2"]}) == "name_servers=[2]"

    def test_truncates(self):
        summary = summarize_output({"a": 1, "b": 2, "c": 3, "d": 4, "e": 5}, limit=2)
        assert summary == "a=1, b=2, +3 more"


class TestLoggingObserver:
    def test_is_observer(self):
        assert isinstance(LoggingObserver(), ProvisioningObserver)

    def test_levels(self, caplog):
        observer = LoggingObserver()
        with caplog.at_level(logging.DEBUG, logger="sitestack"):
            observer.on_step_start("bucket")
            observer.on_step_success("bucket", "bucket_name=b")
            observer.on_step_skipped("hosted_zone", "no domain supplied")
            observer.on_step_failure("distribution", "boom")
        levels = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.INFO, "Step 'bucket' succeeded: bucket_name=b") in levels
        assert (logging.WARNING, "Step 'hosted_zone' skipped: no domain supplied") in levels
        assert (logging.ERROR, "Step 'distribution' failed: boom") in levels
