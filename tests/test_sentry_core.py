# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for the Sentry-backed sink core."""

import logging
from datetime import datetime, timezone

import pytest

from sentry_sink import (
    Level,
    Record,
    SentryCore,
    SilentTransport,
    TransportError,
)


@pytest.fixture
def transport():
    return SilentTransport()


@pytest.fixture
def core(transport):
    return SentryCore(transport, minimum=Level.ERROR, tags={"env": "prod"}, trace_enabled=False)


class TestEnabled:
    """Tests for the level gate."""

    def test_levels_below_minimum_are_disabled(self, core):
        """Test DEBUG, INFO and WARNING at an ERROR gate."""
        assert not core.enabled(Level.DEBUG)
        assert not core.enabled(Level.INFO)
        assert not core.enabled(Level.WARNING)

    def test_levels_at_or_above_minimum_are_enabled(self, core):
        """Test ERROR and above at an ERROR gate."""
        for level in (Level.ERROR, Level.DPANIC, Level.PANIC, Level.FATAL):
            assert core.enabled(level)

    def test_check_uses_record_level(self, core):
        """Test that check applies the gate to a record."""
        assert core.check(Record("boom", Level.ERROR))
        assert not core.check(Record("meh", Level.WARNING))


class TestWrite:
    """Tests for building and submitting reports."""

    def test_report_contents(self, core, transport):
        """Test the event built for a single ERROR record."""
        timestamp = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        core.write(Record("disk full", Level.ERROR, timestamp=timestamp, fields={"disk": "/dev/sda1"}))

        assert transport.capture_count == 1
        event = transport.events[0]
        assert event["message"] == "disk full"
        assert event["level"] == "error"
        assert event["platform"] == "python"
        assert event["timestamp"] == timestamp
        assert event["extra"] == {"disk": "/dev/sda1"}
        assert transport.tags[0] == {"env": "prod"}
        assert "threads" not in event

    def test_logger_name_is_reported(self, core, transport):
        """Test that the record's logger name is set on the event."""
        core.write(Record("boom", Level.ERROR, logger_name="ingestion"))

        assert transport.events[0]["logger"] == "ingestion"

    def test_record_fields_are_not_persisted(self, core, transport):
        """Test that per-record fields do not leak into later reports."""
        core.write(Record("first", Level.ERROR, fields={"attempt": 1}))
        core.write(Record("second", Level.ERROR))

        assert transport.events[0]["extra"] == {"attempt": 1}
        assert transport.events[1]["extra"] == {}

    def test_record_fields_override_core_fields(self, core, transport):
        """Test that a record field wins over a context field of the same name."""
        derived = core.with_fields({"disk": "/dev/sda1", "host": "db1"})

        derived.write(Record("disk full", Level.ERROR, fields={"disk": "/dev/sdb1"}))

        assert transport.events[0]["extra"] == {"disk": "/dev/sdb1", "host": "db1"}

    def test_error_does_not_wait(self, core, transport):
        """Test that ERROR records are fire-and-forget."""
        core.write(Record("boom", Level.ERROR))

        assert transport.wait_count == 0

    @pytest.mark.parametrize("level", [Level.DPANIC, Level.PANIC, Level.FATAL])
    def test_levels_above_error_wait_after_capture(self, core, transport, level):
        """Test that severe records flush before write returns."""
        core.write(Record("crashing", level))

        assert transport.calls == ["capture", "wait"]
        assert transport.events[0]["level"] == "fatal"

    def test_submission_failure_is_swallowed(self, caplog):
        """Test that a failing capture is logged and counted, not raised."""
        transport = SilentTransport(fail_captures=True)
        core = SentryCore(transport, trace_enabled=False)

        with caplog.at_level(logging.WARNING, logger="sentry_sink.sentry_core"):
            core.write(Record("boom", Level.ERROR))

        assert core.submission_failures == 1
        assert "Failed to submit report" in caplog.text

    def test_submission_failures_shared_with_derived_cores(self):
        """Test that failures on a derived core are counted on its parent too."""
        core = SentryCore(SilentTransport(fail_captures=True), trace_enabled=False)
        child = core.with_fields({"request_id": "abc"})

        child.write(Record("boom", Level.ERROR))
        core.write(Record("boom", Level.ERROR))

        assert core.submission_failures == 2
        assert child.submission_failures == 2
        assert child.stats is core.stats

    def test_flush_failure_on_fatal_is_swallowed(self, caplog):
        """Test that a failing flush during a FATAL write does not raise."""
        transport = SilentTransport(fail_waits=True)
        core = SentryCore(transport, trace_enabled=False)

        with caplog.at_level(logging.WARNING, logger="sentry_sink.sentry_core"):
            core.write(Record("crashing", Level.FATAL))

        assert transport.capture_count == 1
        assert "Failed to flush" in caplog.text


class TestWithFields:
    """Tests for deriving cores with additional context."""

    def test_derived_core_shares_configuration(self, core, transport):
        """Test that derived cores keep transport, gate, tags and trace toggle."""
        derived = core.with_fields({"request_id": "abc"})

        assert derived is not core
        assert derived.transport is transport
        assert derived.gate is core.gate
        assert derived.tags == {"env": "prod"}
        assert derived.trace_enabled is False

    def test_derived_core_does_not_mutate_parent(self, core, transport):
        """Test that the parent's fields are untouched by a derive."""
        core.with_fields({"request_id": "abc"})

        core.write(Record("boom", Level.ERROR))

        assert transport.events[0]["extra"] == {}

    def test_chained_derives_compose(self, core, transport):
        """Test that chained derives accumulate fields."""
        derived = core.with_fields({"service": "api"}).with_fields({"request_id": "abc"})

        derived.write(Record("boom", Level.ERROR))

        assert transport.events[0]["extra"] == {"service": "api", "request_id": "abc"}

    def test_with_fields_does_not_submit(self, core, transport):
        """Test that deriving never sends a report."""
        core.with_fields({"a": 1})

        assert transport.calls == []

    def test_derived_core_keeps_tags_on_reports(self, core, transport):
        """Test that reports from derived cores still carry the tag map."""
        core.with_fields({"a": 1}).write(Record("boom", Level.ERROR))

        assert transport.tags[0] == {"env": "prod"}


class TestSync:
    """Tests for sync."""

    def test_sync_waits(self, core, transport):
        """Test that sync waits on the transport."""
        core.sync()

        assert transport.wait_count == 1

    def test_sync_propagates_errors(self):
        """Test that a failing wait is raised from sync."""
        core = SentryCore(SilentTransport(fail_waits=True))

        with pytest.raises(TransportError):
            core.sync()


class TestStacktrace:
    """Tests for stack trace attachment."""

    def test_trace_attached_when_enabled(self, transport):
        """Test that an enabled core attaches the caller's frames."""
        core = SentryCore(transport, trace_enabled=True)

        core.write(Record("boom", Level.ERROR))

        event = transport.events[0]
        frames = event["threads"]["values"][0]["stacktrace"]["frames"]
        assert frames[-1]["function"] == "test_trace_attached_when_enabled"
        assert all(not (f["module"] or "").startswith("sentry_sink") for f in frames)

    def test_trace_omitted_when_disabled(self, core, transport):
        """Test that a disabled core sends no stack trace."""
        core.write(Record("boom", Level.ERROR))

        assert "threads" not in transport.events[0]
