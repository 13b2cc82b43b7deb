# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Sentry-backed sink core."""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from .core import Core
from .fields import EMPTY, FieldsLike, FieldStore
from .levels import Level, MinLevel, sentry_severity
from .record import Record
from .stacktrace import PLATFORM, TRACE_CONTEXT_LINES, TRACE_SKIP_FRAMES, capture_stacktrace
from .transport import Transport

logger = logging.getLogger(__name__)


class SubmissionStats:
    """Thread-safe submission failure counter shared by derived cores."""

    def __init__(self):
        self._lock = threading.Lock()
        self.failures = 0

    def record_failure(self) -> None:
        with self._lock:
            self.failures += 1


class SentryCore(Core):
    """Core that turns log records into Sentry reports.

    Records above ERROR (DPANIC, PANIC, FATAL) block until the transport
    has delivered every pending report, since the process may be about
    to exit.

    Example:
        core = SentryCore(SentryTransport(dsn), minimum=Level.ERROR, tags={"env": "prod"})
        request_core = core.with_fields({"request_id": "abc"})
        request_core.write(Record("disk full", Level.ERROR, fields={"disk": "/dev/sda1"}))
    """

    def __init__(
        self,
        transport: Transport,
        minimum: "str | int | Level" = Level.ERROR,
        tags: Mapping[str, str] | None = None,
        trace_enabled: bool = True,
        fields: FieldStore | None = None,
        stats: SubmissionStats | None = None,
    ):
        """Initialize Sentry core.

        Args:
            transport: Transport used to submit reports
            minimum: Lowest level that produces a report
            tags: Tags attached to every report
            trace_enabled: Attach a stack trace to every report
            fields: Initial context fields
            stats: Failure counter, shared with the core this one derives from
        """
        self.transport = transport
        self.gate = minimum if isinstance(minimum, MinLevel) else MinLevel(minimum)
        self.tags: Mapping[str, str] = dict(tags or {})
        self.trace_enabled = trace_enabled
        self.fields = fields if fields is not None else EMPTY
        self.stats = stats if stats is not None else SubmissionStats()

    @property
    def submission_failures(self) -> int:
        return self.stats.failures

    def enabled(self, level: int) -> bool:
        return self.gate.enabled(level)

    def with_fields(self, fields: FieldsLike) -> "SentryCore":
        return SentryCore(
            transport=self.transport,
            minimum=self.gate,
            tags=self.tags,
            trace_enabled=self.trace_enabled,
            fields=self.fields.derive(fields),
            stats=self.stats,
        )

    def build_event(self, record: Record) -> dict[str, Any]:
        """Build the Sentry event for a record.

        Fields attached to the record are merged for this event only and
        are not kept on the core.
        """
        event: dict[str, Any] = {
            "message": record.message,
            "timestamp": record.timestamp,
            "level": sentry_severity(record.level),
            "platform": PLATFORM,
            "extra": self.fields.derive(record.fields).as_dict(),
        }
        if record.logger_name:
            event["logger"] = record.logger_name

        if self.trace_enabled:
            # Skip capture_stacktrace and this method
            stacktrace = capture_stacktrace(TRACE_SKIP_FRAMES, TRACE_CONTEXT_LINES)
            if stacktrace is not None:
                event["threads"] = {
                    "values": [{"stacktrace": stacktrace, "crashed": False, "current": True}]
                }

        return event

    def write(self, record: Record) -> None:
        event = self.build_event(record)

        try:
            self.transport.capture(event, self.tags)
        except Exception:
            self.stats.record_failure()
            logger.warning("Failed to submit report to Sentry", exc_info=True)

        # The process may be about to exit; flush pending reports.
        if record.level > Level.ERROR:
            try:
                self.transport.wait()
            except Exception:
                logger.warning("Failed to flush Sentry reports", exc_info=True)

    def sync(self) -> None:
        self.transport.wait()
