# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Remote transports that deliver reports to the error-tracking service."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import sentry_sdk

from .config import SentryConfig
from .exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract base class for report transports.

    Implementations must be safe to call from several threads, since
    derived sink cores share one transport.
    """

    @abstractmethod
    def capture(self, event: dict[str, Any], tags: Mapping[str, str]) -> str | None:
        """Submit a report without waiting for delivery.

        Args:
            event: Report payload in the Sentry event format
            tags: Tags to attach to the report

        Returns:
            Identifier of the submitted event, if one was assigned
        """
        pass

    @abstractmethod
    def wait(self) -> None:
        """Block until every previously captured report is delivered or failed.

        Raises:
            TransportError: If delivery cannot be confirmed
        """
        pass


class SentryTransport(Transport):
    """Transport backed by a dedicated ``sentry_sdk.Client``.

    The client delivers events from its own background worker, so
    ``capture`` returns immediately and ``wait`` flushes the queue.

    Example:
        transport = SentryTransport(dsn="https://key@o0.ingest.sentry.io/1")
        transport.capture({"message": "disk full", "level": "error"}, {"env": "prod"})
        transport.wait()
    """

    def __init__(
        self,
        dsn: str,
        environment: str | None = None,
        release: str | None = None,
        **client_options: Any,
    ):
        """Initialize the Sentry client.

        Args:
            dsn: Sentry DSN for the project
            environment: Environment name (production, staging, development)
            release: Release identifier
            **client_options: Extra ``sentry_sdk.Client`` options

        Raises:
            sentry_sdk.utils.BadDsn: If the DSN cannot be parsed
        """
        self.dsn = dsn
        self.environment = environment
        options: dict[str, Any] = {
            # Integrations hook global state; this client only sends what it is given
            "default_integrations": False,
            "auto_enabling_integrations": False,
        }
        options.update(client_options)
        self._client = sentry_sdk.Client(
            dsn=dsn,
            environment=environment,
            release=release,
            **options,
        )

    @classmethod
    def from_config(cls, config: SentryConfig) -> "SentryTransport":
        """Create a SentryTransport from sink configuration."""
        return cls(dsn=config.dsn, environment=config.environment, release=config.release)

    def capture(self, event: dict[str, Any], tags: Mapping[str, str]) -> str | None:
        if tags:
            event = dict(event)
            event["tags"] = {**event.get("tags", {}), **tags}
        return self._client.capture_event(event)

    def wait(self) -> None:
        if self._client.transport is None:
            raise TransportError("Sentry client is closed; cannot confirm delivery")
        self._client.flush()

    def close(self) -> None:
        """Flush pending events and shut the client down."""
        self._client.close()


class SilentTransport(Transport):
    """Transport that stores reports in memory.

    Useful for unit tests and local development where reports should be
    inspected instead of delivered.
    """

    def __init__(self, fail_captures: bool = False, fail_waits: bool = False):
        """Initialize silent transport.

        Args:
            fail_captures: Raise TransportError from capture (simulates a
                submission failure)
            fail_waits: Raise TransportError from wait
        """
        self.fail_captures = fail_captures
        self.fail_waits = fail_waits
        self.events: list[dict[str, Any]] = []
        self.tags: list[dict[str, str]] = []
        self.wait_count = 0
        self.calls: list[str] = []

    def capture(self, event: dict[str, Any], tags: Mapping[str, str]) -> str | None:
        self.calls.append("capture")
        if self.fail_captures:
            raise TransportError("capture failed")
        self.events.append(event)
        self.tags.append(dict(tags))
        return f"{len(self.events):032x}"

    def wait(self) -> None:
        self.calls.append("wait")
        self.wait_count += 1
        if self.fail_waits:
            raise TransportError("wait failed")

    @property
    def capture_count(self) -> int:
        return len(self.events)

    def get_events(self, level: str | None = None) -> list[dict[str, Any]]:
        """Get captured events, optionally filtered by Sentry severity."""
        if level:
            return [e for e in self.events if e.get("level") == level]
        return self.events

    def clear(self) -> None:
        """Clear all stored events and counters."""
        self.events.clear()
        self.tags.clear()
        self.calls.clear()
        self.wait_count = 0
