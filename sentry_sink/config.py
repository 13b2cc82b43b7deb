# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Configuration for the Sentry logging sink."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import SinkConfigurationError

# Legacy DSN value meaning "no remote sink"
TEST_DSN = "test"


@dataclass(frozen=True)
class TraceConfig:
    """Stack trace capture settings.

    Attributes:
        disabled: When True, reports are sent without a stack trace
    """
    disabled: bool = False


@dataclass
class SentryConfig:
    """Minimal set of parameters for Sentry integration.

    Attributes:
        dsn: Sentry DSN. Empty or "test" disables the remote sink.
        tags: Tags attached verbatim to every report
        trace: Stack trace capture settings
        disabled: Explicitly disable the remote sink regardless of dsn
        environment: Sentry environment name (production, staging, ...)
        release: Release identifier reported with every event
        fields: Context fields attached to every report
    """
    dsn: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    trace: TraceConfig = field(default_factory=TraceConfig)
    disabled: bool = False
    environment: str | None = None
    release: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def is_remote_enabled(self) -> bool:
        """Return True if reports should be sent to Sentry."""
        if self.disabled:
            return False
        dsn = (self.dsn or "").strip()
        return bool(dsn) and dsn != TEST_DSN

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SentryConfig":
        """Build a configuration from environment variables.

        Reads SENTRY_DSN, SENTRY_TAGS (``key=value,key2=value2``),
        SENTRY_TRACE_DISABLED, SENTRY_DISABLED, SENTRY_ENVIRONMENT and
        SENTRY_RELEASE.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            SentryConfig instance

        Raises:
            SinkConfigurationError: If SENTRY_TAGS is malformed
        """
        env = environ if environ is not None else os.environ
        return cls(
            dsn=env.get("SENTRY_DSN", ""),
            tags=parse_tags(env.get("SENTRY_TAGS", "")),
            trace=TraceConfig(disabled=_get_bool(env, "SENTRY_TRACE_DISABLED", False)),
            disabled=_get_bool(env, "SENTRY_DISABLED", False),
            environment=env.get("SENTRY_ENVIRONMENT") or None,
            release=env.get("SENTRY_RELEASE") or None,
        )


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None:
        return default

    value_lower = value.lower()
    if value_lower in ("true", "1", "yes", "on"):
        return True
    if value_lower in ("false", "0", "no", "off"):
        return False
    return default


def parse_tags(value: str) -> dict[str, str]:
    """Parse a ``key=value,key2=value2`` string into a tag map.

    Raises:
        SinkConfigurationError: If an entry has no ``=`` or an empty key
    """
    tags: dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, tag_value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise SinkConfigurationError(f"Invalid tag entry: {entry!r}. Expected key=value")
        tags[key] = tag_value.strip()
    return tags
