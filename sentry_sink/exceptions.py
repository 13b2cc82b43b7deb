# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exception types raised by the Sentry logging sink."""


class SinkError(Exception):
    """Base class for all sink errors."""


class SinkConfigurationError(SinkError, ValueError):
    """Raised when a sink cannot be built from its configuration.

    A DSN that is neither empty nor disabled but is rejected by the
    transport is unrecoverable; callers are expected to halt startup.
    """


class TransportError(SinkError):
    """Raised when the remote transport cannot confirm delivery."""


class PanicError(SinkError):
    """Raised after a record is written at PANIC (or DPANIC in development)."""

    def __init__(self, message: str, fields: dict | None = None):
        super().__init__(message)
        self.fields = fields or {}
