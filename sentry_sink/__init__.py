# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Sentry logging sink.

Emits log records to a local structured-log sink and to Sentry at the
same time, sharing one severity taxonomy and one set of context fields.

Example:
    >>> from sentry_sink import SentryConfig, create_logger
    >>>
    >>> logger = create_logger(
    ...     stage="production",
    ...     sentry=SentryConfig(dsn="https://key@o0.ingest.sentry.io/1", tags={"env": "prod"}),
    ... )
    >>> request_logger = logger.with_fields(request_id="abc")
    >>> request_logger.error("disk full", disk="/dev/sda1")
    >>> logger.sync()
"""

__version__ = "0.1.0"

from .config import SentryConfig, TraceConfig
from .core import Core, NopCore, TeeCore
from .exceptions import PanicError, SinkConfigurationError, SinkError, TransportError
from .factory import build_core, create_logger, get_logger, set_default_logger
from .fields import FieldStore, derive
from .levels import Level, MinLevel, parse_level, sentry_severity
from .local_core import StdoutCore
from .logger import Logger, SinkLogger
from .record import Record
from .sentry_core import SentryCore
from .transport import SentryTransport, SilentTransport, Transport

__all__ = [
    # Version
    "__version__",
    # Configuration
    "SentryConfig",
    "TraceConfig",
    # Levels
    "Level",
    "MinLevel",
    "parse_level",
    "sentry_severity",
    # Fields and records
    "FieldStore",
    "derive",
    "Record",
    # Cores
    "Core",
    "NopCore",
    "TeeCore",
    "SentryCore",
    "StdoutCore",
    # Transports
    "Transport",
    "SentryTransport",
    "SilentTransport",
    # Loggers
    "Logger",
    "SinkLogger",
    "build_core",
    "create_logger",
    "get_logger",
    "set_default_logger",
    # Errors
    "SinkError",
    "SinkConfigurationError",
    "TransportError",
    "PanicError",
]
