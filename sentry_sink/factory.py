# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory functions for building sink cores and loggers."""

import logging
import os
import threading
from collections.abc import Callable

from .config import SentryConfig
from .core import Core, NopCore, TeeCore
from .exceptions import SinkConfigurationError
from .levels import Level
from .local_core import StdoutCore
from .logger import Logger, SinkLogger
from .sentry_core import SentryCore
from .transport import SentryTransport, Transport

logger = logging.getLogger(__name__)

DEVELOPMENT = "development"
PRODUCTION = "production"
NOP = "nop"

TransportFactory = Callable[[SentryConfig], Transport]

_default_logger: Logger | None = None
_default_lock = threading.Lock()


def _default(value: str | None, env_var: str, fallback: str) -> str:
    """Helper to pick an explicit value, then env var, then fallback."""
    return (value or os.getenv(env_var) or fallback)


def build_core(config: SentryConfig, transport_factory: TransportFactory | None = None) -> Core:
    """Build a Sentry-backed core from configuration.

    Reports are generated for ERROR and above only.

    Args:
        config: Sentry configuration
        transport_factory: Callable building the transport from the config
            (defaults to SentryTransport.from_config)

    Returns:
        SentryCore, or NopCore when the remote sink is disabled (empty
        DSN, the "test" DSN, or ``config.disabled``)

    Raises:
        SinkConfigurationError: If the transport cannot be constructed
    """
    if not config.is_remote_enabled():
        logger.debug("Sentry sink disabled; reports stay local")
        return NopCore()

    factory = transport_factory or SentryTransport.from_config
    try:
        transport = factory(config)
    except Exception as exc:
        raise SinkConfigurationError(f"Failed to create Sentry transport: {exc}") from exc

    core: Core = SentryCore(
        transport=transport,
        minimum=Level.ERROR,
        tags=config.tags,
        trace_enabled=not config.trace.disabled,
    )
    if config.fields:
        core = core.with_fields(config.fields)
    return core


def _local_core(stage: str, name: str) -> Core:
    if stage == DEVELOPMENT:
        return StdoutCore(level=Level.DEBUG, name=name, json_output=False)
    if stage == PRODUCTION:
        return StdoutCore(level=Level.INFO, name=name, json_output=True)
    if stage == NOP:
        return NopCore()
    raise ValueError(
        f"Unknown stage: {stage}. "
        f"Must be one of: {DEVELOPMENT}, {PRODUCTION}, {NOP}"
    )


def create_logger(
    stage: str | None = None,
    sentry: SentryConfig | None = None,
    name: str | None = None,
    transport_factory: TransportFactory | None = None,
) -> SinkLogger:
    """Factory function to create a logger writing locally and to Sentry.

    Args:
        stage: Local output profile. Options: "development" (DEBUG,
            console lines), "production" (INFO, JSON lines), "nop" (no
            local output). Defaults to LOG_STAGE env or "development".
        sentry: Sentry configuration. Defaults to SentryConfig.from_env().
        name: Logger name. Defaults to LOG_NAME env or "sentry_sink".
        transport_factory: Optional transport factory passed to build_core

    Returns:
        SinkLogger instance

    Raises:
        ValueError: If stage is not recognized
        SinkConfigurationError: If the Sentry configuration is invalid

    Example:
        >>> logger = create_logger(
        ...     stage="production",
        ...     sentry=SentryConfig(dsn="https://key@o0.ingest.sentry.io/1", tags={"env": "prod"}),
        ... )
        >>> logger.error("disk full", disk="/dev/sda1")
    """
    stage = _default(stage, "LOG_STAGE", DEVELOPMENT).lower()
    name = _default(name, "LOG_NAME", "sentry_sink")

    local = _local_core(stage, name)
    remote = build_core(sentry if sentry is not None else SentryConfig.from_env(), transport_factory)

    return SinkLogger(TeeCore(local, remote), name=name, development=stage == DEVELOPMENT)


def set_default_logger(logger_instance: Logger) -> None:
    """Set the process-wide default logger.

    Intended to be called once at startup, before other threads log.
    """
    global _default_logger
    with _default_lock:
        _default_logger = logger_instance


def get_logger() -> Logger:
    """Return the process-wide default logger.

    A development logger without a remote sink is created on first use
    when no default was set.
    """
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            _default_logger = create_logger(stage=DEVELOPMENT, sentry=SentryConfig(disabled=True))
        return _default_logger
