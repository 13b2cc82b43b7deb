# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Log record passed from loggers to sink cores."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .levels import Level


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Record:
    """A single log event.

    Attributes:
        message: The log message
        level: Severity of the event
        timestamp: When the event was emitted (UTC)
        fields: Structured data attached to this event only
        logger_name: Name of the emitting logger, if any
        exc_info: Exception being handled when the event was emitted
    """
    message: str
    level: Level = Level.INFO
    timestamp: datetime = field(default_factory=_utcnow)
    fields: dict[str, Any] = field(default_factory=dict)
    logger_name: str | None = None
    exc_info: BaseException | None = None
