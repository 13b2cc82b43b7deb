# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Local structured-log core writing to stdout."""

import json
import logging
import sys
from typing import Any

from .core import Core
from .fields import EMPTY, FieldsLike, FieldStore
from .levels import Level, MinLevel, stdlib_level
from .record import Record


class StdoutCore(Core):
    """Core that writes records to stdout.

    Production output is one JSON object per line. Development output is
    a tab-separated console line followed by the fields as JSON. Every
    record is also emitted through the stdlib logger of the same name so
    handlers and test harnesses (caplog) can capture it.
    """

    def __init__(
        self,
        level: "str | int | Level" = Level.INFO,
        name: str | None = None,
        json_output: bool = True,
        fields: FieldStore | None = None,
    ):
        """Initialize stdout core.

        Args:
            level: Lowest level written (DEBUG, INFO, WARNING, ERROR, ...)
            name: Logger name for identification
            json_output: Write JSON lines instead of console lines
            fields: Initial context fields

        Raises:
            ValueError: If level is not a known level
        """
        self.gate = level if isinstance(level, MinLevel) else MinLevel(level)
        self.name = name or "sentry_sink"
        self.json_output = json_output
        self.fields = fields if fields is not None else EMPTY

        self._stdlib_logger = logging.getLogger(self.name)
        # Use NOTSET to inherit the root level; filtering happens in the gate
        self._stdlib_logger.setLevel(logging.NOTSET)

    @property
    def level(self) -> Level:
        return self.gate.minimum

    def enabled(self, level: int) -> bool:
        return self.gate.enabled(level)

    def with_fields(self, fields: FieldsLike) -> "StdoutCore":
        return StdoutCore(
            level=self.gate,
            name=self.name,
            json_output=self.json_output,
            fields=self.fields.derive(fields),
        )

    def _format(self, record: Record, extra: dict[str, Any]) -> str:
        timestamp = record.timestamp.isoformat().replace("+00:00", "Z")
        name = record.logger_name or self.name

        if self.json_output:
            log_entry: dict[str, Any] = {
                "timestamp": timestamp,
                "level": record.level.name,
                "logger": name,
                "message": record.message,
            }
            if extra:
                log_entry["extra"] = extra
            return json.dumps(log_entry, default=str)

        line = f"{timestamp}\t{record.level.name}\t{name}\t{record.message}"
        if extra:
            line += "\t" + json.dumps(extra, default=str)
        return line

    def write(self, record: Record) -> None:
        extra = self.fields.derive(record.fields).as_dict()

        try:
            print(self._format(record, extra), file=sys.stdout, flush=True)
        except Exception as e:
            # Fallback to plain text on stderr if formatting or stdout fails
            print(
                f"{record.level.name}: {record.message} (stdout output failed: {e})",
                file=sys.stderr,
                flush=True,
            )

        self._stdlib_logger.log(
            stdlib_level(record.level),
            record.message,
            exc_info=record.exc_info,
            extra={"extra": extra} if extra else None,
        )

    def sync(self) -> None:
        sys.stdout.flush()
