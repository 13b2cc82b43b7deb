# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Caller-facing logger interface and its core-backed implementation."""

import sys
from abc import ABC, abstractmethod
from typing import Any

from .core import Core
from .exceptions import PanicError
from .levels import Level
from .record import Record


class Logger(ABC):
    """Abstract base class for loggers."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug-level message.

        Args:
            message: The log message
            **kwargs: Additional structured data to log
        """
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info-level message.

        Args:
            message: The log message
            **kwargs: Additional structured data to log
        """
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning-level message.

        Args:
            message: The log message
            **kwargs: Additional structured data to log
        """
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error-level message.

        Args:
            message: The log message
            **kwargs: Additional structured data to log
        """
        pass

    @abstractmethod
    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error-level message from inside an exception handler.

        Args:
            message: The log message
            **kwargs: Additional structured data to log
        """
        pass

    @abstractmethod
    def dpanic(self, message: str, **kwargs: Any) -> None:
        """Log a DPANIC message; raises PanicError in development."""
        pass

    @abstractmethod
    def panic(self, message: str, **kwargs: Any) -> None:
        """Log a PANIC message, then raise PanicError."""
        pass

    @abstractmethod
    def fatal(self, message: str, **kwargs: Any) -> None:
        """Log a FATAL message, then exit the process with status 1."""
        pass

    @abstractmethod
    def with_fields(self, **kwargs: Any) -> "Logger":
        """Return a child logger that adds ``kwargs`` to every record."""
        pass

    @abstractmethod
    def sync(self) -> None:
        """Flush every buffered record."""
        pass


class SinkLogger(Logger):
    """Logger that writes records to a sink core.

    Example:
        >>> logger = SinkLogger(StdoutCore(level="DEBUG"), name="my-service")
        >>> request_logger = logger.with_fields(request_id="abc")
        >>> request_logger.error("Upload failed", bucket="archive")
    """

    def __init__(self, core: Core, name: str | None = None, development: bool = False):
        """Initialize sink logger.

        Args:
            core: Core receiving the records
            name: Logger name stamped on each record
            development: Raise on DPANIC records
        """
        self.core = core
        self.name = name
        self.development = development

    def _log(
        self,
        level: Level,
        message: str,
        fields: dict[str, Any],
        exc_info: BaseException | None = None,
    ) -> None:
        record = Record(
            message=message,
            level=level,
            fields=fields,
            logger_name=self.name,
            exc_info=exc_info,
        )
        if self.core.check(record):
            self.core.write(record)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(Level.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(Level.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(Level.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(Level.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        exc = sys.exc_info()[1]
        if exc is not None:
            kwargs.setdefault("error", exc)
        self._log(Level.ERROR, message, kwargs, exc_info=exc)

    def dpanic(self, message: str, **kwargs: Any) -> None:
        self._log(Level.DPANIC, message, kwargs)
        if self.development:
            raise PanicError(message, kwargs)

    def panic(self, message: str, **kwargs: Any) -> None:
        self._log(Level.PANIC, message, kwargs)
        raise PanicError(message, kwargs)

    def fatal(self, message: str, **kwargs: Any) -> None:
        self._log(Level.FATAL, message, kwargs)
        raise SystemExit(1)

    def with_fields(self, **kwargs: Any) -> "SinkLogger":
        if not kwargs:
            return self
        return SinkLogger(self.core.with_fields(kwargs), name=self.name, development=self.development)

    def sync(self) -> None:
        self.core.sync()

