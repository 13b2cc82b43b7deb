# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Sink core interface and the generic no-op and tee cores."""

from abc import ABC, abstractmethod

from .fields import FieldsLike
from .record import Record


class Core(ABC):
    """Abstract base class for sink cores.

    A core decides which levels it handles, carries its own accumulated
    context fields, and writes records to a destination.
    """

    @abstractmethod
    def enabled(self, level: int) -> bool:
        """Return True if records at ``level`` are handled by this core."""
        pass

    @abstractmethod
    def with_fields(self, fields: FieldsLike) -> "Core":
        """Return a new core with ``fields`` added to its context.

        The receiving core is not modified.
        """
        pass

    @abstractmethod
    def write(self, record: Record) -> None:
        """Write a record. Callers check ``enabled`` first."""
        pass

    @abstractmethod
    def sync(self) -> None:
        """Flush buffered output."""
        pass

    def check(self, record: Record) -> bool:
        """Return True if ``record`` passes this core's level gate."""
        return self.enabled(record.level)


class NopCore(Core):
    """Core that handles nothing."""

    def enabled(self, level: int) -> bool:
        return False

    def with_fields(self, fields: FieldsLike) -> "NopCore":
        return self

    def write(self, record: Record) -> None:
        pass

    def sync(self) -> None:
        pass


class TeeCore(Core):
    """Core that duplicates records to several child cores."""

    def __init__(self, *cores: Core):
        self.cores: tuple[Core, ...] = tuple(c for c in cores if not isinstance(c, NopCore))

    def enabled(self, level: int) -> bool:
        return any(core.enabled(level) for core in self.cores)

    def with_fields(self, fields: FieldsLike) -> "TeeCore":
        return TeeCore(*(core.with_fields(fields) for core in self.cores))

    def write(self, record: Record) -> None:
        """Write to every admitting child; the first failure is raised once all were written."""
        first_error: Exception | None = None
        for core in self.cores:
            if not core.check(record):
                continue
            try:
                core.write(record)
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def sync(self) -> None:
        """Sync every child; the first failure is raised once all were synced."""
        first_error: Exception | None = None
        for core in self.cores:
            try:
                core.sync()
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
