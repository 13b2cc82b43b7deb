# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for severity levels and the Sentry severity mapping."""

import itertools
import logging

import pytest

from sentry_sink import Level, MinLevel, parse_level, sentry_severity
from sentry_sink.levels import stdlib_level


class TestSentrySeverity:
    """Tests for sentry_severity mapping."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            (Level.DEBUG, "info"),
            (Level.INFO, "info"),
            (Level.WARNING, "warning"),
            (Level.ERROR, "error"),
            (Level.DPANIC, "fatal"),
            (Level.PANIC, "fatal"),
            (Level.FATAL, "fatal"),
        ],
    )
    def test_known_levels(self, level, expected):
        """Test the mapping of every known level."""
        assert sentry_severity(level) == expected

    def test_unknown_level_is_fatal(self):
        """Test that unrecognized levels are treated as fatal."""
        assert sentry_severity(42) == "fatal"
        assert sentry_severity(-7) == "fatal"

    def test_unknown_level_is_deterministic(self):
        """Test that the same unknown level maps the same way twice."""
        assert sentry_severity(99) == sentry_severity(99) == "fatal"

    def test_plain_int_values_map_like_levels(self):
        """Test that integer values of known levels map like the enum."""
        assert sentry_severity(2) == "error"
        assert sentry_severity(1) == "warning"


class TestParseLevel:
    """Tests for parse_level."""

    def test_parse_names_case_insensitive(self):
        """Test parsing level names regardless of case."""
        assert parse_level("debug") == Level.DEBUG
        assert parse_level("Error") == Level.ERROR
        assert parse_level("FATAL") == Level.FATAL

    def test_parse_aliases(self):
        """Test WARN and CRITICAL aliases."""
        assert parse_level("warn") == Level.WARNING
        assert parse_level("critical") == Level.FATAL

    def test_parse_int_and_level(self):
        """Test parsing integers and Level instances."""
        assert parse_level(2) == Level.ERROR
        assert parse_level(Level.PANIC) is Level.PANIC

    def test_parse_invalid_name(self):
        """Test that unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            parse_level("verbose")

    def test_parse_invalid_int(self):
        """Test that unknown integers raise ValueError."""
        with pytest.raises(ValueError):
            parse_level(42)


class TestMinLevel:
    """Tests for the MinLevel gate."""

    def test_gate_ordering_for_all_pairs(self):
        """Test that a gate rejects lower levels and admits its own level."""
        for low, high in itertools.combinations(sorted(Level), 2):
            gate = MinLevel(high)
            assert not gate.enabled(low)
            assert gate.enabled(high)

    def test_gate_admits_higher_levels(self):
        """Test that levels above the minimum pass."""
        gate = MinLevel("error")
        assert gate.enabled(Level.FATAL)
        assert gate.enabled(Level.DPANIC)
        assert not gate.enabled(Level.WARNING)


class TestStdlibLevel:
    """Tests for mapping to stdlib logging levels."""

    def test_panic_levels_are_critical(self):
        """Test that DPANIC, PANIC and FATAL map to CRITICAL."""
        for level in (Level.DPANIC, Level.PANIC, Level.FATAL):
            assert stdlib_level(level) == logging.CRITICAL

    def test_common_levels(self):
        """Test DEBUG through ERROR."""
        assert stdlib_level(Level.DEBUG) == logging.DEBUG
        assert stdlib_level(Level.INFO) == logging.INFO
        assert stdlib_level(Level.WARNING) == logging.WARNING
        assert stdlib_level(Level.ERROR) == logging.ERROR
