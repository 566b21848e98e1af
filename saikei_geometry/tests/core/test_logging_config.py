# ==============================================================================
# Saikei Geometry - Polyline Geometry Kernel for Saikei Civil
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Tests for Logging Configuration Module
=======================================

Tests for the centralized logging setup.
"""

import io
import logging

import pytest

from saikei_geometry.core.logging_config import (
    setup_logging,
    get_logger,
    set_log_level,
    enable_debug,
    disable_debug,
    LOGGER_PREFIX,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the kernel logger back to its default state after every test."""
    yield
    setup_logging()


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.mark.unit
    def test_setup_returns_logger(self):
        """Test that setup_logging returns the kernel logger."""
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == LOGGER_PREFIX
        assert logger.propagate is False

    @pytest.mark.unit
    def test_setup_default_level(self):
        """Test that the default level is WARNING."""
        logger = setup_logging()
        assert logger.level == logging.WARNING

    @pytest.mark.unit
    def test_setup_with_debug_level(self):
        """Test setup with DEBUG level."""
        logger = setup_logging(level=logging.DEBUG)
        assert logger.level == logging.DEBUG

    @pytest.mark.unit
    def test_reinitializing_replaces_handler(self):
        """Test that repeated setup does not stack handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


class TestGetLogger:
    """Tests for get_logger function."""

    @pytest.mark.unit
    def test_package_name_is_mapped(self):
        """Test that package module names move into the kernel namespace."""
        logger = get_logger("saikei_geometry.core.bezier")
        assert logger.name == "saikei.geometry.core.bezier"

    @pytest.mark.unit
    def test_get_logger_uses_prefix(self):
        """Test that other names get the kernel prefix."""
        assert get_logger("test_module").name == f"{LOGGER_PREFIX}.test_module"
        assert get_logger(f"{LOGGER_PREFIX}.x").name == f"{LOGGER_PREFIX}.x"

    @pytest.mark.unit
    def test_get_logger_same_name_same_logger(self):
        """Test that same name returns same logger instance."""
        assert get_logger("same_name") is get_logger("same_name")


class TestLogLevels:
    """Tests for set_log_level, enable_debug and disable_debug."""

    @pytest.mark.unit
    def test_set_log_level(self):
        """Test that the logger and its handlers change level."""
        setup_logging()
        set_log_level(logging.ERROR)
        root = logging.getLogger(LOGGER_PREFIX)
        assert root.level == logging.ERROR
        assert all(handler.level == logging.ERROR for handler in root.handlers)

    @pytest.mark.unit
    def test_enable_and_disable_debug(self):
        """Test the debug switches."""
        setup_logging()
        enable_debug()
        assert logging.getLogger(LOGGER_PREFIX).level == logging.DEBUG
        disable_debug()
        assert logging.getLogger(LOGGER_PREFIX).level == logging.WARNING


class TestLoggerOutput:
    """Tests for logger output functionality."""

    @pytest.mark.unit
    def test_warning_is_written(self):
        """Test that warnings reach the configured stream."""
        stream = io.StringIO()
        setup_logging(stream=stream)
        get_logger("test_output").warning("Test warning message")
        assert "[WARNING] saikei.geometry.test_output: Test warning message" in stream.getvalue()

    @pytest.mark.unit
    def test_debug_filtered_at_warning_level(self):
        """Test that DEBUG messages are filtered by default."""
        stream = io.StringIO()
        setup_logging(stream=stream)
        logger = get_logger("test_filter")
        logger.debug("This should not appear")
        logger.warning("This should appear")
        assert "This should not appear" not in stream.getvalue()
        assert "This should appear" in stream.getvalue()

    @pytest.mark.unit
    def test_detailed_format(self):
        """Test that the detailed format includes the line number."""
        stream = io.StringIO()
        setup_logging(level=logging.INFO, detailed=True, stream=stream)
        get_logger("test_detail").info("Detailed message")
        output = stream.getvalue()
        assert "saikei.geometry.test_detail:" in output
        assert "Detailed message" in output
