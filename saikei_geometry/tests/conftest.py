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
Pytest Configuration and Fixtures
==================================

Shared fixtures for the Saikei geometry test suite.
"""

import math
from typing import Callable

import pytest

from saikei_geometry.core.polyline import PolyLine, PolyLine2d, PolyLine3d


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "integration: Tests combining several modules")
    config.addinivalue_line("markers", "slow: Slow running tests")


# =============================================================================
# Line Fixtures
# =============================================================================

@pytest.fixture
def straight_line() -> PolyLine2d:
    """Two point line along the X axis, 10 m long."""
    return PolyLine.from_points([(0.0, 0.0), (10.0, 0.0)])


@pytest.fixture
def l_shaped_line() -> PolyLine2d:
    """East 10 m, then north 10 m (left turn at (10, 0))."""
    return PolyLine.from_points([(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)])


@pytest.fixture
def line_3d() -> PolyLine3d:
    """3D line climbing at 10% grade, then level."""
    return PolyLine.from_points([(0.0, 0.0, 0.0), (100.0, 0.0, 10.0), (200.0, 0.0, 10.0)])


@pytest.fixture
def quarter_circle() -> Callable[[float], PolyLine2d]:
    """Factory for quarter circles from (0, r) to (r, 0) with 1 degree steps.

    Returns:
        Function taking a radius and returning the polyline
    """
    def make(radius: float) -> PolyLine2d:
        return PolyLine.from_points([
            (radius * math.sin(math.radians(degree)), radius * math.cos(math.radians(degree)))
            for degree in range(91)
        ])
    return make
